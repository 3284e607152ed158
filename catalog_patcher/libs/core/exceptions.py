"""
Exceptions

Error hierarchy for the catalog patcher. Every error is fatal to the run.
"""


class PatcherError(Exception):
    """Base class for all catalog patcher errors"""


class ConfigurationError(PatcherError):
    """Invalid configuration file, environment value or CLI flag"""


class AuthenticationError(PatcherError):
    """Cluster context could not be loaded"""


class MissingToolError(PatcherError):
    """A required local binary is absent or not usable"""


class NetworkError(PatcherError):
    """An HTTP call failed before a usable response arrived"""


class IndexImageNotFoundError(PatcherError):
    """No index image matches the requested OCP version"""


class TokenError(PatcherError):
    """Registry token could not be obtained from the token manager"""


class RegistryLoginError(PatcherError):
    """podman login against the brew registry failed"""


class PullSecretConflictError(PatcherError):
    """The pull secret changed between read and write"""


class ClusterAPIError(PatcherError):
    """A call to the cluster API failed"""


class ApplyError(ClusterAPIError):
    """Applying a manifest to the cluster failed"""
