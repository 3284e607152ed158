"""
Constants Module

Centralized constants for the catalog patcher: endpoints, registry hosts,
cluster object names and user-facing error messages.
"""


class KubernetesConstants:
    """Kubernetes and OpenShift object constants"""

    from enum import Enum

    # Pull secret holding cluster-wide registry credentials
    PULL_SECRET_NAME = "pull-secret"
    PULL_SECRET_NAMESPACE = "openshift-config"
    PULL_SECRET_DATA_KEY = ".dockerconfigjson"

    # Field manager recorded on server-side applied objects
    FIELD_MANAGER = "catalog-patcher"

    class APIVersion(str, Enum):
        """API versions of the objects applied to the cluster"""
        ICSP = "operator.openshift.io/v1alpha1"
        CATALOG_SOURCE = "operators.coreos.com/v1alpha1"

        def __str__(self) -> str:
            return self.value

    class Kind(str, Enum):
        """Kinds of the objects applied to the cluster"""
        ICSP = "ImageContentSourcePolicy"
        CATALOG_SOURCE = "CatalogSource"

        def __str__(self) -> str:
            return self.value


class CatalogConstants:
    """Power Monitoring catalog constants"""

    POWERMON_BUNDLE = "power-monitoring-operator-bundle-container"
    DEFAULT_OCP_VERSION = "v4.13"

    CATALOG_SOURCE_NAME = "powermon-operator-catalog"
    CATALOG_SOURCE_NAMESPACE = "openshift-marketplace"
    CATALOG_SOURCE_TYPE = "grpc"
    DISPLAY_NAME = "Openshift Power Monitoring"
    PUBLISHER = "Power Mon RC Images"

    ICSP_NAME = "brew-registry"
    # Public hosts whose pulls are redirected to the brew mirror
    MIRRORED_SOURCES = [
        "registry.redhat.io",
        "registry.stage.redhat.io",
        "registry-proxy.engineering.redhat.com",
    ]


class RegistryConstants:
    """Brew registry and token manager constants"""

    BREW_REGISTRY = "brew.registry.redhat.io"
    IIB_REPOSITORY = "rh-osbs/iib"

    TOKEN_MANAGER_URL = "https://employee-token-manager.registry.redhat.com/v1/tokens"
    TOKEN_DESCRIPTION = "for testing cpaas built powermon images on openshift cluster"


class NetworkConstants:
    """Network-related constants"""

    from enum import Enum

    DEFAULT_TIMEOUT = 30
    PODMAN_TIMEOUT = 120

    USER_AGENT = "catalog-patcher/1.0"

    DATAGREPPER_URL = "https://datagrepper.engineering.redhat.com/raw"
    INDEX_BUILT_TOPIC = "/topic/VirtualTopic.eng.ci.redhat-container-image.index.built"
    # Seconds of message history to search (a little over nine days)
    DATAGREPPER_DELTA = 824000

    class ContentType(Enum):
        """Content-Type header values"""
        JSON = "application/json"

        def __str__(self) -> str:
            return self.value


class ToolConstants:
    """External binaries the patcher shells out to"""

    PODMAN = "podman"
    REQUIRED_TOOLS = [PODMAN]

    # Relative to the working directory, like the project tmp/bin of the tools script
    DEFAULT_BIN_DIR = "tmp/bin"
    AUTH_FILE_NAME = "authfile"


class ErrorMessages:
    """Centralized error message templates"""

    from enum import Enum

    class ToolError(str, Enum):
        """Local dependency error templates"""
        TOOL_NOT_FOUND = (
            "Required tool '{tool}' not found on PATH.\n"
            "Install it or place it in {bin_dir} and rerun the script."
        )
        PODMAN_NOT_FOUND = "No podman found"
        PODMAN_UNREACHABLE = "Please install podman or make sure its running"

        def __str__(self) -> str:
            return self.value

    class IndexImageError(str, Enum):
        """Index image lookup error templates"""
        NO_MATCHING_IMAGE = (
            "No matching index image found. Please check if provided OCP version "
            "is available or connected to VPN!"
        )

        def __str__(self) -> str:
            return self.value

    class RegistryError(str, Enum):
        """Registry credential error templates"""
        TOKEN_UNAVAILABLE = (
            "Could not get token. Please use the following command to create a token "
            "and retry the script. Make sure to be connected on VPN:\n"
            "curl --negotiate -u : -X POST -H 'Content-Type: application/json' "
            "--data '{{\"description\":\"{description}\"}}' {url} -s"
        )
        MALFORMED_TOKEN = "Token response does not carry credentials.username and credentials.password"
        LOGIN_FAILED = "Logging to brew registry failed"
        PULL_SECRET_CONFLICT = (
            "Pull secret {namespace}/{name} was modified while it was being updated "
            "(resourceVersion {resource_version} is stale). Rerun the script."
        )

        def __str__(self) -> str:
            return self.value

    class StageError(str, Enum):
        """Per-stage abort lines printed after the failure detail"""
        FIX_AND_RERUN = "Fix issues reported above and rerun the script"
        INDEX_IMAGE = "Fail to get index image"
        BREW_REGISTRY = "Fail to add brew registry"
        ICSP = "Fail to create ImageContentSourcePolicy"
        CATALOG_SOURCE = "Fail to add CatalogSource"

        def __str__(self) -> str:
            return self.value

    # Shortcuts for the most used templates
    NO_MATCHING_IMAGE = IndexImageError.NO_MATCHING_IMAGE
    TOKEN_UNAVAILABLE = RegistryError.TOKEN_UNAVAILABLE
    LOGIN_FAILED = RegistryError.LOGIN_FAILED
