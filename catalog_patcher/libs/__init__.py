"""
Catalog Patcher Library

Installs a brew-built operator index image as a CatalogSource on an
OpenShift cluster.
"""

__version__ = "1.0.0"

# Core libraries
from .core import OpenShiftAuth, ConfigManager
from .core.exceptions import PatcherError, ConfigurationError, AuthenticationError

# Stage libraries
from .tools import ToolValidator
from .index import IndexImageResolver
from .registry import RegistryCredentialBroker, TokenClient, PodmanClient, PullSecretStore
from .cluster import ManifestApplier, ManifestTemplates

# Main application
from .main_app import CatalogPatcher, create_catalog_patcher, main

__all__ = [
    # Core
    'OpenShiftAuth',
    'ConfigManager',
    'PatcherError',
    'ConfigurationError',
    'AuthenticationError',
    # Stages
    'ToolValidator',
    'IndexImageResolver',
    'RegistryCredentialBroker',
    'TokenClient',
    'PodmanClient',
    'PullSecretStore',
    'ManifestApplier',
    'ManifestTemplates',
    # Main
    'CatalogPatcher',
    'create_catalog_patcher',
    'main'
]
