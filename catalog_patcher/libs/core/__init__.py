"""
Core Libraries

Shared functionality and utilities for the catalog patcher.
"""

from .auth import OpenShiftAuth
from .config import ConfigManager
from .exceptions import (
    PatcherError,
    ConfigurationError,
    AuthenticationError,
    MissingToolError,
    NetworkError,
    IndexImageNotFoundError,
    TokenError,
    RegistryLoginError,
    PullSecretConflictError,
    ClusterAPIError,
    ApplyError,
)
from .utils import setup_logging, disable_ssl_warnings, header, ok, fail, line

__all__ = [
    'OpenShiftAuth',
    'ConfigManager',
    'PatcherError',
    'ConfigurationError',
    'AuthenticationError',
    'MissingToolError',
    'NetworkError',
    'IndexImageNotFoundError',
    'TokenError',
    'RegistryLoginError',
    'PullSecretConflictError',
    'ClusterAPIError',
    'ApplyError',
    'setup_logging',
    'disable_ssl_warnings',
    'header',
    'ok',
    'fail',
    'line',
]
