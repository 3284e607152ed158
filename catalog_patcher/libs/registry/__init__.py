"""
Registry Libraries

Brew registry credentials: token manager, podman login and the cluster
pull secret.
"""

from .broker import RegistryCredentialBroker
from .podman import PodmanClient
from .pull_secret import PullSecretStore, decode_docker_config, encode_docker_config
from .token_client import TokenClient, credentials_from_tokens

__all__ = [
    'RegistryCredentialBroker',
    'PodmanClient',
    'PullSecretStore',
    'TokenClient',
    'credentials_from_tokens',
    'decode_docker_config',
    'encode_docker_config'
]
