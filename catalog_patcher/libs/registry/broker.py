"""
Registry Credential Broker

Authorizes the cluster to pull from the brew registry: token manager
credentials are added to the cluster pull secret through a podman login
against a temporary copy of it.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from ..core.constants import ToolConstants
from ..core.exceptions import RegistryLoginError
from ..core.utils import ok
from ..data_models import PatcherSettings
from .podman import PodmanClient
from .pull_secret import PullSecretStore
from .token_client import TokenClient

logger = logging.getLogger(__name__)


class RegistryCredentialBroker:
    """Adds brew registry credentials to the cluster pull secret"""

    def __init__(self, settings: PatcherSettings, token_client: TokenClient,
                 podman: PodmanClient, pull_secret_store: PullSecretStore):
        self.settings = settings
        self.token_client = token_client
        self.podman = podman
        self.pull_secret_store = pull_secret_store

    @staticmethod
    def _write_authfile(path: Path, docker_config: Dict[str, Any]) -> None:
        """Write docker_config readable by the current user only"""
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, 'w') as f:
            json.dump(docker_config, f)

    @staticmethod
    def _read_authfile(path: Path) -> Dict[str, Any]:
        try:
            with open(path, 'r') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise RegistryLoginError(f"podman left an unreadable authfile: {e}")

    def authenticate(self) -> Dict[str, Any]:
        """
        Log the cluster pull secret in to the brew registry

        Returns:
            Docker config now stored in the pull secret

        Raises:
            TokenError: If no credentials can be obtained
            RegistryLoginError: If podman login fails, the secret is left untouched
            PullSecretConflictError: If the secret changed during the run
            ClusterAPIError: If the secret cannot be read or written
        """
        credentials = self.token_client.fetch_credentials(create_if_missing=self.settings.create_token)
        ok("Found token...")

        logger.info("Getting auth from cluster")
        pull_secret = self.pull_secret_store.read()

        with tempfile.TemporaryDirectory(prefix="catalog-patcher-") as temp_dir:
            authfile = Path(temp_dir) / ToolConstants.AUTH_FILE_NAME
            self._write_authfile(authfile, pull_secret.docker_config)

            logger.info(f"Logging to brew registry {self.settings.brew_registry}")
            self.podman.login(
                self.settings.brew_registry,
                credentials.username,
                credentials.password,
                str(authfile)
            )
            docker_config = self._read_authfile(authfile)

        if docker_config == pull_secret.docker_config:
            ok("Pull secret already holds these brew registry credentials")
            return docker_config

        logger.info("Set auth to cluster")
        self.pull_secret_store.write(pull_secret, docker_config)
        ok(f"Pull secret {pull_secret.namespace}/{pull_secret.name} updated")
        return docker_config
