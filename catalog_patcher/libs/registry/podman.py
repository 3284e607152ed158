"""
Podman Client

Thin wrapper over the podman CLI for registry logins.
"""

import logging
import subprocess
from typing import Callable, List, Optional

from ..core.constants import ErrorMessages, NetworkConstants, ToolConstants
from ..core.exceptions import RegistryLoginError

logger = logging.getLogger(__name__)


class PodmanClient:
    """Runs podman commands"""

    def __init__(self, binary: str = ToolConstants.PODMAN, runner: Callable = subprocess.run):
        """
        Initialize podman client

        Args:
            binary: podman executable
            runner: Process runner (subprocess.run)
        """
        self.binary = binary
        self.runner = runner

    def run(self, args: List[str], input_data: Optional[str] = None) -> subprocess.CompletedProcess:
        """Run a podman command and return the completed process"""
        cmd = [self.binary] + args
        logger.debug(f"Running: {' '.join(cmd)}")
        return self.runner(
            cmd,
            input=input_data,
            capture_output=True,
            text=True,
            timeout=NetworkConstants.PODMAN_TIMEOUT
        )

    def login(self, registry: str, username: str, password: str, authfile: str) -> None:
        """
        Log in to a registry, storing the credentials in authfile

        The password goes through stdin so it never shows up in process listings.

        Raises:
            RegistryLoginError: If podman cannot be run or exits non-zero
        """
        try:
            result = self.run(
                ['login', '--authfile', authfile, '--username', username, '--password-stdin', registry],
                input_data=password
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise RegistryLoginError(f"{ErrorMessages.LOGIN_FAILED}: {e}") from e

        if result.returncode != 0:
            raise RegistryLoginError(f"{ErrorMessages.LOGIN_FAILED}: {result.stderr.strip()}")

        logger.debug(result.stdout.strip())
