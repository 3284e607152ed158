"""
Tool Validator

Makes sure the external binaries the patcher shells out to are installed
and usable before anything touches the network.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..core.constants import ErrorMessages, NetworkConstants, ToolConstants
from ..core.exceptions import MissingToolError

logger = logging.getLogger(__name__)


class ToolValidator:
    """Checks required local tools"""

    def __init__(self, bin_dir: str = ToolConstants.DEFAULT_BIN_DIR,
                 required_tools: Optional[List[str]] = None,
                 which: Callable[[str], Optional[str]] = shutil.which,
                 runner: Callable = subprocess.run):
        """
        Initialize tool validator

        Args:
            bin_dir: Project-local directory prepended to PATH
            required_tools: Binary names that must resolve on PATH
            which: Lookup used to resolve binaries (shutil.which)
            runner: Process runner used to probe binaries (subprocess.run)
        """
        self.bin_dir = bin_dir
        self.required_tools = required_tools or list(ToolConstants.REQUIRED_TOOLS)
        self.which = which
        self.runner = runner
        self.found: Dict[str, str] = {}

    def _prepend_bin_dir(self) -> None:
        """Put the project bin directory in front of PATH, once"""
        bin_path = str(Path(self.bin_dir).resolve())
        path_entries = os.environ.get("PATH", "").split(os.pathsep)
        if bin_path not in path_entries:
            os.environ["PATH"] = os.pathsep.join([bin_path] + [p for p in path_entries if p])
            logger.debug(f"Prepended {bin_path} to PATH")

    def ensure_tools(self) -> Dict[str, str]:
        """
        Verify every required tool resolves on PATH

        Returns:
            Dict mapping tool name to its resolved path

        Raises:
            MissingToolError: If any tool is missing
        """
        self._prepend_bin_dir()

        missing = []
        for tool in self.required_tools:
            path = self.which(tool)
            if path:
                self.found[tool] = path
                logger.debug(f"Found {tool} at: {path}")
            else:
                missing.append(tool)

        if missing:
            raise MissingToolError("\n".join(
                ErrorMessages.ToolError.TOOL_NOT_FOUND.format(tool=tool, bin_dir=self.bin_dir)
                for tool in missing
            ))

        return dict(self.found)

    def validate_podman(self) -> str:
        """
        Verify podman is installed and its service answers

        Returns:
            str: Path to the podman binary

        Raises:
            MissingToolError: If podman is absent or `podman info` fails
        """
        podman = self.found.get(ToolConstants.PODMAN) or self.which(ToolConstants.PODMAN)
        if not podman:
            raise MissingToolError(
                f"{ErrorMessages.ToolError.PODMAN_NOT_FOUND}\n{ErrorMessages.ToolError.PODMAN_UNREACHABLE}"
            )

        try:
            result = self.runner(
                [podman, "info"],
                capture_output=True,
                text=True,
                timeout=NetworkConstants.PODMAN_TIMEOUT
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise MissingToolError(f"podman info failed: {e}\n{ErrorMessages.ToolError.PODMAN_UNREACHABLE}")

        if result.returncode != 0:
            logger.debug(f"podman info stderr: {result.stderr}")
            raise MissingToolError(
                f"podman info exited with {result.returncode}: {result.stderr.strip()}\n"
                f"{ErrorMessages.ToolError.PODMAN_UNREACHABLE}"
            )

        self.found[ToolConstants.PODMAN] = podman
        return podman
