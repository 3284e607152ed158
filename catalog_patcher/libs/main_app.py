"""
Main Application

Runs the patcher stages in order: tool checks, index image lookup, brew
registry credentials, ImageContentSourcePolicy and CatalogSource. The first
failing stage aborts the run.
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional, Tuple

import requests

from .core import ConfigManager, OpenShiftAuth, setup_logging, disable_ssl_warnings, header, ok, fail, line
from .core.constants import ErrorMessages, ToolConstants
from .core.exceptions import ConfigurationError, PatcherError
from .data_models import IndexImage, PatcherSettings, RunResult, RunState
from .cluster import ManifestApplier
from .index import IndexImageResolver
from .registry import PodmanClient, PullSecretStore, RegistryCredentialBroker, TokenClient
from .tools import ToolValidator

logger = logging.getLogger(__name__)


class CatalogPatcher:
    """Orchestrates a patcher run"""

    def __init__(
        self,
        settings: PatcherSettings,
        tool_validator: Optional[ToolValidator] = None,
        resolver: Optional[IndexImageResolver] = None,
        auth: Optional[OpenShiftAuth] = None,
        broker: Optional[RegistryCredentialBroker] = None,
        applier: Optional[ManifestApplier] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the patcher with dependency injection

        Cluster clients are only built when a cluster stage needs them, so
        nothing talks to the cluster before the index image is resolved.

        Args:
            settings: Effective run settings
            tool_validator: Local tool checks (defaults to ToolValidator)
            resolver: Index image resolver (defaults to IndexImageResolver)
            auth: Cluster context loader (defaults to OpenShiftAuth)
            broker: Registry credential broker (built from auth when omitted)
            applier: Manifest applier (built from auth when omitted)
            session: HTTP session shared by the HTTP clients
        """
        self.settings = settings
        self.session = session or requests.Session()
        self.tool_validator = tool_validator or ToolValidator(bin_dir=settings.tools_bin_dir)
        self.resolver = resolver or IndexImageResolver(settings, session=self.session)
        self.auth = auth or OpenShiftAuth(skip_tls=settings.skip_tls)
        self._broker = broker
        self._applier = applier

        self.state = RunState.START
        self.index_image: Optional[IndexImage] = None

    def _ensure_cluster_auth(self) -> None:
        if not self.auth.is_authenticated():
            self.auth.configure_auth()

    @property
    def broker(self) -> RegistryCredentialBroker:
        if self._broker is None:
            self._ensure_cluster_auth()
            podman = self.tool_validator.found.get(ToolConstants.PODMAN, ToolConstants.PODMAN)
            self._broker = RegistryCredentialBroker(
                self.settings,
                token_client=TokenClient(self.settings, session=self.session),
                podman=PodmanClient(binary=podman),
                pull_secret_store=PullSecretStore(self.auth.core_api)
            )
        return self._broker

    @property
    def applier(self) -> ManifestApplier:
        if self._applier is None:
            self._ensure_cluster_auth()
            self._applier = ManifestApplier(self.auth.get_dynamic_client())
        return self._applier

    def ensure_tools(self) -> None:
        header("Ensuring all tools are installed")
        found = self.tool_validator.ensure_tools()
        ok(f"Found {', '.join(sorted(found))}")

    def validate_podman(self) -> None:
        header("Validating podman")
        self.tool_validator.validate_podman()
        ok("podman is reachable")

    def resolve_index_image(self) -> None:
        header("Fetch index image")
        self.index_image = self.resolver.resolve(self.settings.ocp_version)
        ok(f"Using index image: {self.index_image.image}")

    def add_brew_registry(self) -> None:
        header("Getting credentials for brew registry")
        self.broker.authenticate()

    def create_icsp(self) -> None:
        header("Creating ImageContentSourcePolicy to mirror images..")
        self.applier.apply_image_content_source_policy(self.settings.brew_registry)

    def add_catalog_source(self) -> None:
        header("Adding CatalogSource for power monitoring with index Image...")
        self.applier.apply_catalog_source(self.index_image.image)

    def stages(self) -> List[Tuple[Callable[[], None], str]]:
        """Stage callables in run order, each with the line printed when it aborts"""
        return [
            (self.ensure_tools, ErrorMessages.StageError.FIX_AND_RERUN),
            (self.validate_podman, ErrorMessages.StageError.FIX_AND_RERUN),
            (self.resolve_index_image, ErrorMessages.StageError.INDEX_IMAGE),
            (self.add_brew_registry, ErrorMessages.StageError.BREW_REGISTRY),
            (self.create_icsp, ErrorMessages.StageError.ICSP),
            (self.add_catalog_source, ErrorMessages.StageError.CATALOG_SOURCE),
        ]

    def _abort(self, error: PatcherError, abort_message: str) -> RunResult:
        failed_stage = self.state.next_state()
        fail(str(error))
        line(60, "heavy")
        fail(str(abort_message))

        self.state = RunState.ABORTED
        return RunResult(
            state=self.state,
            index_image=self.index_image.image if self.index_image else None,
            failed_stage=failed_stage,
            message=str(error)
        )

    def run(self) -> RunResult:
        """
        Run every stage; the first failure aborts

        Returns:
            RunResult with the final state, DONE or ABORTED
        """
        self.state = RunState.START
        self.index_image = None

        for stage, abort_message in self.stages():
            try:
                stage()
            except PatcherError as e:
                return self._abort(e, abort_message)
            self.state = self.state.next_state()
            logger.debug(f"Reached state {self.state}")

        self.state = RunState.DONE
        header("All Done")
        return RunResult(state=self.state, index_image=self.index_image.image)


def create_catalog_patcher(settings: PatcherSettings, **kwargs) -> CatalogPatcher:
    """
    Factory function to create a CatalogPatcher with default dependencies

    Args:
        settings: Effective run settings
        **kwargs: Dependencies to override

    Returns:
        CatalogPatcher instance
    """
    return CatalogPatcher(settings, **kwargs)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command line parser; every flag is optional"""
    parser = argparse.ArgumentParser(
        prog="catalog-patcher",
        description=(
            "Install a CatalogSource for the brew-built Power Monitoring index image "
            "on the current OpenShift cluster."
        ),
        epilog="Environment: OCP_VERSION selects the OpenShift version (default v4.13)."
    )
    parser.add_argument('--ocp-version', dest='ocp_version', default=None,
                        help='OpenShift version of the index image, e.g. v4.14 (overrides OCP_VERSION)')
    parser.add_argument('--config', default=None,
                        help='YAML configuration file')
    parser.add_argument('--tools-bin-dir', dest='tools_bin_dir', default=None,
                        help='Directory prepended to PATH when looking up tools')
    parser.add_argument('--create-token', dest='create_token', action='store_true', default=None,
                        help='Create a registry token when none exists')
    parser.add_argument('--skip-tls', dest='skip_tls', action='store_true', default=None,
                        help='Skip TLS verification for HTTP and cluster requests')
    parser.add_argument('--debug', action='store_true', default=None,
                        help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point

    Returns:
        Exit code (0 when every stage completed, 1 otherwise)
    """
    args = create_argument_parser().parse_args(argv)

    try:
        config_manager = ConfigManager()
        if args.config:
            config_manager.load_config(args.config)

        settings = config_manager.build_settings(overrides={
            'ocp_version': args.ocp_version,
            'tools_bin_dir': args.tools_bin_dir,
            'create_token': args.create_token,
            'skip_tls': args.skip_tls,
            'debug': args.debug,
        })
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.debug)
    if settings.skip_tls:
        disable_ssl_warnings()

    try:
        result = create_catalog_patcher(settings).run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 1

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
