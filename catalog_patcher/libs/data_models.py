"""
Data Models Module.

Typed records passed between the patcher stages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class RunState(str, Enum):
    """Stages of a patcher run, in the order they are reached"""
    START = "start"
    TOOLS_OK = "tools_ok"
    PODMAN_OK = "podman_ok"
    INDEX_RESOLVED = "index_resolved"
    REGISTRY_AUTHENTICATED = "registry_authenticated"
    ICSP_APPLIED = "icsp_applied"
    CATALOG_APPLIED = "catalog_applied"
    DONE = "done"
    ABORTED = "aborted"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def ordered(cls) -> list:
        """Get the successful path through the run"""
        return [
            cls.START,
            cls.TOOLS_OK,
            cls.PODMAN_OK,
            cls.INDEX_RESOLVED,
            cls.REGISTRY_AUTHENTICATED,
            cls.ICSP_APPLIED,
            cls.CATALOG_APPLIED,
            cls.DONE,
        ]

    def next_state(self) -> "RunState":
        """Return the state that follows this one on success"""
        path = RunState.ordered()
        if self not in path or self is RunState.DONE:
            raise ValueError(f"No state follows {self.value}")
        return path[path.index(self) + 1]


@dataclass
class PatcherSettings:
    """Effective settings of a run after env, config file and CLI are merged"""
    ocp_version: str
    bundle: str
    datagrepper_url: str
    token_manager_url: str
    brew_registry: str
    iib_repository: str
    token_description: str
    tools_bin_dir: str
    http_timeout: int = 30
    create_token: bool = False
    skip_tls: bool = False
    debug: bool = False

    @property
    def iib_prefix(self) -> str:
        """Registry path every resolved index image is rewritten onto"""
        return f"{self.brew_registry}/{self.iib_repository}"


@dataclass
class IndexImage:
    """Index image found in the message history"""
    ocp_version: str
    source_image: str
    image: str

    @property
    def tag(self) -> str:
        return self.image.rsplit(":", 1)[-1]


@dataclass
class RegistryCredentials:
    """Username and password issued by the token manager"""
    username: str
    password: str = field(repr=False)
    description: Optional[str] = None


@dataclass
class PullSecret:
    """Decoded cluster pull secret and the version it was read at"""
    name: str
    namespace: str
    docker_config: Dict[str, Any]
    resource_version: Optional[str] = None

    @property
    def registries(self) -> list:
        return sorted(self.docker_config.get("auths", {}).keys())


@dataclass
class RunResult:
    """Outcome of a patcher run"""
    state: RunState
    index_image: Optional[str] = None
    failed_stage: Optional[RunState] = None
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
