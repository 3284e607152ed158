"""
Pull Secret Store

Reads and conditionally updates the cluster-wide pull secret.
"""

import base64
import json
import logging
from typing import Any, Dict

import urllib3
from kubernetes.client.rest import ApiException

from ..core.constants import ErrorMessages, KubernetesConstants
from ..core.exceptions import ClusterAPIError, PullSecretConflictError
from ..data_models import PullSecret

logger = logging.getLogger(__name__)


def decode_docker_config(encoded: str) -> Dict[str, Any]:
    """
    Decode a base64 .dockerconfigjson value

    Raises:
        ClusterAPIError: If the value is not base64 encoded JSON
    """
    if not encoded:
        return {"auths": {}}
    try:
        docker_config = json.loads(base64.b64decode(encoded).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as e:
        raise ClusterAPIError(f"Pull secret does not hold a valid docker config: {e}")
    if not isinstance(docker_config, dict):
        raise ClusterAPIError("Pull secret does not hold a valid docker config: not a JSON object")
    return docker_config


def encode_docker_config(docker_config: Dict[str, Any]) -> str:
    """Encode a docker config as a .dockerconfigjson secret value"""
    return base64.b64encode(json.dumps(docker_config, separators=(",", ":")).encode("utf-8")).decode("ascii")


class PullSecretStore:
    """Access to the openshift-config/pull-secret Secret"""

    def __init__(self, core_api,
                 name: str = KubernetesConstants.PULL_SECRET_NAME,
                 namespace: str = KubernetesConstants.PULL_SECRET_NAMESPACE):
        """
        Initialize pull secret store

        Args:
            core_api: kubernetes CoreV1Api
            name: Secret name
            namespace: Secret namespace
        """
        self.core_api = core_api
        self.name = name
        self.namespace = namespace

    def read(self) -> PullSecret:
        """
        Read and decode the pull secret

        Returns:
            PullSecret carrying the resourceVersion it was read at

        Raises:
            ClusterAPIError: If the secret cannot be read or decoded
        """
        try:
            secret = self.core_api.read_namespaced_secret(self.name, self.namespace)
        except ApiException as e:
            raise ClusterAPIError(f"Failed to read secret {self.namespace}/{self.name}: {e.status} {e.reason}")
        except urllib3.exceptions.HTTPError as e:
            raise ClusterAPIError(f"Failed to read secret {self.namespace}/{self.name}: API server unreachable ({e})")

        data = secret.data or {}
        docker_config = decode_docker_config(data.get(KubernetesConstants.PULL_SECRET_DATA_KEY))
        pull_secret = PullSecret(
            name=self.name,
            namespace=self.namespace,
            docker_config=docker_config,
            resource_version=secret.metadata.resource_version
        )
        logger.debug(f"Pull secret at resourceVersion {pull_secret.resource_version} "
                     f"has auths for: {', '.join(pull_secret.registries)}")
        return pull_secret

    def write(self, pull_secret: PullSecret, docker_config: Dict[str, Any]) -> None:
        """
        Store docker_config in the secret if it still is at the version it was read

        The patch carries metadata.resourceVersion, which the API server treats
        as a precondition and answers with 409 Conflict when it is stale.

        Args:
            pull_secret: Secret as returned by read()
            docker_config: New docker config to store

        Raises:
            PullSecretConflictError: If the secret changed since it was read
            ClusterAPIError: For any other API failure
        """
        body = {
            "metadata": {"resourceVersion": pull_secret.resource_version},
            "data": {KubernetesConstants.PULL_SECRET_DATA_KEY: encode_docker_config(docker_config)},
        }
        try:
            self.core_api.patch_namespaced_secret(self.name, self.namespace, body)
        except ApiException as e:
            if e.status == 409:
                raise PullSecretConflictError(ErrorMessages.RegistryError.PULL_SECRET_CONFLICT.format(
                    namespace=self.namespace,
                    name=self.name,
                    resource_version=pull_secret.resource_version
                ))
            raise ClusterAPIError(f"Failed to update secret {self.namespace}/{self.name}: {e.status} {e.reason}")
        except urllib3.exceptions.HTTPError as e:
            raise ClusterAPIError(f"Failed to update secret {self.namespace}/{self.name}: API server unreachable ({e})")

        logger.debug(f"Pull secret {self.namespace}/{self.name} updated")
