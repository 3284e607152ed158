"""
Manifest Applier

Declaratively applies manifests to the cluster with server-side apply, so
re-applying an unchanged manifest is a no-op.
"""

import logging
from typing import Any, Dict

import urllib3
from kubernetes.client.rest import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError

from ..core.constants import KubernetesConstants
from ..core.exceptions import ApplyError
from ..core.utils import ok
from .manifests import ManifestTemplates

logger = logging.getLogger(__name__)


class ManifestApplier:
    """Applies manifests through the dynamic client"""

    def __init__(self, dynamic_client, field_manager: str = KubernetesConstants.FIELD_MANAGER):
        """
        Initialize manifest applier

        Args:
            dynamic_client: openshift DynamicClient bound to the target cluster
            field_manager: Field manager name recorded on applied fields
        """
        self.dynamic_client = dynamic_client
        self.field_manager = field_manager

    def apply(self, manifest: Dict[str, Any]) -> Any:
        """
        Server-side apply one manifest

        Args:
            manifest: Full object with apiVersion, kind and metadata.name

        Returns:
            The object as stored by the API server

        Raises:
            ApplyError: If the kind is unknown to the cluster or the API rejects it
        """
        kind = manifest['kind']
        name = manifest['metadata']['name']
        namespace = manifest['metadata'].get('namespace')
        display_name = f"{kind} {namespace}/{name}" if namespace else f"{kind} {name}"

        try:
            resource = self.dynamic_client.resources.get(api_version=manifest['apiVersion'], kind=kind)
        except ResourceNotFoundError as e:
            raise ApplyError(f"Cluster does not serve {manifest['apiVersion']} {kind}: {e}")
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            raise ApplyError(f"Failed to look up {manifest['apiVersion']} {kind}: {e}")

        logger.debug(f"Applying {display_name}")
        try:
            applied = self.dynamic_client.server_side_apply(
                resource,
                body=manifest,
                namespace=namespace,
                field_manager=self.field_manager,
                force_conflicts=True
            )
        except ApiException as e:
            raise ApplyError(f"Failed to apply {display_name}: {e.status} {e.reason}")
        except urllib3.exceptions.HTTPError as e:
            raise ApplyError(f"Failed to apply {display_name}: API server unreachable ({e})")

        ok(f"Applied {display_name}")
        return applied

    def apply_image_content_source_policy(self, mirror: str) -> Any:
        """Apply the ICSP mirroring the public registries to mirror"""
        return self.apply(ManifestTemplates.image_content_source_policy(mirror=mirror))

    def apply_catalog_source(self, image: str) -> Any:
        """Apply the CatalogSource serving image"""
        return self.apply(ManifestTemplates.catalog_source(image))
