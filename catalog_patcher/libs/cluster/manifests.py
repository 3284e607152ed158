"""
Manifest Templates

Cluster objects applied by the patcher.
"""

from typing import Any, Dict, List, Optional

from ..core.constants import CatalogConstants, KubernetesConstants, RegistryConstants


class ManifestTemplates:
    """Templates for the ICSP and CatalogSource manifests"""

    @staticmethod
    def image_content_source_policy(mirror: str = RegistryConstants.BREW_REGISTRY,
                                    sources: Optional[List[str]] = None,
                                    name: str = CatalogConstants.ICSP_NAME) -> Dict[str, Any]:
        """ImageContentSourcePolicy redirecting every source registry to mirror"""
        sources = sources or CatalogConstants.MIRRORED_SOURCES
        return {
            'apiVersion': str(KubernetesConstants.APIVersion.ICSP),
            'kind': str(KubernetesConstants.Kind.ICSP),
            'metadata': {
                'name': name
            },
            'spec': {
                'repositoryDigestMirrors': [
                    {'mirrors': [mirror], 'source': source}
                    for source in sources
                ]
            }
        }

    @staticmethod
    def catalog_source(image: str,
                       name: str = CatalogConstants.CATALOG_SOURCE_NAME,
                       namespace: str = CatalogConstants.CATALOG_SOURCE_NAMESPACE) -> Dict[str, Any]:
        """gRPC CatalogSource serving the given index image"""
        if not image or image == "null":
            raise ValueError("CatalogSource needs a resolved index image")
        return {
            'apiVersion': str(KubernetesConstants.APIVersion.CATALOG_SOURCE),
            'kind': str(KubernetesConstants.Kind.CATALOG_SOURCE),
            'metadata': {
                'name': name,
                'namespace': namespace
            },
            'spec': {
                'sourceType': CatalogConstants.CATALOG_SOURCE_TYPE,
                'image': image,
                'displayName': CatalogConstants.DISPLAY_NAME,
                'publisher': CatalogConstants.PUBLISHER
            }
        }
