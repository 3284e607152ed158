"""
Cluster Libraries

Manifests and their declarative application to the cluster.
"""

from .applier import ManifestApplier
from .manifests import ManifestTemplates

__all__ = [
    'ManifestApplier',
    'ManifestTemplates'
]
