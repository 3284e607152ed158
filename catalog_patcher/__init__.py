"""
Catalog Patcher

Finds the brew-built index image of the Power Monitoring operator bundle,
authorizes the cluster against the brew registry and installs the matching
ImageContentSourcePolicy and CatalogSource.
"""

__version__ = "1.0.0"
__author__ = "OpenShift Power Monitoring"

from .libs import CatalogPatcher, create_catalog_patcher, main

__all__ = [
    'CatalogPatcher',
    'create_catalog_patcher',
    'main'
]
