#!/usr/bin/env python3
"""
Patch an OpenShift cluster with the brew-built Power Monitoring catalog.

Stages:
- Tool check: podman installed and running
- Index image: newest brew index image for OCP_VERSION (default v4.13)
- Brew registry: token manager credentials added to the cluster pull secret
- ImageContentSourcePolicy: public registries mirrored to brew
- CatalogSource: the index image registered in openshift-marketplace
"""

import sys
from catalog_patcher.libs.main_app import main


if __name__ == "__main__":
    sys.exit(main())
