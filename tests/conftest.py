"""
Shared fixtures for the catalog patcher tests.
"""

import pytest

from catalog_patcher.libs.data_models import PatcherSettings
from helpers import SampleValues


@pytest.fixture
def settings(tmp_path):
    return PatcherSettings(
        ocp_version=SampleValues.OCP_VERSION,
        bundle=SampleValues.BUNDLE,
        datagrepper_url=SampleValues.DATAGREPPER_URL,
        token_manager_url=SampleValues.TOKEN_URL,
        brew_registry=SampleValues.BREW_REGISTRY,
        iib_repository="rh-osbs/iib",
        token_description="for testing cpaas built powermon images on openshift cluster",
        tools_bin_dir=str(tmp_path / "bin"),
        http_timeout=30,
    )
