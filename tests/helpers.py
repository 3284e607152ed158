"""
Test helpers: shared constants and fake HTTP responses.
"""

import base64
import json
from unittest.mock import Mock


class SampleValues:
    """Values shared across test modules"""

    OCP_VERSION = "v4.13"
    BUNDLE = "power-monitoring-operator-bundle-container"
    IIB_PREFIX = "brew.registry.redhat.io/rh-osbs/iib"
    BREW_REGISTRY = "brew.registry.redhat.io"
    TOKEN_URL = "https://employee-token-manager.registry.redhat.com/v1/tokens"
    DATAGREPPER_URL = "https://datagrepper.engineering.redhat.com/raw"

    USERNAME = "12345|powermon-testing"
    PASSWORD = "s3cr3t-registry-password"

    QUAY_AUTH = {"auth": base64.b64encode(b"quay-user:quay-pass").decode()}


def index_message(ocp_version, index_image):
    """One datagrepper raw message for an index build"""
    return {
        "topic": "/topic/VirtualTopic.eng.ci.redhat-container-image.index.built",
        "msg": {
            "index": {
                "ocp_version": ocp_version,
                "index_image": index_image,
                "added_bundle_images": [
                    "registry-proxy.engineering.redhat.com/rh-osbs/power-monitoring-operator-bundle:v0.1"
                ],
            }
        }
    }


def docker_auth(username, password):
    return {"auth": base64.b64encode(f"{username}:{password}".encode()).decode()}


def encoded_docker_config(docker_config):
    return base64.b64encode(json.dumps(docker_config).encode()).decode()


def json_response(body, status_code=200):
    """Mock requests.Response carrying a JSON body"""
    response = Mock()
    response.status_code = status_code
    response.text = json.dumps(body)
    response.json.return_value = body
    response.raise_for_status.return_value = None
    return response


def text_response(text, status_code=200):
    """Mock requests.Response carrying a raw body"""
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    response.raise_for_status.return_value = None
    return response
