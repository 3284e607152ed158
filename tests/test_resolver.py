"""
Tests for the index image resolver
"""

from unittest.mock import Mock

import pytest
import requests

from catalog_patcher.libs.core.exceptions import IndexImageNotFoundError
from catalog_patcher.libs.index import IndexImageResolver, rewrite_index_image
from helpers import SampleValues, index_message, json_response, text_response


def make_resolver(settings, response=None, error=None):
    session = Mock()
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return IndexImageResolver(settings, session=session), session


class TestRewriteIndexImage:
    """Tag rewriting onto the brew IIB repository"""

    def test_keeps_tag_and_replaces_host(self):
        image = rewrite_index_image(
            "registry-proxy.engineering.redhat.com/rh-osbs/iib:612345",
            SampleValues.IIB_PREFIX
        )
        assert image == "brew.registry.redhat.io/rh-osbs/iib:612345"

    def test_uses_text_after_final_colon(self):
        image = rewrite_index_image("proxy.example.com:5000/rh-osbs/iib:700001", SampleValues.IIB_PREFIX)
        assert image == "brew.registry.redhat.io/rh-osbs/iib:700001"

    @pytest.mark.parametrize("source", [None, "", "null", "registry.example.com/iib", "host:5000/iib", "iib:"])
    def test_rejects_unusable_references(self, source):
        with pytest.raises(IndexImageNotFoundError) as exc_info:
            rewrite_index_image(source, SampleValues.IIB_PREFIX)
        assert "No matching index image found" in str(exc_info.value)


class TestIndexImageResolver:
    """Datagrepper lookups"""

    def test_resolves_first_matching_version(self, settings):
        body = {
            "raw_messages": [
                index_message("v4.12", "registry-proxy.engineering.redhat.com/rh-osbs/iib:500000"),
                index_message("v4.13", "registry-proxy.engineering.redhat.com/rh-osbs/iib:600001"),
                index_message("v4.13", "registry-proxy.engineering.redhat.com/rh-osbs/iib:599999"),
            ]
        }
        resolver, _ = make_resolver(settings, json_response(body))

        index_image = resolver.resolve("v4.13")

        assert index_image.image == "brew.registry.redhat.io/rh-osbs/iib:600001"
        assert index_image.source_image == "registry-proxy.engineering.redhat.com/rh-osbs/iib:600001"
        assert index_image.tag == "600001"
        assert index_image.ocp_version == "v4.13"

    def test_defaults_to_configured_version(self, settings):
        settings.ocp_version = "v4.14"
        body = {"raw_messages": [
            index_message("v4.13", "proxy/rh-osbs/iib:1"),
            index_message("v4.14", "proxy/rh-osbs/iib:2"),
        ]}
        resolver, _ = make_resolver(settings, json_response(body))

        assert resolver.resolve().image == "brew.registry.redhat.io/rh-osbs/iib:2"

    def test_sends_bundle_filter_and_timeout(self, settings):
        resolver, session = make_resolver(settings, json_response({"raw_messages": [
            index_message("v4.13", "proxy/rh-osbs/iib:1"),
        ]}))

        resolver.resolve()

        args, kwargs = session.get.call_args
        assert args[0] == SampleValues.DATAGREPPER_URL
        assert kwargs["params"]["contains"] == SampleValues.BUNDLE
        assert kwargs["params"]["topic"] == "/topic/VirtualTopic.eng.ci.redhat-container-image.index.built"
        assert kwargs["params"]["delta"] == 824000
        assert kwargs["timeout"] == 30
        assert kwargs["verify"] is True

    def test_skip_tls_disables_verification(self, settings):
        settings.skip_tls = True
        resolver, session = make_resolver(settings, json_response({"raw_messages": [
            index_message("v4.13", "proxy/rh-osbs/iib:1"),
        ]}))

        resolver.resolve()

        assert session.get.call_args[1]["verify"] is False

    def test_no_matching_version_fails(self, settings):
        body = {"raw_messages": [index_message("v4.12", "proxy/rh-osbs/iib:1")]}
        resolver, _ = make_resolver(settings, json_response(body))

        with pytest.raises(IndexImageNotFoundError) as exc_info:
            resolver.resolve("v4.13")
        assert "No matching index image found" in str(exc_info.value)

    def test_null_index_image_fails(self, settings):
        body = {"raw_messages": [index_message("v4.13", None)]}
        resolver, _ = make_resolver(settings, json_response(body))

        with pytest.raises(IndexImageNotFoundError):
            resolver.resolve("v4.13")

    def test_skips_malformed_messages(self, settings):
        body = {"raw_messages": [
            "not-a-message",
            {"msg": None},
            {"msg": "plain text"},
            {"msg": ["index"]},
            {"msg": {"index": "broken"}},
            index_message("v4.13", "proxy/rh-osbs/iib:42"),
        ]}
        resolver, _ = make_resolver(settings, json_response(body))

        assert resolver.resolve("v4.13").tag == "42"

    def test_only_non_object_messages_fail_as_not_found(self, settings):
        body = {"raw_messages": [{"msg": "plain text"}, {"msg": 12}]}
        resolver, _ = make_resolver(settings, json_response(body))

        with pytest.raises(IndexImageNotFoundError) as exc_info:
            resolver.resolve("v4.13")
        assert "No matching index image found" in str(exc_info.value)

    def test_empty_body_fails(self, settings):
        resolver, _ = make_resolver(settings, json_response({}))

        with pytest.raises(IndexImageNotFoundError):
            resolver.resolve("v4.13")

    def test_invalid_json_fails(self, settings):
        resolver, _ = make_resolver(settings, text_response("<html>VPN login</html>"))

        with pytest.raises(IndexImageNotFoundError) as exc_info:
            resolver.resolve("v4.13")
        assert "invalid JSON" in str(exc_info.value)

    def test_connection_error_mentions_vpn(self, settings):
        error = requests.ConnectionError("Failed to resolve 'datagrepper.engineering.redhat.com'")
        resolver, _ = make_resolver(settings, error=error)

        with pytest.raises(IndexImageNotFoundError) as exc_info:
            resolver.resolve("v4.13")
        assert "VPN" in str(exc_info.value)

    def test_http_error_fails(self, settings):
        response = json_response({})
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        resolver, _ = make_resolver(settings, response)

        with pytest.raises(IndexImageNotFoundError) as exc_info:
            resolver.resolve("v4.13")
        assert "503" in str(exc_info.value)
