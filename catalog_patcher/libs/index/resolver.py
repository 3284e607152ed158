"""
Index Image Resolver

Finds the most recent brew-built index image for the operator bundle in the
datagrepper message history and rewrites it onto the brew IIB repository.
"""

import logging
from typing import Any, Dict, Iterator, Optional

import requests

from ..core.constants import ErrorMessages, NetworkConstants
from ..core.exceptions import IndexImageNotFoundError
from ..core.utils import handle_network_error
from ..data_models import IndexImage, PatcherSettings

logger = logging.getLogger(__name__)


def rewrite_index_image(source_image: Optional[str], iib_prefix: str) -> str:
    """
    Keep the tag of an index image and move it onto the brew IIB repository.

    Everything up to the final ':' is replaced, so
    'registry-proxy.engineering.redhat.com/rh-osbs/iib:612345' becomes
    '<iib_prefix>:612345'.

    Raises:
        IndexImageNotFoundError: If the reference is empty, 'null' or untagged
    """
    if not source_image or source_image == "null" or ":" not in source_image:
        raise IndexImageNotFoundError(ErrorMessages.NO_MATCHING_IMAGE)

    tag = source_image.rsplit(":", 1)[1].strip()
    if not tag or "/" in tag:
        raise IndexImageNotFoundError(ErrorMessages.NO_MATCHING_IMAGE)

    return f"{iib_prefix}:{tag}"


class IndexImageResolver:
    """Looks up index images in the datagrepper message history"""

    def __init__(self, settings: PatcherSettings, session: Optional[requests.Session] = None):
        """
        Initialize index image resolver

        Args:
            settings: Run settings (URL, bundle name, registry prefix, TLS, timeout)
            session: HTTP session to use, a new one when omitted
        """
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", NetworkConstants.USER_AGENT)

    def _query_params(self) -> Dict[str, Any]:
        return {
            "topic": NetworkConstants.INDEX_BUILT_TOPIC,
            "delta": NetworkConstants.DATAGREPPER_DELTA,
            "contains": self.settings.bundle,
        }

    def fetch_messages(self) -> Dict[str, Any]:
        """
        Fetch raw index-built messages mentioning the bundle

        Returns:
            Decoded JSON body

        Raises:
            IndexImageNotFoundError: If the request fails or the body is not JSON
        """
        logger.debug(f"Querying {self.settings.datagrepper_url} for {self.settings.bundle}")
        try:
            response = self.session.get(
                self.settings.datagrepper_url,
                params=self._query_params(),
                verify=not self.settings.skip_tls,
                timeout=self.settings.http_timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            handle_network_error(
                e,
                f"{ErrorMessages.NO_MATCHING_IMAGE}\nDatagrepper query failed",
                IndexImageNotFoundError
            )

        try:
            return response.json()
        except ValueError as e:
            raise IndexImageNotFoundError(f"{ErrorMessages.NO_MATCHING_IMAGE}\nDatagrepper returned invalid JSON: {e}")

    @staticmethod
    def iter_index_images(body: Any, ocp_version: str) -> Iterator[Optional[str]]:
        """
        Yield index_image of every message built for ocp_version, in message order

        Messages without the expected nesting are skipped.
        """
        if not isinstance(body, dict):
            return
        for message in body.get("raw_messages") or []:
            if not isinstance(message, dict):
                continue
            msg = message.get("msg")
            if not isinstance(msg, dict):
                continue
            index = msg.get("index")
            if not isinstance(index, dict):
                continue
            if index.get("ocp_version") == ocp_version:
                yield index.get("index_image")

    def resolve(self, ocp_version: Optional[str] = None) -> IndexImage:
        """
        Resolve the brew index image for an OCP version

        Args:
            ocp_version: Version like 'v4.13', defaults to the configured one

        Returns:
            IndexImage with the rewritten reference

        Raises:
            IndexImageNotFoundError: If no message matches or the image is unusable
        """
        ocp_version = ocp_version or self.settings.ocp_version
        body = self.fetch_messages()

        source_image = next(self.iter_index_images(body, ocp_version), None)
        logger.debug(f"First index image for {ocp_version}: {source_image}")

        image = rewrite_index_image(source_image, self.settings.iib_prefix)
        return IndexImage(ocp_version=ocp_version, source_image=source_image, image=image)
