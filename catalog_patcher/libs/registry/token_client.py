"""
Token Manager Client

Talks to the employee token manager with Kerberos (SPNEGO) authentication to
obtain registry credentials for the brew registry.
"""

import logging
from typing import Any, Optional

import requests

from ..core.constants import ErrorMessages, NetworkConstants
from ..core.exceptions import TokenError
from ..core.utils import mask_sensitive_info
from ..data_models import PatcherSettings, RegistryCredentials

logger = logging.getLogger(__name__)


def credentials_from_tokens(tokens: Any) -> RegistryCredentials:
    """
    Pick the credentials of the last token in a token manager response

    The listing is in creation order, so the last entry is the newest token.
    A single token object (the response of a create call) is accepted too.

    Raises:
        TokenError: If the payload carries no username and password
    """
    if isinstance(tokens, dict):
        tokens = [tokens]
    if not isinstance(tokens, list) or not tokens:
        raise TokenError(ErrorMessages.RegistryError.MALFORMED_TOKEN)

    token = tokens[-1]
    credentials = token.get("credentials") if isinstance(token, dict) else None
    if not isinstance(credentials, dict):
        raise TokenError(ErrorMessages.RegistryError.MALFORMED_TOKEN)

    username = credentials.get("username")
    password = credentials.get("password")
    if not username or not password:
        raise TokenError(ErrorMessages.RegistryError.MALFORMED_TOKEN)

    return RegistryCredentials(
        username=username,
        password=password,
        description=token.get("description")
    )


class TokenClient:
    """Client for the registry token manager"""

    def __init__(self, settings: PatcherSettings, session: Optional[requests.Session] = None, auth=None):
        """
        Initialize token client

        Args:
            settings: Run settings (token manager URL, description, TLS, timeout)
            session: HTTP session to use, a new one when omitted
            auth: requests auth handler, SPNEGO with optional mutual auth when omitted
        """
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", NetworkConstants.USER_AGENT)
        self.auth = auth

    def _negotiate_auth(self):
        """SPNEGO auth handler, the equivalent of curl --negotiate -u :"""
        if self.auth is None:
            try:
                from requests_gssapi import HTTPSPNEGOAuth, OPTIONAL
            except ImportError as e:
                raise TokenError(
                    "Kerberos support is not installed. Install the kerberos extra: "
                    "pip install 'catalog-patcher[kerberos]'"
                ) from e
            self.auth = HTTPSPNEGOAuth(mutual_authentication=OPTIONAL)
        return self.auth

    def remediation_message(self) -> str:
        """Message telling the user how to create a token by hand"""
        return ErrorMessages.TOKEN_UNAVAILABLE.format(
            description=self.settings.token_description,
            url=self.settings.token_manager_url
        )

    def _request(self, method: str, **kwargs) -> Any:
        """Send an authenticated request and decode the JSON body"""
        try:
            response = self.session.request(
                method,
                self.settings.token_manager_url,
                auth=self._negotiate_auth(),
                verify=not self.settings.skip_tls,
                timeout=self.settings.http_timeout,
                **kwargs
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.debug(f"Token manager {method} failed: {e}")
            raise TokenError(f"{self.remediation_message()}\nCause: {e}") from e

        body = response.text.strip()
        if not body or body == "null":
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.debug(f"Token manager returned non-JSON body: {mask_sensitive_info(body)}")
            raise TokenError(f"{self.remediation_message()}\nCause: invalid JSON ({e})") from e

    def list_tokens(self) -> Any:
        """
        List the caller's registry tokens

        Returns:
            Decoded JSON body, None when the body is empty or 'null'
        """
        return self._request("GET")

    def create_token(self, description: Optional[str] = None) -> Any:
        """
        Create a new registry token

        Args:
            description: Token description, the configured one by default

        Returns:
            Decoded JSON body of the created token
        """
        description = description or self.settings.token_description
        logger.info(f"Creating registry token: {description}")
        return self._request(
            "POST",
            json={"description": description},
            headers={"Content-Type": str(NetworkConstants.ContentType.JSON)}
        )

    def fetch_credentials(self, create_if_missing: bool = False) -> RegistryCredentials:
        """
        Get brew registry credentials from the newest token

        Existing tokens are listed with a GET. A POST creating a new token is
        only sent when create_if_missing is set and the listing is empty.

        Args:
            create_if_missing: Create a token when the listing is empty

        Returns:
            RegistryCredentials

        Raises:
            TokenError: If no usable token is available
        """
        tokens = self.list_tokens()

        if not tokens and create_if_missing:
            tokens = self.create_token()

        if not tokens:
            raise TokenError(self.remediation_message())

        try:
            credentials = credentials_from_tokens(tokens)
        except TokenError as e:
            raise TokenError(f"{e}\n{self.remediation_message()}") from e

        logger.debug(f"Using registry token for user {credentials.username}")
        return credentials
