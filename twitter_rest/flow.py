"""OAuth 1.0a three-legged (PIN) authorization flow.

1. Obtain temporary credentials (request token)
2. Send the user to the authorization page, collect the PIN (verifier)
3. Exchange the request token and verifier for access credentials

Reference: RFC 5849 - The OAuth 1.0 Protocol, section 2
"""
from enum import Enum
from typing import Callable, Optional
from urllib.parse import parse_qsl, urlencode

import requests

from .auth import Credentials, CredentialStore
from .config import Config
from .exceptions import DecodeError, ProviderError, TransportError, ValidationError
from .logger import logger
from .signer import Signer

OUT_OF_BAND = "oob"

VerifierPrompt = Callable[[str], str]


class FlowState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    PENDING_VERIFICATION = "pending_verification"
    AUTHORIZED = "authorized"


class AuthorizationFlow:
    """Drives one PIN-based authorization and stores the resulting user credentials."""

    def __init__(self, credentials: CredentialStore, signer: Optional[Signer] = None,
                 session: Optional[requests.Session] = None,
                 request_token_url: Optional[str] = None,
                 authorize_url: Optional[str] = None,
                 access_token_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.credentials = credentials
        self.signer = signer or Signer(credentials.application_credentials)
        self.session = session or requests.Session()
        self.request_token_url = request_token_url or Config.TWITTER_REQUEST_TOKEN_URL
        self.authorize_url = authorize_url or Config.TWITTER_AUTHORIZE_URL
        self.access_token_url = access_token_url or Config.TWITTER_ACCESS_TOKEN_URL
        self.timeout = timeout if timeout is not None else Config.TWITTER_TIMEOUT
        self.state = FlowState.UNAUTHENTICATED
        self.temporary: Optional[Credentials] = None

    def request_temporary_credentials(self) -> Credentials:
        """Step 1: get a request token signed with the application credentials only."""
        header = self.signer.authorization_header(
            "POST", self.request_token_url, extra={"oauth_callback": OUT_OF_BAND}
        )
        logger.info("Requesting OAuth temporary credentials from %s", self.request_token_url)
        self.temporary = self._token_request(self.request_token_url, header)
        self.state = FlowState.PENDING_VERIFICATION
        return self.temporary

    def authorization_url(self, temporary: Optional[Credentials] = None) -> str:
        """Step 2: the page where the user approves the app and reads the PIN."""
        temporary = temporary or self.temporary
        if temporary is None:
            raise ValidationError("No temporary credentials; request them first")
        return f"{self.authorize_url}?{urlencode({'oauth_token': temporary.identifier})}"

    def exchange(self, verifier: str) -> Credentials:
        """Step 3: trade the request token and PIN for access credentials."""
        if self.state is not FlowState.PENDING_VERIFICATION or self.temporary is None:
            raise ValidationError(f"Cannot exchange a verifier in state {self.state.value}")
        verifier = verifier.strip()
        if not verifier:
            raise ValidationError("Empty verifier")

        header = self.signer.authorization_header(
            "POST", self.access_token_url, token=self.temporary,
            extra={"oauth_verifier": verifier},
        )
        logger.info("Exchanging OAuth verifier for access credentials at %s", self.access_token_url)
        access = self._token_request(self.access_token_url, header)

        self.credentials.set_user_credentials(access.identifier, access.secret)
        self.state = FlowState.AUTHORIZED
        logger.info("OAuth authorization complete")
        return access

    def run(self, prompt_for_verifier: VerifierPrompt) -> Credentials:
        """Run all three steps; ``prompt_for_verifier`` gets the URL and returns the PIN."""
        self.request_temporary_credentials()
        verifier = prompt_for_verifier(self.authorization_url())
        return self.exchange(verifier)

    def _token_request(self, url: str, authorization: str) -> Credentials:
        try:
            response = self.session.post(
                url,
                headers={
                    "Authorization": authorization,
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

        if response.status_code != 200:
            logger.error("Token request to %s failed: %s - %s", url, response.status_code, response.text)
            raise ProviderError(response.status_code, response.text, url)

        values = dict(parse_qsl(response.text))
        if "oauth_token" not in values or "oauth_token_secret" not in values:
            raise DecodeError(f"Invalid token response from {url}: {response.text!r}")
        return Credentials(values["oauth_token"], values["oauth_token_secret"])
