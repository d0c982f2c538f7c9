"""
Signed request pipeline for the Twitter REST API.

Builds one HTTP request (GET, form-encoded POST or multipart POST), signs it
with OAuth 1.0a, sends it with ``requests`` and decodes the JSON reply.
"""
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import requests

from .auth import CredentialStore
from .config import Config
from .exceptions import (
    MalformedResponseError,
    ProviderError,
    TransportError,
    ValidationError,
)
from .logger import enable_debug_output, logger
from .multipart import MultipartBody
from .signer import Signer
from .utils import combine_params, encode_params, normalize_params
from .values import JsonValue, Shape, decode

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"
METHODS = ("GET", "POST")


class SigningStrategy(str, Enum):
    """Where the OAuth parameters travel.

    HEADER puts them in an Authorization header and works for every request.
    PARAMS appends them to the query (GET) or form body (POST) and cannot be
    used with a multipart body.
    """

    HEADER = "header"
    PARAMS = "params"


class RequestPipeline:
    """Executes signed API calls; holds no per-request state."""

    def __init__(self, credentials: CredentialStore, signer: Optional[Signer] = None,
                 session: Optional[requests.Session] = None, prefix: Optional[str] = None,
                 timeout: Optional[float] = None, debug: Optional[bool] = None):
        """
        Initialize the pipeline.

        Args:
            credentials: Store with application and (later) user credentials
            signer: OAuth signer; built from the application credentials if omitted
            session: requests session used to send requests
            prefix: API prefix, e.g. https://api.twitter.com/1.1/
            timeout: Transport timeout in seconds
            debug: Log every request line and response body
        """
        self.credentials = credentials
        self.signer = signer or Signer(credentials.application_credentials)
        self.session = session or requests.Session()
        self.prefix = prefix if prefix is not None else Config.TWITTER_API_PREFIX
        self.timeout = timeout if timeout is not None else Config.TWITTER_TIMEOUT
        self.debug = Config.TWITTER_DEBUG if debug is None else debug
        if self.debug:
            enable_debug_output()

    def build_url(self, path: str) -> str:
        return self.prefix.rstrip("/") + "/" + path.strip("/") + ".json"

    def execute(self, method: str, path: str,
                get_params: Optional[Mapping[str, Any]] = None,
                post_params: Optional[Mapping[str, Any]] = None,
                body: Optional[MultipartBody] = None,
                shape: Shape = Shape.ANY,
                signing: SigningStrategy = SigningStrategy.HEADER,
                require_user: bool = True) -> JsonValue:
        """
        Send one signed request and decode its JSON response.

        Args:
            method: "GET" or "POST"
            path: Endpoint path without prefix or .json suffix, e.g. statuses/update
            get_params: Query parameters
            post_params: Form parameters (ignored when body is given)
            body: Finished multipart body, sent verbatim
            shape: Expected JSON container
            signing: Header or parameter signing
            require_user: Refuse to sign without user credentials

        Returns:
            The decoded JsonMap, JsonList or JsonScalar

        Raises:
            ValidationError: Bad method or shape, missing user credentials, or PARAMS signing with a body
            ConfigurationError: The prefix does not form a valid URL
            TransportError: No response was received
            ProviderError: The status code was not 200
            MalformedResponseError: A 200 response without a body
            DecodeError: The body is not JSON of the requested shape
        """
        method = method.upper() if isinstance(method, str) else method
        if method not in METHODS:
            raise ValidationError(f"Unknown request method: {method}")

        try:
            shape = Shape(shape)
        except ValueError as exc:
            raise ValidationError(f"Unknown response shape: {shape}") from exc

        try:
            signing = SigningStrategy(signing)
        except ValueError as exc:
            raise ValidationError(f"Unknown signing strategy: {signing}") from exc
        if body is not None and signing is SigningStrategy.PARAMS:
            raise ValidationError("Multipart requests must be signed with an Authorization header")

        token = self.credentials.user_credentials
        if require_user and token is None:
            raise ValidationError("User credentials are not set; authorize the client first")

        query = normalize_params(get_params)
        form = normalize_params(post_params) if method == "POST" and body is None else {}
        url = self.build_url(path)
        headers: Dict[str, str] = {}

        if signing is SigningStrategy.HEADER:
            headers["Authorization"] = self.signer.authorization_header(
                method, url, combine_params(query, form), token
            )
        elif method == "GET":
            self.signer.sign_params(method, url, query, token)
        else:
            self.signer.sign_params(method, url, form, token, other_params=query)

        data: Optional[bytes] = None
        if body is not None:
            headers["Content-Type"] = body.content_type
            data = body.data
        elif method == "POST":
            headers["Content-Type"] = FORM_CONTENT_TYPE
            data = encode_params(form).encode("ascii")

        request_url = url + "?" + encode_params(query) if query else url
        return self._send(method, request_url, data, headers, shape)

    def _send(self, method: str, request_url: str, data: Optional[bytes],
              headers: Dict[str, str], shape: Shape) -> JsonValue:
        if self.debug:
            logger.info("%s %s", method, request_url)
        try:
            response = self.session.request(
                method, request_url, data=data, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {request_url} failed: {exc}") from exc

        content = response.content
        if self.debug:
            logger.info("Response %s: %s", response.status_code, content)

        if response.status_code != 200:
            raise ProviderError(response.status_code, response.text, request_url.split("?", 1)[0])
        if not content:
            raise MalformedResponseError(f"{method} {request_url} returned an empty body")
        return decode(content, shape)
