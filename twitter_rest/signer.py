"""
OAuth 1.0a request signing (HMAC-SHA1).

Reference: RFC 5849 - The OAuth 1.0 Protocol, section 3.4
"""

import base64
import hashlib
import hmac
import secrets
import time
from typing import Callable, Dict, Optional
from urllib.parse import urlsplit, urlunsplit, parse_qsl

from .auth import Credentials
from .exceptions import ConfigurationError
from .utils import Params, combine_params, iter_pairs, percent_encode

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

_DEFAULT_PORTS = {"http": 80, "https": 443}


def generate_nonce() -> str:
    """Generate a cryptographically secure random nonce."""
    return secrets.token_hex(16)


def generate_timestamp() -> str:
    """Get current Unix timestamp as string."""
    return str(int(time.time()))


def normalize_base_uri(url: str) -> str:
    """Return the base string URI: lowercase scheme and host, no default port, no query.

    Raises:
        ConfigurationError: If the URL has no scheme or host
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise ConfigurationError(f"Malformed request URI: {url!r}") from exc
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if scheme not in _DEFAULT_PORTS or not host:
        raise ConfigurationError(f"Malformed request URI: {url!r}")
    netloc = host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{host}:{port}"
    return urlunsplit((scheme, netloc, parts.path or "/", "", ""))


def signature_base_string(method: str, url: str, params: Params) -> str:
    """Build the signature base string.

    Format: METHOD&enc(base URI)&enc(sorted, encoded parameter pairs). Query
    parameters already present on ``url`` are included in the pair list.
    """
    pairs = [(percent_encode(k), percent_encode(v)) for k, v in iter_pairs(params)]
    query = urlsplit(url).query
    pairs.extend(
        (percent_encode(k), percent_encode(v))
        for k, v in parse_qsl(query, keep_blank_values=True)
    )
    param_str = "&".join(f"{k}={v}" for k, v in sorted(pairs))
    return "&".join([
        method.upper(),
        percent_encode(normalize_base_uri(url)),
        percent_encode(param_str),
    ])


def sign_hmac_sha1(base_string: str, consumer_secret: str, token_secret: str = "") -> str:
    """Sign a base string with key enc(consumer_secret)&enc(token_secret)."""
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("utf-8")


class Signer:
    """Computes OAuth 1.0a protocol parameters for one request at a time.

    The signer keeps no per-request state, so one instance can sign requests
    from many threads.
    """

    def __init__(self, consumer: Credentials,
                 nonce_factory: Callable[[], str] = generate_nonce,
                 clock: Callable[[], str] = generate_timestamp):
        self.consumer = consumer
        self._nonce_factory = nonce_factory
        self._clock = clock

    def oauth_params(self, method: str, url: str, params: Optional[Params] = None,
                     token: Optional[Credentials] = None,
                     extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Compute the signed OAuth protocol parameters.

        Args:
            method: HTTP method
            url: Request URL; its query string is signed as parameters
            params: Form or query parameters that are part of the signature
            token: User (or temporary) credentials; None signs with the consumer only
            extra: Additional oauth_* parameters such as oauth_callback or oauth_verifier

        Returns:
            The oauth_* parameters including oauth_signature
        """
        oauth = {
            "oauth_consumer_key": self.consumer.identifier,
            "oauth_nonce": self._nonce_factory(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": self._clock(),
            "oauth_version": OAUTH_VERSION,
        }
        if token is not None:
            oauth["oauth_token"] = token.identifier
        if extra:
            oauth.update(extra)

        signed = combine_params(params)
        for key, value in oauth.items():
            signed[key] = [value]

        base_string = signature_base_string(method, url, signed)
        token_secret = token.secret if token is not None else ""
        oauth["oauth_signature"] = sign_hmac_sha1(base_string, self.consumer.secret, token_secret)
        return oauth

    def authorization_header(self, method: str, url: str, params: Optional[Params] = None,
                             token: Optional[Credentials] = None,
                             extra: Optional[Dict[str, str]] = None) -> str:
        """Build an ``Authorization: OAuth ...`` header value for the request."""
        oauth = self.oauth_params(method, url, params, token, extra)
        return format_authorization_header(oauth)

    def sign_params(self, method: str, url: str, params: Params,
                    token: Optional[Credentials] = None,
                    other_params: Optional[Params] = None) -> Params:
        """Add the signed oauth_* parameters to ``params`` in place and return it.

        ``other_params`` are signed too but left untouched, e.g. the query
        parameters of a form-encoded POST.
        """
        signed = combine_params(other_params, params)
        oauth = self.oauth_params(method, url, signed, token)
        for key, value in oauth.items():
            params[key] = [value]
        return params


def format_authorization_header(oauth: Dict[str, str]) -> str:
    """Format: OAuth oauth_consumer_key="...", oauth_nonce="...", ..."""
    return "OAuth " + ", ".join(
        f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in sorted(oauth.items())
    )
