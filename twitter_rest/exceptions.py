"""
Exceptions
Error hierarchy raised by the Twitter REST client.
"""
from typing import Optional


class TwitterError(Exception):
    """Base exception for all client errors."""


class ValidationError(TwitterError):
    """Raised on caller misuse: bad method, missing credentials, bad signing mode."""


class ConfigurationError(ValidationError):
    """Raised when application credentials or endpoint URLs are unusable."""


class TransportError(TwitterError):
    """Raised when no HTTP response was received (DNS, connection, TLS, timeout)."""


class ProviderError(TwitterError):
    """Raised when the API answers with a status other than 200."""

    def __init__(self, status_code: int, body: str, url: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        target = url or "request"
        super().__init__(f"{target} returned status {status_code}: {body}")


class DecodeError(TwitterError):
    """Raised when a successful response is not JSON of the requested shape."""


class MalformedResponseError(TwitterError):
    """Raised when a successful response carries no body at all."""
