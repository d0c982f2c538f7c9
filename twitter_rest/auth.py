"""
Authentication Module
Hold the application and user OAuth credentials of a client.
"""

from threading import Lock
from typing import NamedTuple, Optional

from .config import Config


class Credentials(NamedTuple):
    """An OAuth token or consumer key together with its shared secret."""

    identifier: str
    secret: str


class CredentialStore:
    """Application credentials plus an optional, replaceable user credential slot.

    Writes to the user slot are serialized; readers get the current immutable
    snapshot without locking, so a request is always signed with one consistent
    token/secret pair.
    """

    def __init__(self, consumer_key: str, consumer_secret: str,
                 access_token: Optional[str] = None, access_secret: Optional[str] = None):
        """
        Initialize the store.

        Args:
            consumer_key: Application (consumer) key
            consumer_secret: Application (consumer) secret
            access_token: User access token, if already known
            access_secret: User access token secret, if already known
        """
        self._application = Credentials(consumer_key, consumer_secret)
        self._user: Optional[Credentials] = None
        self._write_lock = Lock()
        if access_token and access_secret:
            self.set_user_credentials(access_token, access_secret)

    @classmethod
    def from_config(cls) -> "CredentialStore":
        """Build a store from the TWITTER_* environment settings."""
        return cls(
            Config.TWITTER_CONSUMER_KEY,
            Config.TWITTER_CONSUMER_SECRET,
            Config.TWITTER_ACCESS_TOKEN or None,
            Config.TWITTER_ACCESS_SECRET or None,
        )

    @property
    def application_credentials(self) -> Credentials:
        return self._application

    @property
    def user_credentials(self) -> Optional[Credentials]:
        return self._user

    def set_user_credentials(self, identifier: str, secret: str) -> Credentials:
        """Replace the user credentials unconditionally."""
        credentials = Credentials(identifier, secret)
        with self._write_lock:
            self._user = credentials
        return credentials

    def has_application_credentials(self) -> bool:
        return bool(self._application.identifier and self._application.secret)
