"""
Twitter API Client
Endpoint methods for the Twitter REST API 1.1.

https://dev.twitter.com/docs/api/1.1
"""

from typing import Any, Mapping, Optional, Sequence

import requests

from .auth import Credentials, CredentialStore
from .exceptions import ConfigurationError
from .flow import AuthorizationFlow, VerifierPrompt
from .multipart import build_media_body
from .pipeline import RequestPipeline
from .utils import merge_params
from .values import JsonList, JsonMap, Shape

Overrides = Optional[Mapping[str, Any]]


class TwitterClient:
    """Twitter API Client for the REST API."""

    def __init__(self, consumer_key: str, consumer_secret: str,
                 access_token: Optional[str] = None, access_secret: Optional[str] = None,
                 session: Optional[requests.Session] = None, prefix: Optional[str] = None,
                 timeout: Optional[float] = None, debug: Optional[bool] = None):
        """
        Initialize Twitter API client.

        Args:
            consumer_key: Twitter API Key
            consumer_secret: Twitter API Secret
            access_token: Twitter Access Token, if already known
            access_secret: Twitter Access Token Secret, if already known
            session: requests session shared by the pipeline and the authorization flow
            prefix: API prefix, defaults to Config.TWITTER_API_PREFIX
            timeout: Transport timeout in seconds
            debug: Log every request and response
        """
        self.credentials = CredentialStore(consumer_key, consumer_secret, access_token, access_secret)
        self.session = session or requests.Session()
        self.pipeline = RequestPipeline(
            self.credentials, session=self.session, prefix=prefix, timeout=timeout, debug=debug
        )

    @classmethod
    def from_config(cls, **kwargs) -> "TwitterClient":
        """Build a client from the TWITTER_* settings.

        Raises:
            ConfigurationError: If the consumer key or secret is empty
        """
        store = CredentialStore.from_config()
        if not store.has_application_credentials():
            raise ConfigurationError("TWITTER_CONSUMER_KEY and TWITTER_CONSUMER_SECRET must be set")
        app = store.application_credentials
        user = store.user_credentials
        return cls(
            app.identifier, app.secret,
            user.identifier if user else None,
            user.secret if user else None,
            **kwargs,
        )

    def set_auth(self, access_token: str, access_secret: str) -> Credentials:
        """Set the user credentials, replacing any previous ones."""
        return self.credentials.set_user_credentials(access_token, access_secret)

    def authorization_flow(self) -> AuthorizationFlow:
        return AuthorizationFlow(self.credentials, signer=self.pipeline.signer, session=self.session,
                                 timeout=self.pipeline.timeout)

    def setup(self, prompt_for_verifier: VerifierPrompt) -> Credentials:
        """
        Obtain user credentials with the PIN flow and store them on the client.

        Args:
            prompt_for_verifier: Called with the authorization URL, returns the PIN

        Returns:
            The new access token and secret
        """
        return self.authorization_flow().run(prompt_for_verifier)

    # Connections

    def get(self, endpoint: str, params: Overrides = None, shape: Shape = Shape.MAP):
        return self.pipeline.execute("GET", endpoint, get_params=params, shape=shape)

    def post(self, endpoint: str, params: Overrides = None, shape: Shape = Shape.MAP):
        return self.pipeline.execute("POST", endpoint, post_params=params, shape=shape)

    # Account

    def verify_credentials(self, params: Overrides = None) -> JsonMap:
        """Return the requesting user if the credentials are valid; a 401 ProviderError if not."""
        return self.get("account/verify_credentials", merge_params({}, params))

    # Timelines

    def home_timeline(self, params: Overrides = None) -> JsonList:
        """Most recent Tweets and retweets by the user and the accounts they follow."""
        return self.get("statuses/home_timeline", merge_params({}, params), Shape.LIST)

    def mentions_timeline(self, params: Overrides = None) -> JsonList:
        """Most recent mentions of the authenticating user."""
        return self.get("statuses/mentions_timeline", merge_params({}, params), Shape.LIST)

    def user_timeline(self, params: Overrides = None) -> JsonList:
        """Most recent Tweets posted by the user given by screen_name or user_id."""
        return self.get("statuses/user_timeline", merge_params({}, params), Shape.LIST)

    def retweets_of_me(self, params: Overrides = None) -> JsonList:
        return self.get("statuses/retweets_of_me", merge_params({}, params), Shape.LIST)

    # Tweets

    def retweets(self, tweet_id: int, params: Overrides = None) -> JsonList:
        """Up to 100 of the first retweets of a given tweet."""
        return self.get(f"statuses/retweets/{int(tweet_id)}", merge_params({}, params), Shape.LIST)

    def show(self, tweet_id: int, params: Overrides = None) -> JsonMap:
        return self.get(f"statuses/show/{int(tweet_id)}", merge_params({}, params))

    def destroy(self, tweet_id: int, params: Overrides = None) -> JsonMap:
        return self.post(f"statuses/destroy/{int(tweet_id)}", merge_params({}, params))

    def retweet(self, tweet_id: int, params: Overrides = None) -> JsonMap:
        """Retweet a tweet; returns the original tweet with retweet details embedded."""
        return self.post(f"statuses/retweet/{int(tweet_id)}", merge_params({}, params))

    def update(self, status: str, params: Overrides = None) -> JsonMap:
        """
        Post a tweet.

        Args:
            status: Tweet text
            params: Extra parameters, e.g. in_reply_to_status_id

        Returns:
            The created tweet
        """
        return self.post("statuses/update", merge_params({"status": status}, params))

    def update_with_media(self, status: str, files: Sequence[str], params: Overrides = None) -> JsonMap:
        """
        Post a tweet with attached media.

        Args:
            status: Tweet text
            files: Paths of the media files; each is sent as a media[] part
            params: Extra form fields

        Returns:
            The created tweet
        """
        body = build_media_body(files, merge_params({"status": status}, params))
        return self.pipeline.execute("POST", "statuses/update_with_media", body=body, shape=Shape.MAP)

    def oembed(self, params: Overrides = None) -> JsonMap:
        return self.get("statuses/oembed", params)

    # Search

    def search(self, params: Overrides = None) -> JsonMap:
        """Relevant Tweets matching a query (pass it as params={"q": ...})."""
        return self.get("search/tweets", params)

    # Friends & followers

    def friends(self, params: Overrides = None) -> JsonMap:
        """Cursored IDs of every user the given user follows."""
        return self.get("friends/ids", params)

    def followers(self, params: Overrides = None) -> JsonMap:
        """Cursored IDs of every user following the given user."""
        return self.get("followers/ids", params)

    # Users

    def lookup_user(self, params: Overrides = None) -> JsonList:
        """Up to 100 users given by comma separated user_id and/or screen_name."""
        return self.get("users/lookup", params, Shape.LIST)

    def show_user(self, params: Overrides = None) -> JsonMap:
        return self.get("users/show", params)
