"""
twitter_rest - Twitter REST API Client
OAuth 1.0a signed access to the Twitter REST API 1.1.
"""

__version__ = "0.1.0"
__author__ = "Developer"

from .auth import Credentials, CredentialStore
from .client import TwitterClient
from .exceptions import (
    ConfigurationError,
    DecodeError,
    MalformedResponseError,
    ProviderError,
    TransportError,
    TwitterError,
    ValidationError,
)
from .flow import AuthorizationFlow, FlowState
from .multipart import MultipartBody, build_media_body
from .pipeline import RequestPipeline, SigningStrategy
from .signer import Signer
from .values import JsonList, JsonMap, JsonScalar, Shape

__all__ = [
    "TwitterClient",
    "Credentials",
    "CredentialStore",
    "AuthorizationFlow",
    "FlowState",
    "RequestPipeline",
    "SigningStrategy",
    "Signer",
    "MultipartBody",
    "build_media_body",
    "JsonMap",
    "JsonList",
    "JsonScalar",
    "Shape",
    "TwitterError",
    "ValidationError",
    "ConfigurationError",
    "TransportError",
    "ProviderError",
    "DecodeError",
    "MalformedResponseError",
]
