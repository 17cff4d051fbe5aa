"""
TeleSign REST API client with TSA / HMAC-SHA256 request signing.
"""

from ._version import __version__
from .client import (
    AsyncMessagingClient,
    AsyncRestClient,
    HeadersStrategy,
    MessagingClient,
    RestClient,
    TelesignHeaderStrategy,
    generate_telesign_headers,
)
from .exceptions import ClientClosedError, InvalidApiKeyError, TelesignError
from .models import HttpMethod, TelesignResponse
from .utils.config import Config

__all__ = [
    "__version__",
    "AsyncMessagingClient",
    "AsyncRestClient",
    "ClientClosedError",
    "Config",
    "HeadersStrategy",
    "HttpMethod",
    "InvalidApiKeyError",
    "MessagingClient",
    "RestClient",
    "TelesignError",
    "TelesignHeaderStrategy",
    "TelesignResponse",
    "generate_telesign_headers",
]
