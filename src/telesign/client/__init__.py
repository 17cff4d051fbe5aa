"""Client modules for signing and executing REST requests."""

from .auth import (
    HeadersStrategy,
    TelesignHeaderStrategy,
    generate_telesign_headers,
)
from .messaging import AsyncMessagingClient, MessagingClient
from .rest import USER_AGENT, AsyncRestClient, RestClient

__all__ = [
    "AsyncMessagingClient",
    "AsyncRestClient",
    "HeadersStrategy",
    "MessagingClient",
    "RestClient",
    "TelesignHeaderStrategy",
    "USER_AGENT",
    "generate_telesign_headers",
]
