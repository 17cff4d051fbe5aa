"""
Exception classes for the TeleSign client.

Transport failures are not represented here: aiohttp's own exceptions
(``aiohttp.ClientError``, ``asyncio.TimeoutError``) reach the caller as-is.
"""

from typing import Any


class TelesignError(Exception):
    """Base exception for all TeleSign client errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidApiKeyError(TelesignError, ValueError):
    """The api key is empty or not valid base64."""


class ClientClosedError(TelesignError, RuntimeError):
    """A request was issued on a client that has already been closed."""
