"""Authentication and signing utilities for the TeleSign REST API."""

import base64
import binascii
import hashlib
import hmac
from abc import ABC, abstractmethod

from ..exceptions import InvalidApiKeyError
from ..models.request import AUTH_METHOD, SignableRequest


def decode_api_key(api_key: str) -> bytes:
    """
    Decode a base64 api key into the raw HMAC key.

    Raises:
        InvalidApiKeyError: If the key is empty or not valid base64
    """
    if not api_key:
        raise InvalidApiKeyError("api_key must not be empty")

    try:
        return base64.b64decode(api_key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidApiKeyError(
            f"api_key is not valid base64: {e}", details={"reason": str(e)}
        ) from e


def sign_string(api_key: str, string_to_sign: str) -> str:
    """
    Compute the base64 HMAC-SHA256 signature of a canonical string.

    Args:
        api_key: Base64 encoded api key
        string_to_sign: Canonical request text

    Returns:
        Base64 encoded digest
    """
    digest = hmac.new(
        decode_api_key(api_key),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def generate_telesign_headers(
    customer_id: str,
    api_key: str,
    method_name: str,
    resource: str,
    url_encoded_fields: str,
    date_rfc2616: str | None = None,
    nonce: str | None = None,
    user_agent: str | None = None,
    content_type: str | None = None,
) -> dict[str, str]:
    """
    Generate the TeleSign REST API headers used to authenticate requests.

    Creates the canonicalized string to sign and generates the HMAC signature.

    Args:
        customer_id: Account customer_id
        api_key: Account api_key, base64 encoded
        method_name: HTTP method name (POST, GET, PUT or DELETE)
        resource: Partial resource URI (e.g., "/v1/messaging")
        url_encoded_fields: URL encoded HTTP body
        date_rfc2616: Request date in RFC 2616 format (now if None)
        nonce: Unique nonce for the request (uuid4 if None)
        user_agent: User-Agent header value, omitted if None
        content_type: Content type (derived from the method if None)

    Returns:
        Ordered dictionary of headers

    Raises:
        InvalidApiKeyError: If the api key cannot be decoded
    """
    overrides = {}
    if date_rfc2616 is not None:
        overrides["date_rfc2616"] = date_rfc2616
    if nonce is not None:
        overrides["nonce"] = nonce

    request = SignableRequest(
        method=method_name,
        resource=resource,
        url_encoded_fields=url_encoded_fields or "",
        content_type=content_type,
        **overrides,
    )

    signature = sign_string(api_key, request.string_to_sign())

    headers = {
        "Authorization": f"TSA {customer_id}:{signature}",
        "Date": request.date_rfc2616,
        "Content-Type": request.content_type,
        "x-ts-auth-method": AUTH_METHOD,
        "x-ts-nonce": request.nonce,
    }

    if user_agent is not None:
        headers["User-Agent"] = user_agent

    return headers


class HeadersStrategy(ABC):
    """Pluggable generator of authentication headers."""

    @abstractmethod
    def generate_headers(
        self,
        customer_id: str,
        api_key: str,
        method_name: str,
        resource: str,
        url_encoded_fields: str,
        date_rfc2616: str | None = None,
        nonce: str | None = None,
        user_agent: str | None = None,
        content_type: str | None = None,
    ) -> dict[str, str]:
        """Return the headers to apply to one request attempt."""


class TelesignHeaderStrategy(HeadersStrategy):
    """Default strategy: TSA authorization with an HMAC-SHA256 signature."""

    def generate_headers(
        self,
        customer_id: str,
        api_key: str,
        method_name: str,
        resource: str,
        url_encoded_fields: str,
        date_rfc2616: str | None = None,
        nonce: str | None = None,
        user_agent: str | None = None,
        content_type: str | None = None,
    ) -> dict[str, str]:
        return generate_telesign_headers(
            customer_id,
            api_key,
            method_name,
            resource,
            url_encoded_fields,
            date_rfc2616=date_rfc2616,
            nonce=nonce,
            user_agent=user_agent,
            content_type=content_type,
        )
