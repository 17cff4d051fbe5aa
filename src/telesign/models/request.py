"""Request models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlencode

from ..utils.timing import generate_nonce, get_rfc2616_now

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
AUTH_METHOD = "HMAC-SHA256"


class HttpMethod(str, Enum):
    """HTTP methods supported by the TeleSign REST API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, method: "str | HttpMethod") -> "HttpMethod":
        """Parse a method name case-insensitively."""
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {method!r}") from None

    @property
    def has_body(self) -> bool:
        """Whether the encoded fields travel as the request entity."""
        return self in (HttpMethod.POST, HttpMethod.PUT)


def encode_form_fields(parameters: Mapping[str, str] | None) -> str:
    """
    Form-url-encode parameters, keeping insertion order.

    Spaces become '+' and reserved characters are percent-encoded, so
    "+15551234567" is encoded as "%2B15551234567".
    """
    if not parameters:
        return ""
    return urlencode(list(parameters.items()))


@dataclass
class SignableRequest:
    """The inputs of one request signature.

    ``date_rfc2616`` and ``nonce`` default to "now" and a fresh uuid4; pass
    them explicitly only to reproduce a known signature.
    """

    method: str
    resource: str
    url_encoded_fields: str = ""
    content_type: str | None = None
    date_rfc2616: str = field(default_factory=get_rfc2616_now)
    nonce: str = field(default_factory=generate_nonce)

    def __post_init__(self):
        self.method = self.method.upper()
        if self.content_type is None:
            if self.method in (HttpMethod.POST.value, HttpMethod.PUT.value):
                self.content_type = FORM_CONTENT_TYPE
            else:
                self.content_type = ""

    def string_to_sign(self) -> str:
        """Build the canonical newline-joined text covered by the signature."""
        lines = [
            self.method,
            self.content_type,
            self.date_rfc2616,
            f"x-ts-auth-method:{AUTH_METHOD}",
            f"x-ts-nonce:{self.nonce}",
        ]

        # Body line only when both content type and fields are present
        if self.content_type and self.url_encoded_fields:
            lines.append(self.url_encoded_fields)

        lines.append(self.resource)
        return "\n".join(lines)


@dataclass(frozen=True)
class PreparedRequest:
    """A fully signed request, ready to hand to the transport."""

    method: HttpMethod
    url: str
    resource: str
    url_encoded_fields: str
    headers: dict[str, str]
    body: bytes | None = None
