"""Data models."""

from .request import (
    FORM_CONTENT_TYPE,
    HttpMethod,
    PreparedRequest,
    SignableRequest,
    encode_form_fields,
)
from .response import TelesignResponse

__all__ = [
    "FORM_CONTENT_TYPE",
    "HttpMethod",
    "PreparedRequest",
    "SignableRequest",
    "TelesignResponse",
    "encode_form_fields",
]
