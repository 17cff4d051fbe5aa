"""Timestamp and nonce utilities for request signing."""

import uuid
from datetime import datetime, timezone
from email.utils import format_datetime


def format_rfc2616(dt: datetime) -> str:
    """Format a datetime as an RFC 2616 date, e.g. 'Tue, 01 Jan 2019 00:00:00 GMT'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def get_rfc2616_now() -> str:
    """Get the current UTC time as an RFC 2616 date (for REST API signing)."""
    return format_rfc2616(datetime.now(timezone.utc).replace(microsecond=0))


def generate_nonce() -> str:
    """Generate a single-use random nonce."""
    return str(uuid.uuid4())
