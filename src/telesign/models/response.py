"""Response model."""

import json
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy


@dataclass(frozen=True)
class TelesignResponse:
    """
    A simple HTTP response object abstracting the underlying aiohttp response.

    Instances are only created once the body has been fully read, so every
    field is valid as soon as the caller receives the object. Non-2xx status
    codes are reported through ``status_code`` and ``ok``; they never raise.
    """

    status_code: int
    headers: CIMultiDictProxy[str] = field(repr=False)
    body: str = field(repr=False)
    json: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def ok(self) -> bool:
        """Whether the status code is in the 2xx range."""
        return 200 <= self.status_code < 300

    @classmethod
    def from_body(
        cls,
        status_code: int,
        headers: dict[str, str] | CIMultiDict | CIMultiDictProxy,
        body: str,
    ) -> "TelesignResponse":
        """Create a response, parsing the body as JSON when possible."""
        return cls(
            status_code=status_code,
            headers=CIMultiDictProxy(CIMultiDict(headers)),
            body=body,
            json=cls._parse_json(body),
        )

    @classmethod
    async def from_aiohttp(cls, response: aiohttp.ClientResponse) -> "TelesignResponse":
        """Read the body of an aiohttp response and wrap it."""
        raw = await response.read()
        return cls.from_body(
            status_code=response.status,
            headers=response.headers,
            body=raw.decode("utf-8", errors="replace"),
        )

    @staticmethod
    def _parse_json(body: str) -> dict[str, Any]:
        """Parse a JSON object, falling back to an empty dict.

        The API may answer with HTML error pages or an empty body.
        """
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return {}
        return parsed if isinstance(parsed, dict) else {}
