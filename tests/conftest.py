"""Pytest configuration and shared fixtures."""

import asyncio
import base64
import threading
from typing import AsyncGenerator, Generator

import pytest
from aiohttp import web
from multidict import CIMultiDict

from telesign.client.rest import AsyncRestClient, RestClient
from telesign.utils.config import Config

CUSTOMER_ID = "CUST1"
API_KEY = base64.b64encode(b"secretkey").decode("ascii")  # "c2VjcmV0a2V5"


class RecordingServer:
    """Local TeleSign stand-in running on its own thread and event loop.

    Every request is recorded so tests can inspect exactly what went on the
    wire, independent of which client mode sent it.
    """

    def __init__(self):
        self.requests: list[dict] = []
        self.port: int | None = None
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._runner: web.AppRunner | None = None

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    async def _handle(self, request: web.Request) -> web.Response:
        body = await request.read()
        self.requests.append(
            {
                "method": request.method,
                "path": request.path,
                "query_string": request.rel_url.raw_query_string,
                "headers": CIMultiDict(request.headers),
                "body": body.decode("utf-8"),
            }
        )

        if request.path == "/v1/messaging":
            return web.json_response(
                {
                    "reference_id": "0123456789ABCDEF0123456789ABCDEF",
                    "status": {"code": 290, "description": "Message in progress"},
                }
            )
        if request.path.startswith("/v1/messaging/"):
            return web.json_response(
                {
                    "reference_id": request.path.rsplit("/", 1)[-1],
                    "status": {"code": 200, "description": "Delivered to handset"},
                }
            )
        if request.path == "/not-json":
            return web.Response(text="not json")
        if request.path == "/empty":
            return web.Response(status=204)
        if request.path == "/array":
            return web.Response(text="[1, 2, 3]", content_type="application/json")
        if request.path == "/unauthorized":
            return web.json_response(
                {"status": {"code": 10033, "description": "Invalid Signature"}},
                status=401,
            )
        if request.path == "/server-error":
            return web.Response(text="<html>Bad Gateway</html>", status=502)
        if request.path == "/slow":
            await asyncio.sleep(1.0)
            return web.json_response({})

        return web.json_response({"echo": True}, headers={"X-Custom": "yes"})

    async def _start(self) -> None:
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "127.0.0.1", 0)
        await site.start()
        self.port = self._runner.addresses[0][1]

    def start(self) -> None:
        self._thread.start()
        asyncio.run_coroutine_threadsafe(self._start(), self._loop).result(timeout=10)

    def stop(self) -> None:
        if self._runner is not None:
            asyncio.run_coroutine_threadsafe(
                self._runner.cleanup(), self._loop
            ).result(timeout=10)
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=10)
        self._loop.close()

    @property
    def last_request(self) -> dict:
        return self.requests[-1]


@pytest.fixture(scope="session")
def _recording_server() -> Generator[RecordingServer, None, None]:
    server = RecordingServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def server(_recording_server: RecordingServer) -> RecordingServer:
    """Recording server with an empty request log."""
    _recording_server.requests.clear()
    return _recording_server


@pytest.fixture
def rest_client(server: RecordingServer) -> Generator[RestClient, None, None]:
    """Create a blocking REST client pointed at the recording server."""
    client = RestClient(CUSTOMER_ID, API_KEY, rest_endpoint=server.url, timeout=5)
    yield client
    client.close()


@pytest.fixture
async def async_rest_client(
    server: RecordingServer,
) -> AsyncGenerator[AsyncRestClient, None]:
    """Create an async REST client pointed at the recording server."""
    client = AsyncRestClient(CUSTOMER_ID, API_KEY, rest_endpoint=server.url, timeout=5)
    await client.connect()
    yield client
    await client.close()


@pytest.fixture
def skip_if_no_credentials():
    """Skip test if API credentials are not available."""
    if not Config.validate():
        pytest.skip("API credentials not available")


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "live: mark test as requiring live connection")
    config.addinivalue_line(
        "markers", "credentials: mark test as requiring API credentials"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        if "integration_live" in item.nodeid:
            item.add_marker(pytest.mark.live)
            item.add_marker(pytest.mark.credentials)
