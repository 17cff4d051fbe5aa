"""REST API clients for TeleSign.

``AsyncRestClient`` and ``RestClient`` share one request pipeline: requests
are prepared and signed by ``_BaseRestClient.prepare_request`` and sent by the
``_BaseRestClient._send`` coroutine. The blocking client submits that coroutine
to an event loop running on a thread it owns.
"""

import asyncio
import platform
import threading
from collections.abc import Mapping

import aiohttp
from yarl import URL

from .._version import __version__
from ..client.auth import HeadersStrategy, TelesignHeaderStrategy, decode_api_key
from ..exceptions import ClientClosedError
from ..models.request import HttpMethod, PreparedRequest, encode_form_fields
from ..models.response import TelesignResponse
from ..utils.config import Config
from ..utils.logger import logger, redact_headers

USER_AGENT = (
    f"TeleSignSdk/python-{__version__} "
    f"Python/{platform.python_version()} "
    f"aiohttp/{aiohttp.__version__}"
)


class _BaseRestClient:
    """Credentials, request preparation and transport shared by both clients."""

    def __init__(
        self,
        customer_id: str | None = None,
        api_key: str | None = None,
        rest_endpoint: str | None = None,
        timeout: float | None = None,
        proxy: str | None = None,
        proxy_username: str | None = None,
        proxy_password: str | None = None,
        strategy: HeadersStrategy | None = None,
    ):
        """
        Initialize the client.

        Args:
            customer_id: Account customer_id (Config.CUSTOMER_ID if None)
            api_key: Base64 encoded api key (Config.API_KEY if None)
            rest_endpoint: Base URL of the REST API (Config.REST_ENDPOINT if None)
            timeout: Total per-request timeout in seconds
            proxy: Outbound proxy URL
            proxy_username: Proxy username, used together with proxy_password
            proxy_password: Proxy password
            strategy: Header generation strategy (TSA HMAC-SHA256 by default)

        Raises:
            InvalidApiKeyError: If the default strategy is used and the api
                key is empty or not valid base64
        """
        self.customer_id = customer_id if customer_id is not None else Config.CUSTOMER_ID
        self.api_key = api_key if api_key is not None else Config.API_KEY
        self.base_url = (rest_endpoint or Config.get_rest_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.REST_TIMEOUT
        self.strategy = strategy or TelesignHeaderStrategy()

        self.proxy = proxy if proxy is not None else Config.PROXY
        proxy_username = proxy_username if proxy_username is not None else Config.PROXY_USERNAME
        proxy_password = proxy_password if proxy_password is not None else Config.PROXY_PASSWORD
        self.proxy_auth: aiohttp.BasicAuth | None = None
        if self.proxy and proxy_username is not None and proxy_password is not None:
            self.proxy_auth = aiohttp.BasicAuth(proxy_username, proxy_password)

        self.session: aiohttp.ClientSession | None = None
        self._client_timeout = aiohttp.ClientTimeout(total=self.timeout)
        self._closed = False

        if isinstance(self.strategy, TelesignHeaderStrategy):
            decode_api_key(self.api_key)

    @property
    def closed(self) -> bool:
        """Whether close() has been called; closed clients reject new requests."""
        return self._closed

    def set_header_strategy(self, strategy: HeadersStrategy) -> None:
        """Replace the header generation strategy."""
        self.strategy = strategy

    def prepare_request(
        self,
        resource: str,
        method: HttpMethod | str,
        parameters: Mapping[str, str] | None = None,
    ) -> PreparedRequest:
        """
        Build and sign a request.

        The form encoding of ``parameters`` is computed for every method since
        it feeds the signature. POST and PUT send it as the body, GET and
        DELETE as the query string.

        Args:
            resource: Partial resource URI (e.g., "/v1/messaging")
            method: HTTP method
            parameters: Request parameters

        Returns:
            PreparedRequest with a freshly generated header set
        """
        http_method = HttpMethod.parse(method)
        url_encoded_fields = encode_form_fields(parameters or {})

        url = f"{self.base_url}{resource}"
        body = None
        if http_method.has_body:
            body = url_encoded_fields.encode("utf-8")
        elif url_encoded_fields:
            url = f"{url}?{url_encoded_fields}"

        headers = self.strategy.generate_headers(
            self.customer_id,
            self.api_key,
            http_method.value,
            resource,
            url_encoded_fields,
            user_agent=USER_AGENT,
        )

        # Requests without an entity carry no Content-Type
        if body is None:
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}

        return PreparedRequest(
            method=http_method,
            url=url,
            resource=resource,
            url_encoded_fields=url_encoded_fields,
            headers=headers,
            body=body,
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError(f"{type(self).__name__} has been closed")

    async def _open_session(self) -> aiohttp.ClientSession:
        """Create the aiohttp session on first use."""
        if self.session is None:
            self.session = aiohttp.ClientSession(timeout=self._client_timeout)
            logger.info(f"REST client connected to {self.base_url}")
        return self.session

    async def _send(
        self, session: aiohttp.ClientSession, prepared: PreparedRequest
    ) -> TelesignResponse:
        """
        Send a prepared request and wrap the response.

        Raises:
            aiohttp.ClientError: On connection, TLS or protocol failure
            asyncio.TimeoutError: When the request exceeds the timeout
        """
        logger.debug(
            f"REST request ->\nmethod: {prepared.method.value}\nurl: {prepared.url}\n"
            f"body: {prepared.url_encoded_fields if prepared.body is not None else ''}\n"
            f"headers: {redact_headers(prepared.headers)}\n{'=' * 60}"
        )

        try:
            async with session.request(
                prepared.method.value,
                URL(prepared.url, encoded=True),
                data=prepared.body,
                headers=prepared.headers,
                proxy=self.proxy,
                proxy_auth=self.proxy_auth,
                timeout=self._client_timeout,
            ) as response:
                telesign_response = await TelesignResponse.from_aiohttp(response)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(
                f"REST request failed: {prepared.method.value} {prepared.url} - {e!r}"
            )
            raise

        logger.debug(
            f"REST response <- {telesign_response.status_code} for "
            f"{prepared.method.value} {prepared.resource}"
        )
        return telesign_response


class AsyncRestClient(_BaseRestClient):
    """Async REST client for the TeleSign API."""

    def __init__(
        self,
        customer_id: str | None = None,
        api_key: str | None = None,
        rest_endpoint: str | None = None,
        timeout: float | None = None,
        proxy: str | None = None,
        proxy_username: str | None = None,
        proxy_password: str | None = None,
        strategy: HeadersStrategy | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """
        Initialize the client.

        Args:
            session: Externally owned aiohttp session. It is used as-is and
                never closed by this client.

        See ``_BaseRestClient`` for the remaining arguments.
        """
        super().__init__(
            customer_id,
            api_key,
            rest_endpoint,
            timeout,
            proxy,
            proxy_username,
            proxy_password,
            strategy,
        )
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self):
        """Context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        await self.close()

    async def connect(self) -> None:
        """Create aiohttp session."""
        self._ensure_open()
        await self._open_session()

    async def close(self) -> None:
        """Close aiohttp session. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        if self._owns_session and self.session is not None and not self.session.closed:
            await self.session.close()
            logger.info("REST client closed")

    async def execute(
        self,
        resource: str,
        method: HttpMethod | str,
        parameters: Mapping[str, str] | None = None,
    ) -> TelesignResponse:
        """
        Generic TeleSign REST API request handler.

        Args:
            resource: Partial resource URI to perform the request against
            method: HTTP method
            parameters: Params to perform the request with

        Returns:
            TelesignResponse for the request
        """
        self._ensure_open()
        prepared = self.prepare_request(resource, method, parameters)
        session = await self._open_session()
        return await self._send(session, prepared)

    async def post(
        self, resource: str, parameters: Mapping[str, str] | None = None
    ) -> TelesignResponse:
        """Generic TeleSign REST API POST handler."""
        return await self.execute(resource, HttpMethod.POST, parameters)

    async def get(
        self, resource: str, parameters: Mapping[str, str] | None = None
    ) -> TelesignResponse:
        """Generic TeleSign REST API GET handler."""
        return await self.execute(resource, HttpMethod.GET, parameters)

    async def put(
        self, resource: str, parameters: Mapping[str, str] | None = None
    ) -> TelesignResponse:
        """Generic TeleSign REST API PUT handler."""
        return await self.execute(resource, HttpMethod.PUT, parameters)

    async def delete(
        self, resource: str, parameters: Mapping[str, str] | None = None
    ) -> TelesignResponse:
        """Generic TeleSign REST API DELETE handler."""
        return await self.execute(resource, HttpMethod.DELETE, parameters)


class RestClient(_BaseRestClient):
    """
    Blocking REST client for the TeleSign API.

    Each call blocks the calling thread for the full round trip. Requests run
    on a private event loop served by one daemon thread, started on the first
    call, so several threads can share one client and their calls proceed in
    parallel. Calling from inside a running event loop is refused, since it
    would block that loop; use ``AsyncRestClient`` there instead.
    """

    def __init__(
        self,
        customer_id: str | None = None,
        api_key: str | None = None,
        rest_endpoint: str | None = None,
        timeout: float | None = None,
        proxy: str | None = None,
        proxy_username: str | None = None,
        proxy_password: str | None = None,
        strategy: HeadersStrategy | None = None,
    ):
        super().__init__(
            customer_id,
            api_key,
            rest_endpoint,
            timeout,
            proxy,
            proxy_username,
            proxy_password,
            strategy,
        )
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _ensure_blocking_context(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        raise RuntimeError(
            "RestClient cannot be used inside a running event loop, use AsyncRestClient"
        )

    def _start_loop(self) -> asyncio.AbstractEventLoop:
        """Start the loop thread on first use. Caller holds ``_lock``."""
        if self._loop is None:
            loop = asyncio.new_event_loop()
            thread = threading.Thread(
                target=loop.run_forever, name="telesign-rest-client", daemon=True
            )
            thread.start()
            self._loop, self._thread = loop, thread
        return self._loop

    async def _execute_prepared(self, prepared: PreparedRequest) -> TelesignResponse:
        session = await self._open_session()
        return await self._send(session, prepared)

    async def _shutdown(self) -> None:
        """Cancel in-flight requests and close the session, on the loop thread."""
        current = asyncio.current_task()
        pending = [task for task in asyncio.all_tasks() if task is not current]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        if self.session is not None and not self.session.closed:
            await self.session.close()
            logger.info("REST client closed")

    def close(self) -> None:
        """
        Close the aiohttp session and stop the loop thread. Safe to call more than once.

        Calls still in flight on other threads are cancelled and raise
        ``concurrent.futures.CancelledError``.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            loop, thread = self._loop, self._thread

        if loop is None:
            return

        try:
            asyncio.run_coroutine_threadsafe(self._shutdown(), loop).result()
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
            loop.close()

    def execute(
        self,
        resource: str,
        method: HttpMethod | str,
        parameters: Mapping[str, str] | None = None,
    ) -> TelesignResponse:
        """
        Generic TeleSign REST API request handler.

        Args:
            resource: Partial resource URI to perform the request against
            method: HTTP method
            parameters: Params to perform the request with

        Returns:
            TelesignResponse for the request
        """
        self._ensure_open()
        self._ensure_blocking_context()
        prepared = self.prepare_request(resource, method, parameters)

        # Submission and close() are serialized so no call lands on a stopped loop
        with self._lock:
            self._ensure_open()
            loop = self._start_loop()
            future = asyncio.run_coroutine_threadsafe(
                self._execute_prepared(prepared), loop
            )
        return future.result()

    def post(
        self, resource: str, parameters: Mapping[str, str] | None = None
    ) -> TelesignResponse:
        """Generic TeleSign REST API POST handler."""
        return self.execute(resource, HttpMethod.POST, parameters)

    def get(
        self, resource: str, parameters: Mapping[str, str] | None = None
    ) -> TelesignResponse:
        """Generic TeleSign REST API GET handler."""
        return self.execute(resource, HttpMethod.GET, parameters)

    def put(
        self, resource: str, parameters: Mapping[str, str] | None = None
    ) -> TelesignResponse:
        """Generic TeleSign REST API PUT handler."""
        return self.execute(resource, HttpMethod.PUT, parameters)

    def delete(
        self, resource: str, parameters: Mapping[str, str] | None = None
    ) -> TelesignResponse:
        """Generic TeleSign REST API DELETE handler."""
        return self.execute(resource, HttpMethod.DELETE, parameters)
