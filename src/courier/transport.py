"""HTTP transport adapter built on ``httpx``.

The adapter issues one HTTP call per method invocation and either returns the
``httpx.Response`` or raises exactly one ``TransportError`` subclass. Error
mapping lives in ``map_transport_error`` so thunks that talk to ``httpx``
directly can reuse it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
import logging
import ssl
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from courier.config import TransportConfig
from courier.errors import (
    BadCertificateError,
    BadResponseError,
    ConnectionTimeoutError,
    ReceiveTimeoutError,
    RequestCancelledError,
    SendTimeoutError,
    TransportConnectionError,
    TransportError,
    UnknownTransportError,
    _walk_exception_chain,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

QueryParams = Mapping[str, Any]


@runtime_checkable
class Transport(Protocol):
    """The six HTTP operations the request executor wraps.

    Each returns a response or raises one ``TransportError``.
    """

    async def get(self, path: str, *, params: QueryParams | None = None) -> httpx.Response:
        """Send a GET request."""
        ...

    async def post(
        self, path: str, *, body: Any = None, params: QueryParams | None = None
    ) -> httpx.Response:
        """Send a POST request."""
        ...

    async def put(
        self, path: str, *, body: Any = None, params: QueryParams | None = None
    ) -> httpx.Response:
        """Send a PUT request."""
        ...

    async def delete(
        self, path: str, *, body: Any = None, params: QueryParams | None = None
    ) -> httpx.Response:
        """Send a DELETE request."""
        ...

    async def patch(
        self, path: str, *, body: Any = None, params: QueryParams | None = None
    ) -> httpx.Response:
        """Send a PATCH request."""
        ...

    async def head(self, path: str, *, params: QueryParams | None = None) -> httpx.Response:
        """Send a HEAD request."""
        ...


class CancelToken:
    """Cooperative cancellation handle for one or more in-flight requests.

    Cancelling aborts every request currently using the token; later requests
    with an already-cancelled token fail immediately.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Cancel requests bound to this token. Repeated calls are no-ops."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    async def wait(self) -> None:
        """Wait until the token is cancelled."""
        await self._event.wait()


def map_transport_error(
    exc: BaseException,
    *,
    method: str | None = None,
    url: str | None = None,
) -> TransportError:
    """Map an ``httpx`` (or any other) exception onto a ``TransportError`` kind."""
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    if isinstance(exc, TransportError):
        return exc

    detail = str(exc) or type(exc).__name__
    ctx: dict[str, Any] = {"method": method, "url": url}

    if isinstance(exc, (httpx.ConnectTimeout, httpx.PoolTimeout)):
        return ConnectionTimeoutError(f"Connection timed out: {detail}", **ctx)
    if isinstance(exc, httpx.WriteTimeout):
        return SendTimeoutError(f"Send request timed out: {detail}", **ctx)
    if isinstance(exc, httpx.TimeoutException):
        return ReceiveTimeoutError(f"Receive response timed out: {detail}", **ctx)

    for e in _walk_exception_chain(exc):
        if isinstance(e, ssl.SSLCertVerificationError):
            return BadCertificateError(f"Certificate verification failed: {detail}", **ctx)

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return BadResponseError(
            f"Unexpected status {status}", status_code=status, **ctx
        )
    if isinstance(
        exc, (httpx.RemoteProtocolError, httpx.DecodingError, httpx.TooManyRedirects)
    ):
        return BadResponseError(f"Malformed response: {detail}", **ctx)
    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError)):
        return TransportConnectionError(f"Connection error: {detail}", **ctx)

    return UnknownTransportError(f"{type(exc).__name__}: {detail}", **ctx)


def _body_kwargs(body: Any) -> dict[str, Any]:
    if body is None:
        return {}
    if isinstance(body, (Mapping, list, tuple)):
        return {"json": body}
    if isinstance(body, (str, bytes, bytearray)):
        return {"content": body}
    raise TypeError(
        f"Unsupported request body type {type(body).__name__}; "
        "pass a mapping/list (JSON), str or bytes"
    )


class HttpTransport:
    """``httpx.AsyncClient`` adapter implementing ``Transport``.

    Pass a client to share connection state with the rest of an application;
    Courier never closes an injected client. Without one, a client is built
    lazily from ``config`` and owned (closed by ``aclose``).

    Example:
        async with HttpTransport(config=TransportConfig(base_url="https://api.example.com")) as http:
            response = await http.get("/health")
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        config: TransportConfig | None = None,
    ) -> None:
        """Initialize with an optional client and configuration."""
        self.config = config if config is not None else TransportConfig()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily initialize and return the owned client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout(),
                headers=dict(self.config.headers),
                verify=self.config.verify_ssl,
                follow_redirects=self.config.follow_redirects,
            )
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: QueryParams | None = None,
        cancel_token: CancelToken | None = None,
    ) -> httpx.Response:
        """Send one request; raise a ``TransportError`` on any failure."""
        method = method.upper()
        url = path
        try:
            client = self._get_client()
            request = client.build_request(
                method, path, params=params, **_body_kwargs(body)
            )
            url = str(request.url)
            logger.debug("%s %s", method, url)
            response = await self._send(
                lambda: client.send(request), cancel_token, method=method, url=url
            )
            logger.debug("%s %s -> %s", method, url, response.status_code)
            if not self.config.is_success(response.status_code):
                raise BadResponseError(
                    f"Unexpected status {response.status_code}",
                    status_code=response.status_code,
                    method=method,
                    url=url,
                )
            return response
        except TransportError as err:
            logger.debug("%s %s failed: %s (%s)", method, url, err.kind.value, err)
            raise
        except Exception as exc:
            err = map_transport_error(exc, method=method, url=url)
            logger.debug("%s %s failed: %s (%s)", method, url, err.kind.value, err)
            raise err from exc

    async def _send(
        self,
        send: Callable[[], Awaitable[httpx.Response]],
        cancel_token: CancelToken | None,
        *,
        method: str,
        url: str,
    ) -> httpx.Response:
        """Run *send*, aborting it if *cancel_token* fires first."""
        if cancel_token is None:
            return await send()
        if cancel_token.is_cancelled:
            raise RequestCancelledError(cancel_token.reason, method=method, url=url)

        request_task = asyncio.ensure_future(send())
        waiter = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait(
                (request_task, waiter), return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            waiter.cancel()
            if not request_task.done():
                request_task.cancel()
                await asyncio.gather(request_task, return_exceptions=True)

        if request_task.cancelled():
            raise RequestCancelledError(cancel_token.reason, method=method, url=url)
        return request_task.result()

    async def get(
        self,
        path: str,
        *,
        params: QueryParams | None = None,
        cancel_token: CancelToken | None = None,
    ) -> httpx.Response:
        """Send a GET request."""
        return await self.request("GET", path, params=params, cancel_token=cancel_token)

    async def post(
        self,
        path: str,
        *,
        body: Any = None,
        params: QueryParams | None = None,
        cancel_token: CancelToken | None = None,
    ) -> httpx.Response:
        """Send a POST request."""
        return await self.request(
            "POST", path, body=body, params=params, cancel_token=cancel_token
        )

    async def put(
        self,
        path: str,
        *,
        body: Any = None,
        params: QueryParams | None = None,
        cancel_token: CancelToken | None = None,
    ) -> httpx.Response:
        """Send a PUT request."""
        return await self.request(
            "PUT", path, body=body, params=params, cancel_token=cancel_token
        )

    async def delete(
        self,
        path: str,
        *,
        body: Any = None,
        params: QueryParams | None = None,
        cancel_token: CancelToken | None = None,
    ) -> httpx.Response:
        """Send a DELETE request."""
        return await self.request(
            "DELETE", path, body=body, params=params, cancel_token=cancel_token
        )

    async def patch(
        self,
        path: str,
        *,
        body: Any = None,
        params: QueryParams | None = None,
        cancel_token: CancelToken | None = None,
    ) -> httpx.Response:
        """Send a PATCH request."""
        return await self.request(
            "PATCH", path, body=body, params=params, cancel_token=cancel_token
        )

    async def head(
        self,
        path: str,
        *,
        params: QueryParams | None = None,
        cancel_token: CancelToken | None = None,
    ) -> httpx.Response:
        """Send a HEAD request."""
        return await self.request("HEAD", path, params=params, cancel_token=cancel_token)

    async def aclose(self) -> None:
        """Close the owned client; injected clients are left open."""
        client = self._client
        if client is None or not self._owns_client:
            return
        self._client = None
        try:
            await client.aclose()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Cleanup should never mask the primary failure.
            logger.warning("Transport cleanup failed: %s", exc)

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.aclose()
