"""Asynchronous HTTP transport using httpx."""

import asyncio
import contextlib
from typing import Any, Mapping, Optional

import httpx

from ..config import FetchSettings, get_settings
from ..core.logging import get_logger
from .base import TransportAbortError, TransportNetworkError, TransportSyntaxError


logger = get_logger(__name__)

# Global async client
_client: Optional[httpx.AsyncClient] = None

# recomputed by httpx from the final URL and body
_DERIVED_HEADERS = ("host", "content-length", "transfer-encoding")
_BODY_OPTIONS = ("content", "data", "files", "json")


def create_client(settings: Optional[FetchSettings] = None) -> httpx.AsyncClient:
    settings = settings or get_settings()
    return httpx.AsyncClient(
        timeout=settings.timeout,
        follow_redirects=settings.follow_redirects,
        headers={"User-Agent": settings.user_agent},
    )


def _get_client() -> httpx.AsyncClient:
    """Get or create the global httpx AsyncClient."""
    global _client
    if _client is None or _client.is_closed:
        _client = create_client()
        logger.debug("http_client_created", timeout=_client.timeout.read)
    return _client


def translate_error(exc: Exception) -> Exception:
    """Map an httpx failure onto the transport error categories."""
    if isinstance(exc, httpx.TimeoutException):
        return TransportAbortError(f"Request timed out: {exc}")
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError)):
        return TransportSyntaxError(f"Invalid request: {exc}")
    if isinstance(exc, httpx.RequestError):
        return TransportNetworkError(f"Failed to fetch: {exc}")
    return exc


class HTTPXTransport:
    """Async transport that sends one request and reads the whole body.

    ``options`` are passed to ``httpx.AsyncClient.request`` as keyword
    arguments, apart from ``method`` (default ``GET``) and ``signal``, an
    ``asyncio.Event`` that aborts the request when set.

    A prebuilt ``httpx.Request`` target supplies the defaults: its method,
    headers and body are used unless ``options`` give their own, and
    ``options`` headers are merged over the request's.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client if self._client is not None else _get_client()

    async def _merge_request(self, request: httpx.Request, kwargs: dict) -> httpx.URL:
        kwargs.setdefault("method", request.method)

        headers = httpx.Headers(request.headers)
        for name in _DERIVED_HEADERS:
            headers.pop(name, None)
        if any(name in kwargs for name in _BODY_OPTIONS):
            # the new body brings its own content type
            headers.pop("content-type", None)
        else:
            content = await request.aread()
            if content:
                kwargs["content"] = content
        headers.update(kwargs.get("headers") or {})
        kwargs["headers"] = headers
        return request.url

    async def _send(self, target: Any, options: Mapping[str, Any]) -> httpx.Response:
        kwargs = dict(options)
        if isinstance(target, httpx.Request):
            target = await self._merge_request(target, kwargs)
        method = kwargs.pop("method", "GET")
        return await self.client.request(method, target, **kwargs)

    async def _send_with_signal(self, target: Any, options: Mapping[str, Any], signal: asyncio.Event) -> httpx.Response:
        if signal.is_set():
            raise TransportAbortError("The operation was aborted")

        request = asyncio.ensure_future(self._send(target, options))
        aborted = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({request, aborted}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            aborted.cancel()

        if request.done():
            return request.result()

        request.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await request
        raise TransportAbortError("The operation was aborted")

    async def issue(self, target: Any, options: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        """Send the request; failures are raised as TransportError subclasses."""
        options = dict(options or {})
        signal = options.pop("signal", None)
        try:
            if signal is None:
                return await self._send(target, options)
            return await self._send_with_signal(target, options, signal)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise translate_error(e) from e


def open_transport_async(client: Optional[httpx.AsyncClient] = None) -> HTTPXTransport:
    """Create an asynchronous HTTP transport."""
    return HTTPXTransport(client)


async def close_global_client():
    """Close the global httpx client. Call this at application shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
