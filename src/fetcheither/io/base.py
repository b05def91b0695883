"""Base protocols and shared types for the transport layer."""

from typing import Any, Mapping, Optional, Protocol, runtime_checkable


class TransportError(RuntimeError):
    """Raised by a transport when the request could not produce a response."""


class TransportAbortError(TransportError):
    """The request was cancelled through its signal, or timed out."""


class TransportNetworkError(TransportError):
    """DNS, refused connection, dropped connection and similar failures."""


class TransportSyntaxError(TransportError):
    """The request itself was malformed (bad URL, unsupported scheme, bad header)."""


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class Headers(Protocol):
    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        ...


@runtime_checkable
class Response(Protocol):
    """What the pipeline needs from a response. httpx and requests both fit."""

    status_code: int
    headers: Headers       # case-insensitive lookup
    content: bytes         # the whole body, read once


@runtime_checkable
class Transport(Protocol):
    """Protocol for synchronous transports."""

    def issue(self, target: Any, options: Optional[Mapping[str, Any]] = None) -> Response:
        """Send the request and return the fully read response.
        Failures are raised as TransportError subclasses.
        """
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Protocol for asynchronous transports."""

    async def issue(self, target: Any, options: Optional[Mapping[str, Any]] = None) -> Response:
        """Send the request and return the fully read response.
        Failures are raised as TransportError subclasses.
        """
        ...
