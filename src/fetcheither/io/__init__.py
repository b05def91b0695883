"""Transport layer for fetcheither - issues one request, returns the buffered response."""

# Re-export these for import convenience
from .base import (
    AsyncTransport,
    Response,
    Transport,
    TransportAbortError,
    TransportError,
    TransportNetworkError,
    TransportSyntaxError,
    is_success,
)
from .http_sync import RequestsTransport, open_transport, close_global_session
from .http_async import HTTPXTransport, open_transport_async, close_global_client
