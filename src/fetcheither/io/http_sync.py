"""Synchronous HTTP transport using requests."""

from typing import Any, Mapping, Optional

import requests
from requests.structures import CaseInsensitiveDict

from ..config import FetchSettings, get_settings
from ..core.logging import get_logger
from .base import TransportAbortError, TransportNetworkError, TransportSyntaxError


logger = get_logger(__name__)

# Module-level session for connection pooling
_session: Optional[requests.Session] = None

_SYNTAX_ERRORS = (
    requests.exceptions.URLRequired,
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
    requests.exceptions.InvalidJSONError,
)

# requests.Request attributes that map onto Session.request keywords
_REQUEST_FIELDS = ("params", "data", "json", "files", "auth", "cookies", "hooks")
_BODY_OPTIONS = ("data", "json", "files")


def create_session(settings: Optional[FetchSettings] = None) -> requests.Session:
    settings = settings or get_settings()
    session = requests.Session()
    session.headers["User-Agent"] = settings.user_agent
    return session


def _get_session() -> requests.Session:
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = create_session()
        logger.debug("http_session_created")
    return _session


def translate_error(exc: requests.RequestException) -> Exception:
    """Map a requests failure onto the transport error categories."""
    if isinstance(exc, requests.Timeout):
        return TransportAbortError(f"Request timed out: {exc}")
    if isinstance(exc, _SYNTAX_ERRORS):
        return TransportSyntaxError(f"Invalid request: {exc}")
    return TransportNetworkError(f"Failed to fetch: {exc}")


class RequestsTransport:
    """Sync transport that sends one request and reads the whole body.

    ``options`` are passed to ``requests.Session.request`` as keyword
    arguments, apart from ``method`` (default ``GET``).

    A ``requests.Request`` target supplies the defaults: its fields are used
    unless ``options`` give their own, and ``options`` headers are merged
    over the request's.
    """

    def __init__(self, session: Optional[requests.Session] = None, settings: Optional[FetchSettings] = None):
        self._session = session
        self._settings = settings or get_settings()

    @property
    def session(self) -> requests.Session:
        return self._session if self._session is not None else _get_session()

    @staticmethod
    def _merge_request(request: requests.Request, kwargs: dict) -> str:
        kwargs.setdefault("method", request.method or "GET")
        headers = CaseInsensitiveDict(request.headers or {})
        fields = _REQUEST_FIELDS
        if any(name in kwargs for name in _BODY_OPTIONS):
            # the new body brings its own content type
            headers.pop("Content-Type", None)
            fields = tuple(name for name in fields if name not in _BODY_OPTIONS)
        headers.update(kwargs.get("headers") or {})
        kwargs["headers"] = headers
        for name in fields:
            value = getattr(request, name)
            if value:
                kwargs.setdefault(name, value)
        return request.url

    def _send(self, target: Any, options: Mapping[str, Any]) -> requests.Response:
        kwargs = dict(options)
        kwargs.setdefault("timeout", self._settings.timeout)
        kwargs.setdefault("allow_redirects", self._settings.follow_redirects)
        if isinstance(target, requests.Request):
            target = self._merge_request(target, kwargs)
        method = kwargs.pop("method", "GET")
        return self.session.request(method, target, **kwargs)

    def issue(self, target: Any, options: Optional[Mapping[str, Any]] = None) -> requests.Response:
        """Send the request; failures are raised as TransportError subclasses."""
        try:
            response = self._send(target, options or {})
            # touch the body so read failures surface here, not during extraction
            response.content
            return response
        except requests.RequestException as e:
            raise translate_error(e) from e


def open_transport(session: Optional[requests.Session] = None) -> RequestsTransport:
    """Create a synchronous HTTP transport."""
    return RequestsTransport(session)


def close_global_session():
    """Close the global requests session."""
    global _session
    if _session is not None:
        _session.close()
        _session = None
