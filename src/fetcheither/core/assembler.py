"""Result assembly: transport -> status branch -> extraction -> validation."""

from __future__ import annotations
from typing import Any, Mapping, Optional


from ..io.base import (
    AsyncTransport,
    Response,
    Transport,
    TransportAbortError,
    TransportNetworkError,
    TransportSyntaxError,
    is_success,
)
from ..io.http_async import open_transport_async
from ..io.http_sync import open_transport
from .extract import get_response_payload
from .logging import get_logger
from .model import FetchError, HttpError, Result, UnknownError
from .schema import check_payload
from .util import format_stack, reason_phrase

logger = get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = "unknown error"

_TRANSPORT_FAILURES = (
    (TransportAbortError, "abort"),
    (TransportNetworkError, "type"),
    (TransportSyntaxError, "syntax"),
)


def classify_transport_failure(exc: Exception) -> Result:
    """Turn an exception raised while issuing the request into a failed Result."""
    stack = format_stack(exc)
    for exc_type, subkind in _TRANSPORT_FAILURES:
        if isinstance(exc, exc_type):
            return Result.fail(FetchError(message=str(exc), stack=stack, subkind=subkind))
    message = str(exc)
    return Result.fail(UnknownError(message=message or UNKNOWN_ERROR_MESSAGE, stack=stack))


def _is_empty(body: Any) -> bool:
    return body is None or body == "" or body == b""


def _error_result(response: Response, error_schema: Any) -> Result:
    error, payload = get_response_payload(response)
    if error is not None:
        return Result.fail(error)

    checked = check_payload(payload, error_schema)
    if not checked.success:
        # a malformed error body wins over the bare status
        return checked

    logger.info("fetch_http_error", status_code=response.status_code)
    return Result.fail(HttpError(
        message=reason_phrase(response.status_code),
        code=response.status_code,
        properties=checked.value,
    ))


def _success_result(response: Response, success_schema: Any) -> Result:
    error, body = get_response_payload(response)
    if error is not None:
        return Result.fail(error)

    if success_schema is None or _is_empty(body):
        return Result.ok(body)
    return check_payload(body, success_schema)


def assemble_result(response: Response, success_schema: Any = None, error_schema: Any = None) -> Result:
    """Build the Result for a response that the transport delivered."""
    if not is_success(response.status_code):
        result = _error_result(response, error_schema)
    else:
        result = _success_result(response, success_schema)
    logger.debug(
        "fetch_completed",
        status_code=response.status_code,
        success=result.success,
        error_kind=None if result.success else result.error.kind,
    )
    return result


async def fetch_either(
    target: Any,
    options: Optional[Mapping[str, Any]] = None,
    success_schema: Any = None,
    error_schema: Any = None,
    *,
    transport: Optional[AsyncTransport] = None,
) -> Result:
    """Fetch ``target`` and return ``Result(error, value)`` instead of raising.

    ``options`` go to the transport unchanged (``method``, ``headers``,
    ``json``, ``signal``...). ``success_schema`` validates a 2xx body,
    ``error_schema`` validates the body of any other status. Schemas are
    anything pydantic can validate, or an object with a ``validate`` method.

    Example:
        error, user = await fetch_either("https://api.example.com/user/1", success_schema=User)
        if error:
            print(error.kind, error.message)
    """
    if transport is None:
        transport = open_transport_async()

    logger.debug("fetch_started", target=str(target))
    try:
        response = await transport.issue(target, options)
    except Exception as e:
        logger.info("fetch_transport_failed", target=str(target), error_type=type(e).__name__, error=str(e))
        return classify_transport_failure(e)
    return assemble_result(response, success_schema, error_schema)


def fetch_either_sync(
    target: Any,
    options: Optional[Mapping[str, Any]] = None,
    success_schema: Any = None,
    error_schema: Any = None,
    *,
    transport: Optional[Transport] = None,
) -> Result:
    """Blocking twin of :func:`fetch_either`, backed by requests."""
    if transport is None:
        transport = open_transport()

    logger.debug("fetch_started", target=str(target))
    try:
        response = transport.issue(target, options)
    except Exception as e:
        logger.info("fetch_transport_failed", target=str(target), error_type=type(e).__name__, error=str(e))
        return classify_transport_failure(e)
    return assemble_result(response, success_schema, error_schema)
