from __future__ import annotations
import base64
import dataclasses
import traceback
from http import HTTPStatus
from typing import Any, Dict

from .model import BaseError, Result


def format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def reason_phrase(code: int) -> str:
    """Standard reason phrase for ``code``, e.g. 404 -> "Not Found"."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return f"Unknown Status {code}"


def _jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if hasattr(value, "model_dump"):          # pydantic models
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def error_asdict(error: BaseError, *, include_stack: bool = False) -> Dict[str, Any]:
    payload = {"kind": error.kind}
    for f in dataclasses.fields(error):
        if f.name == "stack" and not include_stack:
            continue
        payload[f.name] = _jsonable(getattr(error, f.name))
    return payload


def result_asdict(res: Result, *, include_stack: bool = False) -> Dict[str, Any]:
    """Return a JSON-serialisable dict; bytes are base64 encoded."""
    if not res.success:
        return {"success": False, "error": error_asdict(res.error, include_stack=include_stack), "value": None}
    return {"success": True, "error": None, "value": _jsonable(res.value)}
