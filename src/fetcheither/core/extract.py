"""Body extraction: turn a buffered response into a payload or a typed error."""

from __future__ import annotations
import codecs
import io
import json
from typing import Any, Callable, Dict

from werkzeug.datastructures import MultiDict
from werkzeug.formparser import FormDataParser
from werkzeug.http import parse_options_header

from ..io.base import Response
from .logging import get_logger
from .model import Parser, ResponsePayloadError, Result, UnknownError
from .router import choose_parser
from .util import format_stack

logger = get_logger(__name__)

DEFAULT_CHARSET = "utf-8"


def _charset(content_type: str | None) -> str:
    _, options = parse_options_header(content_type or "")
    return options.get("charset") or DEFAULT_CHARSET


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default, which is not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def _read_text(response: Response) -> str:
    charset = _charset(response.headers.get("Content-Type"))
    try:
        codecs.lookup(charset)
    except LookupError:
        raise ValueError(f"Unknown charset: {charset}") from None
    return response.content.decode(charset)


def _read_json(response: Response) -> Any:
    return json.loads(_read_text(response), parse_constant=_reject_constant)


def _flatten(multi: MultiDict) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in multi.keys():
        values = [v.read() if hasattr(v, "read") else v for v in multi.getlist(key)]
        out[key] = values[0] if len(values) == 1 else values
    return out


def _read_form(response: Response) -> Dict[str, Any]:
    body = response.content
    mimetype, options = parse_options_header(response.headers.get("Content-Type") or "")
    parser = FormDataParser(silent=False)
    _, form, files = parser.parse(io.BytesIO(body), mimetype, len(body), options)
    fields = _flatten(form)
    fields.update(_flatten(files))
    return fields


def _read_blob(response: Response) -> bytes:
    return bytes(response.content)


_STRATEGIES: Dict[str, Callable[[Response], Any]] = {
    "text": _read_text,
    "formData": _read_form,
    "json": _read_json,
    "blob": _read_blob,
}


def extract_payload(response: Response, parser: Parser) -> Result:
    """Run one extraction strategy; never raises for an ``Exception``."""
    content_type = response.headers.get("Content-Type")
    try:
        return Result.ok(_STRATEGIES[parser](response))
    except (ValueError, TypeError) as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        logger.debug("payload_extract_failed", parser=parser, content_type=content_type, error=str(e))
        return Result.fail(ResponsePayloadError(
            message="Failed to parse response",
            stack=format_stack(e),
            content_type=content_type,
            parser=parser,
        ))
    except Exception as e:
        logger.warning("payload_extract_crashed", parser=parser, error_type=type(e).__name__, error=str(e))
        return Result.fail(UnknownError(message=str(e) or "unknown error", stack=format_stack(e)))


def get_response_payload(response: Response) -> Result:
    """Pick a strategy from the declared content type and extract the body."""
    content_type = response.headers.get("Content-Type")
    parser = choose_parser(content_type)
    if parser is None:
        logger.debug("payload_unsupported_content_type", content_type=content_type)
        return Result.fail(ResponsePayloadError(
            message=f"unsupported content type: {content_type}",
            content_type=content_type,
        ))
    return extract_payload(response, parser)
