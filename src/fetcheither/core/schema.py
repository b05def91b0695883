"""Optional schema validation of extracted payloads.

Any object with a ``validate(value) -> ValidationOutcome`` method can act as a
schema. Everything else is handed to pydantic through :class:`PydanticSchema`,
so ``BaseModel`` subclasses, ``TypedDict``s and plain annotations like
``dict[str, int]`` all work out of the box.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Protocol, Sequence, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from .logging import get_logger
from .model import ResponseValidationError, Result, UnknownError, ValidationIssue
from .util import format_stack

logger = get_logger(__name__)

VALIDATION_FAILED_MESSAGE = "Response schema failed to parse the body"


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    ok: bool
    value: Any = None
    issues: List[ValidationIssue] = field(default_factory=list)
    stack: str | None = None


@runtime_checkable
class Validator(Protocol):
    """Protocol for schema validators."""

    def validate(self, value: Any) -> ValidationOutcome:
        """Return the normalised value, or every violation found in ``value``."""
        ...


def join_path(loc: Sequence[Any]) -> str:
    return ".".join(str(part) for part in loc)


class PydanticSchema:
    """Validator backed by a pydantic ``TypeAdapter``."""

    def __init__(self, schema: Any):
        self.schema = schema
        self._adapter = TypeAdapter(schema)

    def validate(self, value: Any) -> ValidationOutcome:
        try:
            return ValidationOutcome(ok=True, value=self._adapter.validate_python(value))
        except ValidationError as e:
            issues = [ValidationIssue(path=join_path(err["loc"]), message=err["msg"]) for err in e.errors()]
            return ValidationOutcome(ok=False, issues=issues, stack=format_stack(e))

    def __repr__(self) -> str:
        return f"PydanticSchema({self.schema!r})"


def as_validator(schema: Any) -> Validator:
    if isinstance(schema, Validator) and not isinstance(schema, type):
        return schema
    return PydanticSchema(schema)


def check_payload(payload: Any, schema: Any = None) -> Result:
    """Validate ``payload`` against ``schema``; no schema means pass-through."""
    if schema is None:
        return Result.ok(payload)

    try:
        outcome = as_validator(schema).validate(payload)
    except Exception as e:
        # a broken validator is a bug, not a schema mismatch
        logger.warning("payload_validator_crashed", error_type=type(e).__name__, error=str(e))
        return Result.fail(UnknownError(message=str(e) or "unknown error", stack=format_stack(e)))

    if outcome.ok:
        return Result.ok(outcome.value)

    logger.debug("payload_validation_failed", issues=len(outcome.issues))
    return Result.fail(ResponseValidationError(
        message=VALIDATION_FAILED_MESSAGE,
        stack=outcome.stack,
        input=payload,
        errors=list(outcome.issues),
    ))
