from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, Iterator, List, Literal, TypeVar, Union

Parser = Literal["text", "formData", "json", "blob"]
FetchErrorKind = Literal["abort", "type", "syntax"]

E = TypeVar("E")
T = TypeVar("T")


@dataclass(frozen=True, slots=True, kw_only=True)
class BaseError:
    message: str
    stack: str | None = None              # formatted traceback, diagnostics only

    KIND: ClassVar[str] = "unknown"

    @property
    def kind(self) -> str:
        return self.KIND


@dataclass(frozen=True, slots=True, kw_only=True)
class UnknownError(BaseError):
    """Any failure that does not fall into a known category."""
    KIND: ClassVar[str] = "unknown"


@dataclass(frozen=True, slots=True, kw_only=True)
class HttpError(BaseError):
    """The server answered with a non-success status."""
    code: int
    properties: Any = None               # extracted (and maybe validated) error body

    KIND: ClassVar[str] = "http"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResponsePayloadError(BaseError):
    """The body could not be decoded, or its content type is not supported."""
    content_type: str | None
    parser: Parser | None = None

    KIND: ClassVar[str] = "payload"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    path: str                             # dot-joined, "" for the root value
    message: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ResponseValidationError(BaseError):
    """A schema rejected the extracted body."""
    input: Any
    errors: List[ValidationIssue] = field(default_factory=list)

    KIND: ClassVar[str] = "response-validation"


@dataclass(frozen=True, slots=True, kw_only=True)
class FetchError(BaseError):
    """The transport failed before producing a usable response."""
    subkind: FetchErrorKind

    @property
    def kind(self) -> str:
        return self.subkind


FetchEitherError = Union[UnknownError, HttpError, ResponsePayloadError, ResponseValidationError, FetchError]


@dataclass(frozen=True, slots=True)
class Result(Generic[E, T]):
    """Either an error or a value, never both.

    Unpacks like a pair so call sites can write ``error, value = result``.
    """
    error: E | None = None
    value: T | None = None

    def __post_init__(self):
        if self.error is not None and self.value is not None:
            raise ValueError("Result cannot carry both an error and a value")

    @classmethod
    def ok(cls, value: T) -> "Result[Any, T]":
        return cls(error=None, value=value)

    @classmethod
    def fail(cls, error: E) -> "Result[E, Any]":
        if error is None:
            raise ValueError("Result.fail() requires an error")
        return cls(error=error, value=None)

    @property
    def success(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[Any]:
        yield self.error
        yield self.value
