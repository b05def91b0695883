"""fetcheither - HTTP fetches that return (error, value) instead of raising."""

__version__ = "0.1.0"

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .core.model import (                                             # re-export
    Result, FetchEitherError, UnknownError, HttpError, ResponsePayloadError,
    ResponseValidationError, FetchError, ValidationIssue,
)
from .core.schema import Validator, ValidationOutcome, PydanticSchema
from .core.assembler import fetch_either, fetch_either_sync
from .core.util import result_asdict
from .io import close_global_client, close_global_session


__all__ = [
    "fetch_either", "fetch_either_sync",
    "Result", "FetchEitherError", "UnknownError", "HttpError", "ResponsePayloadError",
    "ResponseValidationError", "FetchError", "ValidationIssue",
    "Validator", "ValidationOutcome", "PydanticSchema",
    "result_asdict", "close_global_client", "close_global_session",
]
