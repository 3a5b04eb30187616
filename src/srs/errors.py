"""Error taxonomy and result wrappers for scheduler operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Broad category of a failed operation."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    EMPTY_INPUT = "empty_input"
    INTERNAL = "internal"


class SchedulerError(Exception):
    """Base class for failures raised inside the review scheduler."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, code: str = "error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def to_info(self) -> "ErrorInfo":
        return ErrorInfo(kind=self.kind, code=self.code, message=self.message)


class ValidationError(SchedulerError):
    """Raised when a request carries out-of-range or missing values."""

    kind = ErrorKind.VALIDATION


class NotFoundError(SchedulerError):
    """Raised when a referenced source or card does not exist."""

    kind = ErrorKind.NOT_FOUND


class EmptyInputError(SchedulerError):
    """Raised when no segment is eligible for flashcard generation."""

    kind = ErrorKind.EMPTY_INPUT


class InternalError(SchedulerError):
    """Unexpected fault normalized at an operation boundary."""

    kind = ErrorKind.INTERNAL


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Structured description of a failure returned to callers."""

    kind: ErrorKind
    code: str
    message: str


@dataclass(frozen=True, slots=True)
class OperationResult(Generic[T]):
    """Success/failure outcome of a public scheduler operation."""

    value: Optional[T] = None
    error: Optional[ErrorInfo] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorInfo) -> "OperationResult[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the wrapped value or raise the matching ``SchedulerError``."""
        if self.error is not None:
            raise _ERROR_TYPES[self.error.kind](self.error.message, self.error.code)
        return self.value  # type: ignore[return-value]


_ERROR_TYPES = {
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.EMPTY_INPUT: EmptyInputError,
    ErrorKind.INTERNAL: InternalError,
}


def run_guarded(operation: str, func: Callable[[], T]) -> OperationResult[T]:
    """Execute ``func`` and convert any raised error into a failed result."""
    try:
        return OperationResult.success(func())
    except SchedulerError as exc:
        LOGGER.warning("%s failed (%s): %s", operation, exc.code, exc.message)
        return OperationResult.failure(exc.to_info())
    except Exception as exc:
        LOGGER.exception("Unexpected failure during %s.", operation)
        return OperationResult.failure(
            ErrorInfo(
                kind=ErrorKind.INTERNAL,
                code="internal_error",
                message=f"{operation} failed unexpectedly: {exc}",
            )
        )
