"""Success-or-typed-failure return values used at every service boundary."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FailureType(str, Enum):
    INVALID_INPUT = "InvalidInput"
    ENTITY_DOES_NOT_EXIST = "EntityDoesNotExist"
    DATABASE_ERROR = "DatabaseError"
    UNAUTHORIZED = "Unauthorized"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or an error message tagged with a :class:`FailureType`."""

    is_success: bool
    _value: Optional[T] = None
    error: Optional[str] = None
    failure_type: Optional[FailureType] = None

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def value(self) -> T:
        if not self.is_success:
            raise ValueError(f"Cannot read the value of a failed result: {self.error}")
        return self._value  # type: ignore[return-value]

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(True, value)

    @classmethod
    def fail(
        cls,
        error: str,
        failure_type: FailureType = FailureType.UNKNOWN,
    ) -> "Result[T]":
        return cls(False, None, error, failure_type)

    def propagate(self) -> "Result":
        """Re-type a failure so it can be returned from another operation."""
        if self.is_success:
            raise ValueError("Only failed results can be propagated.")
        return Result.fail(self.error or "", self.failure_type or FailureType.UNKNOWN)
