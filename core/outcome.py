from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from core.errors import Unavailable

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Either a value or the reason it could not be obtained.

    Used where a failure is captured now and only surfaced when the value is
    asked for, e.g. the CPU count resolved during baseline().
    """

    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, reason: str) -> "Outcome[T]":
        return cls(error=reason)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise Unavailable(self.error)
        return self.value  # type: ignore[return-value]
