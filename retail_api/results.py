"""Explicit success/error values returned by inventory operations."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    STORAGE_UNAVAILABLE = "storage_unavailable"


@dataclass
class StoreError:
    kind: ErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, **details: Any) -> "Result[T]":
        return cls(error=StoreError(kind=kind, message=message, details=details))

    def unwrap(self) -> T:
        """Return the value, raising if this result holds an error."""
        if self.error is not None:
            raise ValueError(f"{self.error.kind.value}: {self.error.message}")
        return self.value  # type: ignore[return-value]
