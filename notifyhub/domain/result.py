"""Tagged ``Ok`` / ``Err`` outcomes returned by use cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .errors import DomainError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome wrapping ``value``."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome wrapping a :class:`DomainError`."""

    error: DomainError

    @property
    def is_ok(self) -> bool:
        return False

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> "Err":
        return cls(DomainError(kind, message))


Result = Union[Ok[T], Err]


__all__ = ["Err", "Ok", "Result"]
