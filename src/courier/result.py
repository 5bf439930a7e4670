"""Result: tagged success/failure values for the non-raising call convention."""

from __future__ import annotations

from collections.abc import Callable  # noqa: TC003 - used at runtime in annotations
from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

from courier.failures import Failure  # noqa: TC001 - dataclass field type

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant carrying the produced value unchanged."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: U) -> T:  # noqa: ARG002
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply *fn* to the value. Exceptions from *fn* propagate."""
        return Ok(fn(self.value))

    def fold(self, on_err: Callable[[Failure], V], on_ok: Callable[[T], V]) -> V:  # noqa: ARG002
        return on_ok(self.value)


@dataclass(frozen=True, slots=True)
class Err:
    """Failure variant carrying a normalized ``Failure``."""

    failure: Failure

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise the carried failure."""
        raise self.failure

    def unwrap_or(self, default: U) -> U:
        return default

    def map(self, fn: Callable[[object], object]) -> Err:  # noqa: ARG002
        return self

    def fold(self, on_err: Callable[[Failure], V], on_ok: Callable[[object], V]) -> V:  # noqa: ARG002
        return on_err(self.failure)


Result = Ok[T] | Err
"""Either ``Ok(value)`` or ``Err(failure)``; exactly one, never partial."""

__all__ = ["Err", "Ok", "Result"]
