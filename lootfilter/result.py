"""
Result type for I/O boundaries.

Operations that can fail for environmental reasons (a filter file vanished,
permissions changed) return a Result instead of raising, so callers get a
single failure-free contract:

    from lootfilter.result import Ok, Err

    result = read_filter_text(path)
    if result.is_ok():
        content = result.unwrap()
    else:
        logger.error(result.error)

    content = result.unwrap_or("")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped type


class UnwrapError(Exception):
    """Raised when unwrap() is called on an Err."""

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__(f"Called unwrap() on Err: {error}")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result holding `value`."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, func: Callable[[T], U]) -> Ok[U]:
        """Transform the success value.

        Example:
            >>> Ok(5).map(lambda x: x * 2)
            Ok(value=10)
        """
        return Ok(func(self.value))

    def map_err(self, func: Callable[[Any], Any]) -> Ok[T]:
        return self


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result holding `error`."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Always raises UnwrapError."""
        raise UnwrapError(self.error)

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, func: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_err(self, func: Callable[[E], U]) -> Err[U]:
        """Transform the error value."""
        return Err(func(self.error))


Result = Union[Ok[T], Err[E]]
