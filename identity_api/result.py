"""
Explicit success/failure results.

Expected business failures travel as ``Err`` values instead of raised
exceptions. Exceptions remain reserved for unexpected failures.

Usage:
    result = Email.create(raw)
    if result.is_err():
        return result
    email = result.value
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, NoReturn, TypeVar, Union


T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')
F = TypeVar('F')


class UnwrapError(Exception):
    """Raised when unwrapping the wrong side of a result."""

    def __init__(self, result: "Result[Any, Any]", message: str):
        super().__init__(message)
        self.result = result


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Transform the carried value."""
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[Any], Any]) -> "Ok[T]":
        return self

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain another result-returning step."""
        return fn(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise UnwrapError(self, "Called unwrap_err on an Ok result")

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result carrying an error."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map(self, fn: Callable[[Any], Any]) -> "Err[E]":
        return self

    def map_err(self, fn: Callable[[E], F]) -> "Err[F]":
        """Transform the carried error."""
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[Any], Any]) -> "Err[E]":
        return self

    def unwrap(self) -> NoReturn:
        raise UnwrapError(self, f"Called unwrap on an Err result: {self.error}")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T], Err[E]]


def combine(results: Iterable["Result[T, E]"]) -> "Result[List[T], E]":
    """
    Collapse a sequence of results into one.

    Args:
        results: Results to combine

    Returns:
        Ok with every value in order, or the first Err encountered
    """
    values: List[T] = []
    for result in results:
        if result.is_err():
            return result
        values.append(result.value)
    return Ok(values)
