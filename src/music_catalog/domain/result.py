"""Result type and domain errors for catalog operations.

Catalog mutations that can legitimately fail on user input (deleting an
entity that does not exist, for example) return a Result instead of raising,
so callers can report the failure without touching catalog state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, cast

from ..exceptions import MusicCatalogError

T = TypeVar('T')  # Success type
E = TypeVar('E', bound=Exception)  # Error type


class Result(ABC, Generic[T, E]):
    """Either a successful value or the error that prevented it."""

    @abstractmethod
    def is_success(self) -> bool:
        ...

    @abstractmethod
    def is_failure(self) -> bool:
        ...

    @abstractmethod
    def value(self) -> T:
        """Get the success value.

        Raises:
            ValueError: If the result is a failure.
        """
        ...

    @abstractmethod
    def error(self) -> E:
        """Get the error.

        Raises:
            ValueError: If the result is a success.
        """
        ...

    @abstractmethod
    def map(self, fn: Callable[[T], Any]) -> Result[Any, E]:
        ...

    def or_else(self, default: T) -> T:
        """Get the success value or return a default."""
        return self.value() if self.is_success() else default

    def or_else_raise(self) -> T:
        """Get the success value or raise the error."""
        if self.is_failure():
            raise self.error()
        return self.value()

    def __bool__(self) -> bool:
        return self.is_success()


@dataclass(frozen=True, slots=True)
class Success(Result[T, E]):
    """A successful operation."""
    _value: T

    def __repr__(self) -> str:
        return f"Success({self._value!r})"

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def value(self) -> T:
        return self._value

    def error(self) -> E:
        raise ValueError("Cannot get error from Success result")

    def map(self, fn: Callable[[T], Any]) -> Result[Any, E]:
        return Success(fn(self._value))


@dataclass(frozen=True, slots=True)
class Failure(Result[T, E]):
    """A failed operation."""
    _error: E

    def __repr__(self) -> str:
        return f"Failure({self._error!r})"

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def value(self) -> T:
        raise ValueError(f"Cannot get value from Failure result: {self._error}")

    def error(self) -> E:
        return self._error

    def map(self, fn: Callable[[T], Any]) -> Result[Any, E]:
        return self


def success(value: T) -> Result[T, Any]:
    """Create a Success result."""
    return Success(value)


def failure(error: E) -> Result[Any, E]:
    """Create a Failure result."""
    return Failure(error)


def try_catch(fn: Callable[[], T], error_class: type[E] | tuple[type[E], ...] = Exception) -> Result[T, E]:
    """Run ``fn`` and turn the given exception type(s) into a Failure."""
    try:
        return Success(fn())
    except error_class as e:
        return Failure(cast(E, e))


# Domain-specific errors for the music catalog
class DomainError(MusicCatalogError):
    """Base class for catalog business-rule errors."""
    pass


class ValidationError(DomainError):
    """Raised when input for a new entity is invalid."""
    pass


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""
    pass


class AlreadyExistsError(DomainError):
    """Raised when a uniqueness constraint would be violated."""
    pass


class UnsupportedTypeError(DomainError):
    """Raised for an unknown customer type discriminator."""
    pass


class UnsupportedOperationError(DomainError):
    """Raised when a customer variant does not allow an operation."""
    pass


class AuthenticationError(DomainError):
    """Raised when a log in attempt fails."""
    pass
