#!/usr/bin/env python3

"""
Result Monad

Success/Failure values for code paths where a missing value is an expected
outcome rather than an error: optional service resolution, optional settings
files and per-entry rendering of container registrations.
"""

from typing import TypeVar, Generic, Callable, Optional
from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')
F = TypeVar('F')

class Result(Generic[T, E], ABC):
    """Abstract base class for Result monad."""

    @abstractmethod
    def map(self, func: Callable[[T], U]) -> 'Result[U, E]':
        """Applies function to success value, preserves failure."""
        pass

    @abstractmethod
    def flat_map(self, func: Callable[[T], 'Result[U, E]']) -> 'Result[U, E]':
        """Composes Result-returning functions."""
        pass

    @abstractmethod
    def map_error(self, func: Callable[[E], F]) -> 'Result[T, F]':
        pass

    @abstractmethod
    def is_success(self) -> bool:
        pass

    def is_failure(self) -> bool:
        return not self.is_success()

    @abstractmethod
    def get_value(self) -> Optional[T]:
        pass

    @abstractmethod
    def get_error(self) -> Optional[E]:
        pass

    def get_or_else(self, default: T) -> T:
        """Returns the success value or the provided default."""
        return self.get_value() if self.is_success() else default

    def fold(self, on_success: Callable[[T], U], on_failure: Callable[[E], U]) -> U:
        """Applies one of two functions based on success/failure."""
        if self.is_success():
            return on_success(self.get_value())
        return on_failure(self.get_error())

@dataclass(frozen=True)
class Success(Result[T, E]):
    """Represents a successful computation result."""
    value: T

    def map(self, func: Callable[[T], U]) -> Result[U, E]:
        try:
            return Success(func(self.value))
        except Exception as e:
            logger.debug(f"Exception in Success.map: {e}")
            return Failure(e)

    def flat_map(self, func: Callable[[T], Result[U, E]]) -> Result[U, E]:
        try:
            return func(self.value)
        except Exception as e:
            logger.debug(f"Exception in Success.flat_map: {e}")
            return Failure(e)

    def map_error(self, func: Callable[[E], F]) -> Result[T, F]:
        return Success(self.value)

    def is_success(self) -> bool:
        return True

    def get_value(self) -> Optional[T]:
        return self.value

    def get_error(self) -> Optional[E]:
        return None

@dataclass(frozen=True)
class Failure(Result[T, E]):
    """Represents a failed computation result."""
    error: E

    def map(self, func: Callable[[T], U]) -> Result[U, E]:
        return Failure(self.error)

    def flat_map(self, func: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return Failure(self.error)

    def map_error(self, func: Callable[[E], F]) -> Result[T, F]:
        return Failure(func(self.error))

    def is_success(self) -> bool:
        return False

    def get_value(self) -> Optional[T]:
        return None

    def get_error(self) -> Optional[E]:
        return self.error

def from_callable(func: Callable[[], T], error_mapper: Callable[[Exception], E] = None) -> Result[T, E]:
    """Creates Result from callable that might raise exception."""
    try:
        return Success(func())
    except Exception as e:
        if error_mapper:
            return Failure(error_mapper(e))
        return Failure(e)

