#!/usr/bin/env python3

"""
Result Monad Unit Tests

Focused unit tests for the Result values used on optional resolution paths.
"""

import pytest

from scopegraft.functional.result_monad import Result, Success, Failure, from_callable
from tests.test_utils import assert_result_success, assert_result_failure

@pytest.mark.unit
class TestResultMonad:
    """Unit tests for Result monad core functionality"""

    def test_success_creation_and_access(self):
        """Test Success creation and value access"""
        result = Success("test value")

        assert result.is_success()
        assert not result.is_failure()
        assert result.get_value() == "test value"
        assert result.get_error() is None
        assert result.get_or_else("default") == "test value"

    def test_failure_creation_and_access(self):
        """Test Failure creation and error access"""
        result = Failure("test error")

        assert result.is_failure()
        assert not result.is_success()
        assert result.get_value() is None
        assert result.get_error() == "test error"
        assert result.get_or_else("default") == "default"

    def test_success_holding_none_is_still_success(self):
        """A resolved None is not a missing value"""
        result = Success(None)

        assert result.is_success()
        assert result.get_or_else("default") is None

    def test_success_map_operation(self):
        """Test Success functor map operation"""
        mapped = Success(10).map(lambda x: x * 2)

        assert mapped.is_success()
        assert mapped.get_value() == 20

    def test_success_map_with_exception(self):
        """Test Success map handles exceptions"""
        mapped = Success("test").map(lambda x: 1 / 0)

        assert mapped.is_failure()
        assert isinstance(mapped.get_error(), ZeroDivisionError)

    def test_failure_map_preserves_error(self):
        """Test Failure map is a no-op"""
        calls = []
        mapped = Failure("error").map(lambda x: calls.append(x))

        assert mapped.is_failure()
        assert mapped.get_error() == "error"
        assert calls == []

    def test_flat_map_chains_results(self):
        """Test flat_map composes Result-returning functions"""
        def halve(x: int) -> Result[int, str]:
            return Success(x // 2) if x % 2 == 0 else Failure(f"{x} is odd")

        assert Success(8).flat_map(halve).flat_map(halve).get_value() == 2
        assert Success(6).flat_map(halve).flat_map(halve).get_error() == "3 is odd"
        assert Failure("first").flat_map(halve).get_error() == "first"

    def test_map_error(self):
        """Test map_error only touches failures"""
        assert Failure("boom").map_error(str.upper).get_error() == "BOOM"
        assert Success(1).map_error(str.upper).get_value() == 1

    def test_fold(self):
        """Test fold picks the branch matching the result"""
        on_success = lambda v: f"value {v}"
        on_failure = lambda e: f"error {e}"

        assert Success(1).fold(on_success, on_failure) == "value 1"
        assert Failure("x").fold(on_success, on_failure) == "error x"

    def test_results_are_immutable(self):
        """Test Success and Failure are frozen"""
        result = Success(1)
        with pytest.raises(Exception):
            result.value = 2

    def test_equality(self):
        assert Success(1) == Success(1)
        assert Failure("a") != Success("a")


@pytest.mark.unit
class TestFromCallable:
    """Tests for wrapping callables that might raise"""

    def test_from_callable_success(self):
        """Test a returning callable becomes Success"""
        result = from_callable(lambda: 42)

        assert_result_success(result)
        assert result.get_value() == 42

    def test_from_callable_failure(self):
        """Test a raising callable becomes Failure with the exception"""
        def explode():
            raise KeyError("missing")

        result = from_callable(explode)

        assert_result_failure(result, KeyError)

    def test_from_callable_error_mapper(self):
        """Test error_mapper transforms the captured exception"""
        def explode():
            raise ValueError("bad value")

        result = from_callable(explode, error_mapper=lambda e: f"mapped: {e}")

        assert result.get_error() == "mapped: bad value"
