"""
Unit tests for Result<T> pattern.
"""

import pytest

from decadrive.models.result import ErrorKind, Result, ResultStatus
from decadrive.errors import PreconditionError


class TestResult:
    """Test cases for Result class."""

    def test_success_creation(self):
        """Test creating a successful result."""
        result = Result.success("O1", "Order placed")

        assert result.is_success
        assert not result.is_failure
        assert result.status == ResultStatus.SUCCESS
        assert result.value == "O1"
        assert result.message == "Order placed"
        assert result.error is None
        assert result.kind is None

    def test_failure_defaults_to_transport(self):
        """Test failure kind defaults to TRANSPORT."""
        error = ValueError("boom")
        result = Result.failure("Failed to place order", error)

        assert result.is_failure
        assert result.value is None
        assert result.error is error
        assert result.kind == ErrorKind.TRANSPORT
        assert result.field_errors == {}

    def test_failure_with_field_errors(self):
        """Test validation failure carries per-field messages."""
        result = Result.failure(
            "Name is required",
            kind=ErrorKind.VALIDATION,
            field_errors={"name": "Name is required"}
        )

        assert result.kind == ErrorKind.VALIDATION
        assert result.field_errors == {"name": "Name is required"}

    def test_field_errors_are_copied(self):
        """Test the caller's dict is not shared with the result."""
        errors = {"phone": "Phone number is required"}
        result = Result.failure("invalid", kind=ErrorKind.VALIDATION, field_errors=errors)

        errors.clear()

        assert result.field_errors == {"phone": "Phone number is required"}

    def test_unwrap_success(self):
        """Test unwrapping successful result."""
        assert Result.success(100).unwrap() == 100

    def test_unwrap_failure_raises(self):
        """Test unwrapping a failure raises ValueError."""
        result = Result.failure("Cart is empty", PreconditionError("Cart is empty"))

        with pytest.raises(ValueError, match="Cart is empty"):
            result.unwrap()

    def test_unwrap_or(self):
        """Test unwrap_or returns default on failure."""
        assert Result.success(5).unwrap_or(0) == 5
        assert Result.failure("nope").unwrap_or(0) == 0

    def test_map_success(self):
        """Test mapping over a success value."""
        result = Result.success(50.0, "total").map(lambda total: f"{total:.2f}")

        assert result.is_success
        assert result.value == "50.00"
        assert result.message == "total"

    def test_map_failure_keeps_kind(self):
        """Test mapping over a failure keeps kind and field errors."""
        result = Result.failure(
            "bad",
            kind=ErrorKind.VALIDATION,
            field_errors={"name": "Name is required"}
        )

        mapped = result.map(lambda value: value * 2)

        assert mapped.is_failure
        assert mapped.kind == ErrorKind.VALIDATION
        assert mapped.field_errors == {"name": "Name is required"}
