"""
Result<T> pattern for booking operations.

Controller operations that can fail for reasons the customer should see
(catalog fetch, order submission) return a Result instead of raising, so
the UI layer gets one shape for every outcome.
"""

from dataclasses import dataclass, field
from typing import Optional, Generic, TypeVar, Callable, Dict
from enum import Enum


T = TypeVar('T')
U = TypeVar('U')


class ResultStatus(Enum):
    """Status of a Result."""
    SUCCESS = "success"
    FAILURE = "failure"


class ErrorKind(Enum):
    """
    Failure categories reported by the booking controller.

    VALIDATION and PRECONDITION failures are resolved locally and never
    reach the network. TRANSPORT and PARTIAL_FAILURE come from the backend.
    """
    VALIDATION = "validation"
    PRECONDITION = "precondition"
    TRANSPORT = "transport"
    PARTIAL_FAILURE = "partial_failure"


@dataclass
class Result(Generic[T]):
    """
    Outcome of a booking operation.

    Attributes:
        status: SUCCESS or FAILURE
        value: Payload of a success
        error: Exception behind a failure, when there is one
        message: Human-readable message for the UI layer
        kind: Failure category (None if success)
        field_errors: Per-field messages for validation failures

    Examples:
        >>> result = Result.success("O1", "Order placed")
        >>> result.unwrap()
        'O1'

        >>> result = Result.failure("Cart is empty", kind=ErrorKind.PRECONDITION)
        >>> result.is_failure
        True
    """

    status: ResultStatus
    value: Optional[T] = None
    error: Optional[Exception] = None
    message: Optional[str] = None
    kind: Optional[ErrorKind] = None
    field_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status is ResultStatus.FAILURE

    @classmethod
    def success(cls, value: T, message: Optional[str] = None) -> 'Result[T]':
        """Wrap a successful outcome."""
        return cls(ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def failure(
        cls,
        message: str,
        error: Optional[Exception] = None,
        kind: ErrorKind = ErrorKind.TRANSPORT,
        field_errors: Optional[Dict[str, str]] = None
    ) -> 'Result[T]':
        """
        Wrap a failed outcome.

        Args:
            message: Text to show the customer
            error: Exception behind the failure, if any
            kind: Failure category; backend failures are the default
            field_errors: Message per form field, for validation failures
        """
        return cls(
            status=ResultStatus.FAILURE,
            message=message,
            error=error,
            kind=kind,
            field_errors=dict(field_errors or {})
        )

    def unwrap(self) -> T:
        """
        Return the value of a success.

        Raises:
            ValueError: On a failure, carrying its message
        """
        if self.is_failure:
            raise ValueError(f"Cannot unwrap failure result: {self.message}")
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return the value if successful, otherwise the default."""
        return self.value if self.is_success else default

    def map(self, func: Callable[[T], U]) -> 'Result[U]':
        """
        Transform the value of a success.

        Failures pass through with their kind and field errors intact.
        """
        if self.is_failure:
            return Result.failure(
                self.message,
                self.error,
                kind=self.kind,
                field_errors=self.field_errors
            )

        return Result.success(func(self.value), self.message)
