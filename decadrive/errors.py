"""
Booking controller exceptions.

ValidationError and PreconditionError are raised and handled inside the
controller. TransportError and PartialFailureError come from the backend
and are caught at the order workflow boundary.
"""

from typing import Dict, Optional, Sequence


class BookingError(Exception):
    """Base class for booking controller errors."""
    pass


class ValidationError(BookingError):
    """Customer details failed field validation."""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__("; ".join(self.field_errors.values()) or "Invalid customer details")


class PreconditionError(BookingError):
    """Submission attempted when it may not start (empty cart, already submitting)."""
    pass


class TransportError(BookingError):
    """
    A backend request failed at the network or HTTP status level.

    Attributes:
        message: Message suitable for the customer
        status_code: HTTP status, if a response was received
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DeadlineExceededError(TransportError):
    """A backend request did not finish before its deadline."""
    pass


class OperationCancelledError(TransportError):
    """A backend request was cancelled through its cancellation token."""
    pass


class PartialFailureError(BookingError):
    """
    The order was created but some capacity updates failed.

    Attributes:
        order_id: Identifier of the order that already exists
        failed_lesson_ids: Lessons whose spaces were not updated
    """

    def __init__(self, order_id: str, failed_lesson_ids: Sequence[str]):
        self.order_id = order_id
        self.failed_lesson_ids = list(failed_lesson_ids)
        super().__init__(
            f"Order {order_id} was placed but availability could not be updated "
            f"for {len(self.failed_lesson_ids)} lesson(s)"
        )
