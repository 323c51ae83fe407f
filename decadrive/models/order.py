"""
Order data models.

This module provides the customer details captured at checkout, the
per-field validation state, the order request sent to the backend and
the confirmation shown to the customer afterwards.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List
from enum import Enum


# Validation message meaning "this field is valid"
VALID = ""


class SubmissionState(Enum):
    """Order submission states."""
    IDLE = "idle"
    SUBMITTING = "submitting"
    RECONCILING_CAPACITY = "reconciling_capacity"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_processing(self) -> bool:
        """Check if a submission is in flight."""
        return self in (SubmissionState.SUBMITTING, SubmissionState.RECONCILING_CAPACITY)


@dataclass
class CustomerDetails:
    """
    Identity details typed in at checkout.

    Mutated on every keystroke; values are stored raw and only trimmed
    when validated or sent.
    """

    name: str = ""
    phone: str = ""

    def clear(self):
        """Reset both fields to empty."""
        self.name = ""
        self.phone = ""


@dataclass
class ValidationState:
    """
    Per-field validation messages.

    An empty string (VALID) means the field passed validation.
    """

    name: str = VALID
    phone: str = VALID

    @property
    def has_errors(self) -> bool:
        """Check if any field currently has an error."""
        return bool(self.name or self.phone)

    def clear(self):
        """Forget all validation messages."""
        self.name = VALID
        self.phone = VALID

    def to_dict(self) -> Dict[str, str]:
        """Return only the fields that have an error."""
        return {
            field_name: message
            for field_name, message in (("name", self.name), ("phone", self.phone))
            if message
        }


@dataclass(frozen=True)
class OrderItem:
    """One purchased lesson and its quantity."""

    lesson_id: str
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {"lessonId": self.lesson_id, "quantity": self.quantity}


@dataclass(frozen=True)
class OrderRequest:
    """
    Body of POST /orders.

    Examples:
        >>> request = OrderRequest(
        ...     name="Ann Lee",
        ...     phone="0712345678",
        ...     items=(OrderItem("L1", 2),)
        ... )
        >>> request.to_dict()["items"]
        [{'lessonId': 'L1', 'quantity': 2}]
    """

    name: str
    phone: str
    items: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "phone": self.phone,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class SpacesUpdate:
    """
    Capacity reconciliation for one lesson (body of PUT /lessons/{id}).

    ``spaces`` is the absolute new value, so re-sending the same update
    is safe.
    """

    lesson_id: str
    spaces: int


@dataclass
class OrderConfirmation:
    """
    What the customer sees after a successful order.

    Attributes:
        order_id: Identifier returned by the backend
        total: Cart total computed locally before the cart was cleared
        items: Items that were ordered
    """

    order_id: str
    total: float
    items: List[OrderItem] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        """Total number of places booked."""
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary representation of the confirmation
        """
        return {
            "order_id": self.order_id,
            "total": self.total,
            "items": [item.to_dict() for item in self.items],
        }
