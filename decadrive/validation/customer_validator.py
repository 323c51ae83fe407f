"""
Customer details validator.

The two field checks run on every edit for live feedback and once more
right before an order is submitted.
"""

import re

from ..models.order import VALID, CustomerDetails, ValidationState
from .validators import Validator, ValidationResult


NAME_PATTERN = re.compile(r"[A-Za-z ]+")
PHONE_PATTERN = re.compile(r"[0-9]+")
MIN_PHONE_DIGITS = 6


def validate_name(raw: str) -> str:
    """
    Validate a customer name.

    Returns:
        An error message, or VALID ("") if the name is acceptable

    Examples:
        >>> validate_name("John Doe")
        ''
        >>> validate_name("John3")
        'Name must contain only letters and spaces'
    """
    name = (raw or "").strip()

    if not name:
        return "Name is required"
    if not NAME_PATTERN.fullmatch(name):
        return "Name must contain only letters and spaces"
    return VALID


def validate_phone(raw: str) -> str:
    """
    Validate a customer phone number.

    Returns:
        An error message, or VALID ("") if the number is acceptable

    Examples:
        >>> validate_phone("12345")
        'Phone must be at least 6 digits'
    """
    phone = (raw or "").strip()

    if not phone:
        return "Phone number is required"
    if not PHONE_PATTERN.fullmatch(phone):
        return "Phone must contain only digits"
    if len(phone) < MIN_PHONE_DIGITS:
        return f"Phone must be at least {MIN_PHONE_DIGITS} digits"
    return VALID


def is_form_valid(details: CustomerDetails, state: ValidationState) -> bool:
    """
    Check whether checkout may start.

    Both fields must be filled in and neither may carry an error. The
    state is read as-is; call CustomerValidator.refresh() first for an
    authoritative answer.
    """
    return bool(
        details.name
        and details.phone
        and state.name == VALID
        and state.phone == VALID
    )


class CustomerValidator(Validator):
    """
    Validator for checkout customer details.

    Examples:
        >>> validator = CustomerValidator()
        >>> result = validator.validate(CustomerDetails("Ann Lee", "0712345678"))
        >>> result.is_valid
        True
    """

    def validate(self, data: CustomerDetails) -> ValidationResult:
        """
        Validate both fields.

        Args:
            data: Customer details as typed

        Returns:
            ValidationResult whose field_errors are keyed "name" / "phone"
        """
        result = ValidationResult(is_valid=True)

        message = validate_name(data.name)
        if message:
            result.add_error(message, "name")

        message = validate_phone(data.phone)
        if message:
            result.add_error(message, "phone")

        return result

    def refresh(self, details: CustomerDetails, state: ValidationState) -> ValidationState:
        """
        Recompute every field of ``state`` from ``details``.

        Returns:
            The same state object, updated in place
        """
        state.name = validate_name(details.name)
        state.phone = validate_phone(details.phone)
        return state
