"""
Validator base class and shared checks.

Concrete validators (customer details, lesson records) subclass
Validator and report through ValidationResult, which keeps per-field
messages next to the flat error list so a form can show each message
under its own input.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


@dataclass
class ValidationResult:
    """
    Outcome of one validation pass.

    Attributes:
        is_valid: False as soon as one error is recorded
        errors: Every error message, in the order found
        warnings: Non-fatal observations
        field_errors: Message per input field, for errors tied to one field
    """

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    field_errors: Dict[str, str] = field(default_factory=dict)

    def add_error(self, message: str, field_name: Optional[str] = None) -> 'ValidationResult':
        """
        Record an error, optionally against a field.

        Examples:
            >>> outcome = ValidationResult(is_valid=True)
            >>> outcome.add_error("Name is required", "name").field_errors
            {'name': 'Name is required'}
        """
        self.is_valid = False
        self.errors.append(message)
        if field_name is not None:
            self.field_errors[field_name] = message
        return self

    def add_warning(self, message: str) -> 'ValidationResult':
        """Record a warning. Warnings never affect validity."""
        self.warnings.append(message)
        return self

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def get_summary(self) -> str:
        """
        One block of text listing errors then warnings.

        Returns:
            "Validation passed" when there is nothing to report
        """
        if not self.errors and not self.warnings:
            return "Validation passed"

        sections = []
        for title, messages in (("Errors", self.errors), ("Warnings", self.warnings)):
            if messages:
                sections.append(f"{title} ({len(messages)}):")
                sections.extend(f"  - {message}" for message in messages)
        return "\n".join(sections)


class Validator(ABC):
    """
    Base class for validators.

    The check_* helpers return an error message, or None when the value
    passes, so callers can feed them straight into add_error().
    """

    @abstractmethod
    def validate(self, data: Any) -> ValidationResult:
        """Validate ``data`` and report every problem found."""
        pass

    def validate_required_fields(
        self,
        data: Dict[str, Any],
        required_fields: Iterable[str]
    ) -> List[str]:
        """
        Check that each named key is present and not None.

        Returns:
            One message per missing field
        """
        return [
            f"Missing required field: {name}"
            for name in required_fields
            if data.get(name) is None
        ]

    def check_non_negative_number(
        self,
        value: Any,
        field_name: str,
        integer: bool = False
    ) -> Optional[str]:
        """
        Check for a number >= 0, optionally a whole one.

        Args:
            value: Decoded JSON value
            field_name: Used in the message
            integer: Require an integral value (e.g. a count of spaces)
        """
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"{field_name} must be a number, got {type(value).__name__}"

        if integer and not float(value).is_integer():
            return f"{field_name} must be a whole number, got {value}"

        if value < 0:
            return f"{field_name} must not be negative, got {value}"

        return None

    def check_text(
        self,
        value: Any,
        field_name: str,
        max_length: int
    ) -> Optional[str]:
        """Check for a non-empty string of at most ``max_length`` characters."""
        if not isinstance(value, str):
            return f"{field_name} must be a string, got {type(value).__name__}"

        if not value.strip():
            return f"{field_name} must not be empty"

        if len(value) > max_length:
            return f"{field_name} must be at most {max_length} characters, got {len(value)}"

        return None
