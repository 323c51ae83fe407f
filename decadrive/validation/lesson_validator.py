"""
Lesson record validator.

Checks the raw records returned by GET /lessons before they are turned
into Lesson snapshots.
"""

from typing import Dict, Any

from .validators import Validator, ValidationResult


class LessonValidator(Validator):
    """
    Validator for lesson records from the listing endpoint.

    Validates:
    - Required fields
    - Data types
    - Business rules (price and spaces never negative)

    Examples:
        >>> validator = LessonValidator()
        >>> record = {
        ...     "_id": "L1",
        ...     "subject": "Roundabouts",
        ...     "location": "Barnet",
        ...     "price": 50,
        ...     "spaces": 5
        ... }
        >>> validator.validate(record).is_valid
        True
    """

    REQUIRED_FIELDS = ["subject", "location", "price", "spaces"]

    # Lessons with more places than this are suspicious but still bookable
    MAX_EXPECTED_SPACES = 50

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        """
        Validate one lesson record.

        Args:
            data: Lesson record as decoded from JSON

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult(is_valid=True)

        if not isinstance(data, dict):
            return result.add_error(
                f"Lesson record must be an object, got {type(data).__name__}"
            )

        if data.get("_id") is None and data.get("id") is None:
            result.add_error("Missing required field: _id")

        for error in self.validate_required_fields(data, self.REQUIRED_FIELDS):
            result.add_error(error)

        if not result.is_valid:
            return result

        lesson_id = data["_id"] if data.get("_id") is not None else data["id"]
        error = self.check_text(str(lesson_id), "_id", max_length=100)
        if error:
            result.add_error(error)

        for name in ("subject", "location"):
            error = self.check_text(data[name], name, max_length=200)
            if error:
                result.add_error(error)

        error = self.check_non_negative_number(data["price"], "price")
        if error:
            result.add_error(error)

        error = self.check_non_negative_number(data["spaces"], "spaces", integer=True)
        if error:
            result.add_error(error)
        elif data["spaces"] > self.MAX_EXPECTED_SPACES:
            result.add_warning(
                f"Unusually many spaces: {data['spaces']} "
                f"(expected at most {self.MAX_EXPECTED_SPACES})"
            )

        return result
