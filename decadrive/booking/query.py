"""
Query construction for the lesson listing endpoint.

Filtering and ordering happen on the backend; this module only turns
the customer's search box and sort controls into GET /lessons
parameters.
"""

from enum import Enum
from typing import Dict, Optional, Union


class SortField(Enum):
    """Lesson attributes the backend can sort by."""
    SUBJECT = "subject"
    LOCATION = "location"
    PRICE = "price"
    SPACES = "spaces"


class SortDirection(Enum):
    """Sort directions."""
    ASCENDING = "asc"
    DESCENDING = "desc"

    def toggled(self) -> 'SortDirection':
        """Return the opposite direction."""
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


def _coerce(value, enum_type):
    if value is None or isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValueError(f"Invalid {enum_type.__name__} {value!r} (expected one of: {allowed})")


def build_lesson_query(
    search_text: Optional[str] = None,
    sort_field: Optional[Union[SortField, str]] = None,
    sort_direction: Optional[Union[SortDirection, str]] = None
) -> Dict[str, str]:
    """
    Build GET /lessons query parameters.

    Args:
        search_text: Free-text search; blank means no filtering
        sort_field: Attribute to sort by, or None for backend order
        sort_direction: Direction; defaults to ascending when a field is given

    Returns:
        Parameters in the order q, sortBy, order. Absent parameters are
        left out, never sent as empty strings.

    Raises:
        ValueError: If the sort field or direction is not recognised

    Examples:
        >>> build_lesson_query("maths", "price", "desc")
        {'q': 'maths', 'sortBy': 'price', 'order': 'desc'}
        >>> build_lesson_query("", "subject")
        {'sortBy': 'subject', 'order': 'asc'}
        >>> build_lesson_query(None, None, "desc")
        {}
    """
    field = _coerce(sort_field, SortField)
    direction = _coerce(sort_direction, SortDirection)

    params: Dict[str, str] = {}

    text = (search_text or "").strip()
    if text:
        params["q"] = text

    if field is not None:
        params["sortBy"] = field.value
        params["order"] = (direction or SortDirection.ASCENDING).value

    return params
