"""
Unit tests for lesson query construction.
"""

import pytest

from decadrive.booking.query import SortDirection, SortField, build_lesson_query


class TestBuildLessonQuery:
    """Test cases for build_lesson_query."""

    def test_search_and_sort(self):
        """Test all three parameters, in order."""
        params = build_lesson_query("maths", "price", "desc")

        assert params == {"q": "maths", "sortBy": "price", "order": "desc"}
        assert list(params) == ["q", "sortBy", "order"]

    def test_empty_search_with_sort(self):
        """Test empty search text is left out."""
        assert build_lesson_query("", "subject") == {"sortBy": "subject", "order": "asc"}

    def test_direction_without_field(self):
        """Test a direction alone produces no parameters."""
        assert build_lesson_query(None, None, "desc") == {}

    def test_no_arguments(self):
        assert build_lesson_query() == {}

    def test_search_only(self):
        assert build_lesson_query("Hendon") == {"q": "Hendon"}

    def test_search_text_trimmed(self):
        assert build_lesson_query("  parking ") == {"q": "parking"}

    def test_whitespace_search_left_out(self):
        assert build_lesson_query("   ", SortField.SPACES) == {"sortBy": "spaces", "order": "asc"}

    def test_enum_arguments(self):
        params = build_lesson_query(None, SortField.LOCATION, SortDirection.DESCENDING)

        assert params == {"sortBy": "location", "order": "desc"}

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="SortField"):
            build_lesson_query("x", "instructor")

    def test_unknown_direction(self):
        with pytest.raises(ValueError, match="SortDirection"):
            build_lesson_query("x", "price", "sideways")


class TestSortDirection:
    """Test cases for SortDirection."""

    def test_toggled(self):
        assert SortDirection.ASCENDING.toggled() is SortDirection.DESCENDING
        assert SortDirection.DESCENDING.toggled() is SortDirection.ASCENDING
