"""
Tests for BookingSession.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from decadrive.api.client import HttpBookingApi
from decadrive.booking.session import BookingSession, build_session
from decadrive.errors import PreconditionError, TransportError
from decadrive.models.lesson import Lesson
from decadrive.models.order import SubmissionState
from decadrive.models.result import ErrorKind
from decadrive.utils.preferences import PreferenceStore


def make_lesson(lesson_id="L1", spaces=5):
    return Lesson(id=lesson_id, subject="Parallel parking", location="Hendon", price=50.0, spaces=spaces)


class TestBookingSession:
    """Test cases for BookingSession."""

    @pytest.fixture
    def api(self):
        """Create mock booking backend."""
        api = Mock()
        api.list_lessons = AsyncMock(return_value=[make_lesson("L1"), make_lesson("L2", spaces=0)])
        api.create_order = AsyncMock(return_value="O1")
        api.update_lesson_spaces = AsyncMock(return_value=None)
        return api

    @pytest.fixture
    def preferences(self, tmp_path):
        """Create preference store in a temp directory."""
        return PreferenceStore(tmp_path / "preferences.json")

    @pytest.fixture
    def session(self, api, preferences):
        """Create session instance."""
        return BookingSession(api, submit_timeout=1.0, preferences=preferences)

    def test_initial_state(self, session):
        assert session.state == SubmissionState.IDLE
        assert not session.is_processing
        assert not session.is_form_valid
        assert session.cart.is_empty
        assert session.dark_mode is False
        assert session.last_order is None

    def test_live_validation(self, session):
        """Test each edit updates that field's message."""
        assert session.set_name("John3") == "Name must contain only letters and spaces"
        assert session.set_phone("12345") == "Phone must be at least 6 digits"
        assert not session.is_form_valid

        assert session.set_name("John Doe") == ""
        assert session.set_phone("1234567") == ""
        assert session.is_form_valid

    @pytest.mark.asyncio
    async def test_full_checkout(self, session, api):
        """Test browse, add to cart, fill in details and check out."""
        await session.catalog.fetch()
        lesson = session.catalog.find("L1")
        session.cart.add(lesson)
        session.cart.add(lesson)
        session.set_name("Ann Lee")
        session.set_phone("0712345678")

        result = await session.checkout()

        assert result.is_success
        assert session.state == SubmissionState.SUCCEEDED
        assert session.last_order.order_id == "O1"
        assert session.last_order.total == 100.0
        assert session.cart.is_empty
        assert session.customer.name == ""
        api.update_lesson_spaces.assert_awaited_once_with("L1", 3)

    @pytest.mark.asyncio
    async def test_sold_out_lesson_not_added(self, session):
        await session.catalog.fetch()

        assert session.cart.add(session.catalog.find("L2")) is False
        assert session.cart.is_empty

    @pytest.mark.asyncio
    async def test_checkout_empty_cart(self, session, api):
        session.set_name("Ann Lee")
        session.set_phone("0712345678")

        result = await session.checkout()

        assert result.kind == ErrorKind.PRECONDITION
        assert session.error == "Cart is empty"
        api.create_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_over(self, session, api):
        """Test start over empties the session and refetches lessons."""
        session.cart.add(make_lesson())
        session.set_name("Ann Lee")

        result = await session.start_over()

        assert result.is_success
        assert session.cart.is_empty
        assert session.customer.name == ""
        assert session.validation.to_dict() == {}
        assert session.state == SubmissionState.IDLE
        api.list_lessons.assert_awaited_once()

    def test_reset_while_processing(self, session):
        session.workflow._state = SubmissionState.SUBMITTING

        with pytest.raises(PreconditionError):
            session.reset()

    def test_toggle_dark_mode_persists(self, session, api, preferences):
        assert session.toggle_dark_mode() is True
        assert preferences.get("darkMode") == "true"

        reloaded = BookingSession(api, preferences=PreferenceStore(preferences.filepath))

        assert reloaded.dark_mode is True

    def test_toggle_dark_mode_without_store(self, api):
        session = BookingSession(api)

        assert session.toggle_dark_mode() is True
        assert session.toggle_dark_mode() is False

    def test_session_info_has_no_customer_details(self, session):
        session.set_name("Ann Lee")
        session.set_phone("0712345678")
        session.cart.add(make_lesson())

        info = session.get_session_info()

        assert info["state"] == "idle"
        assert info["cart_count"] == 1
        assert info["cart_total"] == 50.0
        assert info["form_valid"] is True
        assert "Ann Lee" not in str(info)
        assert "0712345678" not in str(info)


class TestBuildSession:
    """Test cases for build_session."""

    def test_build_session(self, tmp_path):
        settings = Mock()
        settings.backend_url = "http://localhost:8080"
        settings.request_timeout = 5.0
        settings.submit_timeout = 15.0
        settings.preferences_file = tmp_path / "preferences.json"
        settings.log_level = "INFO"

        with patch("decadrive.booking.session.setup_logger") as mock_setup:
            session = build_session(settings)

        settings.validate.assert_called_once()
        mock_setup.assert_called_once()
        assert isinstance(session.api, HttpBookingApi)
        assert session.api.base_url == "http://localhost:8080"
        assert session.workflow.timeout == 15.0
        assert session.preferences.filepath == tmp_path / "preferences.json"

    def test_invalid_settings(self):
        settings = Mock()
        settings.validate.side_effect = ValueError("Configuration validation failed")

        with pytest.raises(ValueError):
            build_session(settings)


class TestPartialFailureRecovery:
    """Test cases for editing the cart between a partial failure and a retry."""

    @pytest.mark.asyncio
    async def test_lesson_added_after_failure_survives_retry(self):
        api = Mock()
        api.list_lessons = AsyncMock(return_value=[])
        api.create_order = AsyncMock(return_value="O1")
        api.update_lesson_spaces = AsyncMock(side_effect=TransportError("Lesson not found", 404))
        session = BookingSession(api, submit_timeout=1.0)

        session.cart.add(make_lesson("L1"))
        session.set_name("Ann Lee")
        session.set_phone("0712345678")

        failed = await session.checkout()
        assert failed.kind == ErrorKind.PARTIAL_FAILURE

        session.cart.add(make_lesson("L9"))
        api.update_lesson_spaces.side_effect = None

        result = await session.retry_reconciliation()

        assert result.is_success
        assert session.cart.contains("L9")
        assert not session.cart.contains("L1")
        assert session.state == SubmissionState.SUCCEEDED
