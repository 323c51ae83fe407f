"""
Booking session.

One BookingSession holds everything a customer's visit mutates: the
lesson catalog, the cart, the checkout form and its validation state,
and the order workflow. Components receive only the part they work on;
nothing is shared through globals.
"""

import logging
from typing import Optional

from ..api.client import HttpBookingApi
from ..api.interfaces import BookingApi
from ..models.order import (
    CustomerDetails,
    OrderConfirmation,
    SubmissionState,
    ValidationState,
)
from ..models.result import Result
from ..resilience.cancellation import CancellationToken
from ..utils.config import Config
from ..utils.logger import setup_logger
from ..utils.preferences import PreferenceStore
from ..validation.customer_validator import (
    CustomerValidator,
    is_form_valid,
    validate_name,
    validate_phone,
)
from .cart import CartStore
from .catalog import LessonCatalog
from .workflow import OrderSubmissionWorkflow


logger = logging.getLogger(__name__)


class BookingSession:
    """
    State of one customer's booking visit.

    Examples:
        >>> session = BookingSession(api)
        >>> await session.catalog.fetch()
        >>> session.cart.add(session.catalog.lessons[0])
        >>> session.set_name("Ann Lee")
        >>> session.set_phone("0712345678")
        >>> result = await session.checkout()
        >>> if result.is_success:
        ...     print(session.last_order.order_id)
    """

    def __init__(
        self,
        api: BookingApi,
        submit_timeout: Optional[float] = None,
        preferences: Optional[PreferenceStore] = None
    ):
        """
        Initialize BookingSession.

        Args:
            api: Booking backend
            submit_timeout: Deadline for each order submission phase
            preferences: Store for the theme preference (optional)
        """
        self.api = api
        self.catalog = LessonCatalog(api)
        self.cart = CartStore()
        self.customer = CustomerDetails()
        self.validation = ValidationState()
        self.validator = CustomerValidator()
        self.workflow = OrderSubmissionWorkflow(
            api,
            timeout=submit_timeout,
            validator=self.validator
        )

        self.preferences = preferences
        self.dark_mode = False
        if preferences is not None:
            saved = preferences.get_dark_mode()
            if saved is not None:
                self.dark_mode = saved

    @property
    def state(self) -> SubmissionState:
        """Get current submission state."""
        return self.workflow.state

    @property
    def is_processing(self) -> bool:
        """Check if an order is being submitted (cart is frozen)."""
        return self.workflow.is_processing

    @property
    def is_form_valid(self) -> bool:
        """Check if the checkout form may be submitted."""
        return is_form_valid(self.customer, self.validation)

    @property
    def error(self) -> Optional[str]:
        """Last checkout error, if any."""
        return self.workflow.error

    @property
    def last_order(self) -> Optional[OrderConfirmation]:
        """Confirmation of the last successful order."""
        return self.workflow.last_confirmation

    def set_name(self, raw: str) -> str:
        """
        Store the name as typed and validate it.

        Returns:
            The field's validation message ("" if valid)
        """
        self.customer.name = raw
        self.validation.name = validate_name(raw)
        return self.validation.name

    def set_phone(self, raw: str) -> str:
        """
        Store the phone number as typed and validate it.

        Returns:
            The field's validation message ("" if valid)
        """
        self.customer.phone = raw
        self.validation.phone = validate_phone(raw)
        return self.validation.phone

    async def checkout(
        self,
        token: Optional[CancellationToken] = None
    ) -> Result[OrderConfirmation]:
        """
        Submit the cart as an order.

        Args:
            token: Optional cancellation token (e.g. the customer leaves checkout)

        Returns:
            Result from the order workflow
        """
        logger.info(
            f"Checkout requested: {len(self.cart)} line(s), "
            f"{self.cart.count} place(s), total {self.cart.total:.2f}"
        )
        return await self.workflow.submit(
            self.cart,
            self.customer,
            self.validation,
            token=token
        )

    async def retry_reconciliation(
        self,
        token: Optional[CancellationToken] = None
    ) -> Result[OrderConfirmation]:
        """Re-send capacity updates left over from a partial failure."""
        return await self.workflow.retry_reconciliation(token=token)

    def reset(self):
        """Empty the cart and the checkout form and return to IDLE."""
        self.workflow.reset()
        self.cart.clear()
        self.customer.clear()
        self.validation.clear()
        logger.info("Booking session reset")

    async def start_over(self) -> Result:
        """Reset, then refetch lessons so updated spaces are shown."""
        self.reset()
        return await self.catalog.fetch()

    def toggle_dark_mode(self) -> bool:
        """
        Flip the theme preference and persist it.

        Returns:
            The new dark-mode setting
        """
        self.dark_mode = not self.dark_mode
        if self.preferences is not None:
            self.preferences.set_dark_mode(self.dark_mode)
        return self.dark_mode

    def get_session_info(self) -> dict:
        """
        Get session information for debugging.

        Customer details are not included.
        """
        return {
            "state": self.state.value,
            "processing": self.is_processing,
            "cart_lines": len(self.cart),
            "cart_count": self.cart.count,
            "cart_total": self.cart.total,
            "form_valid": self.is_form_valid,
            "validation_errors": self.validation.to_dict(),
            "lessons_loaded": len(self.catalog.lessons),
            "catalog_error": self.catalog.error,
            "dark_mode": self.dark_mode,
            "workflow": self.workflow.get_state_info(),
        }


def build_session(settings: Optional[Config] = None) -> BookingSession:
    """
    Create a BookingSession talking to the configured backend.

    Args:
        settings: Configuration; the module-level config is used if omitted

    Returns:
        A new session with an HttpBookingApi
    """
    if settings is None:
        from ..utils.config import config as settings

    settings.validate()
    setup_logger(level=getattr(logging, settings.log_level))

    api = HttpBookingApi(settings.backend_url, timeout=settings.request_timeout)
    return BookingSession(
        api,
        submit_timeout=settings.submit_timeout,
        preferences=PreferenceStore(settings.preferences_file)
    )
