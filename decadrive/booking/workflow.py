"""
Order submission workflow.

Two backend phases run in order:
1. POST /orders creates the order.
2. PUT /lessons/{id} sets each purchased lesson's remaining spaces.

States:
- IDLE: Ready to submit
- SUBMITTING: Order creation in flight
- RECONCILING_CAPACITY: Spaces updates in flight
- SUCCEEDED: Order placed and capacity reconciled
- FAILED: Something went wrong; cart and details are kept for a retry

The order is durable once phase 1 succeeds. A failed spaces update is
not rolled back; it is reported as a partial failure and can be re-sent
with retry_reconciliation().
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..api.interfaces import BookingApi
from ..errors import (
    PartialFailureError,
    PreconditionError,
    TransportError,
    ValidationError,
)
from ..models.order import (
    CustomerDetails,
    OrderConfirmation,
    OrderItem,
    OrderRequest,
    SpacesUpdate,
    SubmissionState,
    ValidationState,
)
from ..models.result import ErrorKind, Result
from ..resilience.cancellation import CancellationToken, run_guarded
from ..validation.customer_validator import CustomerValidator, is_form_valid
from .cart import CartStore


logger = logging.getLogger(__name__)


ORDER_FAILED_MESSAGE = "Failed to place order. Please try again."
EMPTY_CART_MESSAGE = "Cart is empty"
IN_PROGRESS_MESSAGE = "An order is already being submitted"


@dataclass
class _PlacedOrder:
    """An order that exists on the backend but is not fully reconciled."""

    confirmation: OrderConfirmation
    request: OrderRequest
    updates: List[SpacesUpdate]
    cart: CartStore
    customer: CustomerDetails
    validation: ValidationState
    failed: List[SpacesUpdate] = field(default_factory=list)


class OrderSubmissionWorkflow:
    """
    Validates, places and reconciles one order at a time.

    Examples:
        >>> workflow = OrderSubmissionWorkflow(api, timeout=30)
        >>> result = await workflow.submit(cart, customer, validation)
        >>> if result.is_success:
        ...     print(f"Order {result.value.order_id}: {result.value.total}")
        ... else:
        ...     print(workflow.error)
    """

    def __init__(
        self,
        api: BookingApi,
        timeout: Optional[float] = None,
        validator: Optional[CustomerValidator] = None
    ):
        """
        Initialize the workflow.

        Args:
            api: Booking backend
            timeout: Deadline in seconds for each backend phase (None = no deadline)
            validator: Customer validator used for the final check
        """
        self.api = api
        self.timeout = timeout
        self.validator = validator or CustomerValidator()

        self._state = SubmissionState.IDLE
        self.error: Optional[str] = None
        self.last_confirmation: Optional[OrderConfirmation] = None
        self._placed: Optional[_PlacedOrder] = None

    @property
    def state(self) -> SubmissionState:
        """Get current submission state."""
        return self._state

    @property
    def is_processing(self) -> bool:
        """Check if a submission is in flight."""
        return self._state.is_processing

    @property
    def pending_reconciliation(self) -> List[SpacesUpdate]:
        """Spaces updates that failed after the order was placed."""
        if self._placed is None:
            return []
        return list(self._placed.failed)

    @property
    def pending_order_id(self) -> Optional[str]:
        """Order whose capacity reconciliation is incomplete, if any."""
        if self._placed is None or not self._placed.failed:
            return None
        return self._placed.confirmation.order_id

    def _transition(self, new_state: SubmissionState):
        logger.info(f"Order submission: {self._state.value} -> {new_state.value}")
        self._state = new_state

    def reset(self):
        """
        Return to IDLE and forget the last error and any unreconciled order.

        Raises:
            PreconditionError: If a submission is in flight
        """
        if self.is_processing:
            raise PreconditionError(IN_PROGRESS_MESSAGE)
        if self._state is not SubmissionState.IDLE:
            self._transition(SubmissionState.IDLE)
        self.error = None
        self._placed = None

    async def submit(
        self,
        cart: CartStore,
        customer: CustomerDetails,
        validation: ValidationState,
        token: Optional[CancellationToken] = None
    ) -> Result[OrderConfirmation]:
        """
        Validate the checkout form, place the order and reconcile capacity.

        The cart must not be modified until this returns.

        Args:
            cart: Cart to order
            customer: Customer details as typed
            validation: Validation state, recomputed here before submitting
            token: Optional cancellation token for the backend calls

        Returns:
            Result with the OrderConfirmation on success. On failure,
            ``kind`` tells whether anything reached the backend.
        """
        if self.is_processing:
            logger.warning("Duplicate order submission refused")
            return Result.failure(
                IN_PROGRESS_MESSAGE,
                PreconditionError(IN_PROGRESS_MESSAGE),
                kind=ErrorKind.PRECONDITION
            )

        self.reset()

        try:
            self._check_preconditions(cart, customer, validation)
        except ValidationError as e:
            self.error = str(e)
            return Result.failure(
                self.error, e, kind=ErrorKind.VALIDATION, field_errors=e.field_errors
            )
        except PreconditionError as e:
            self.error = str(e)
            return Result.failure(self.error, e, kind=ErrorKind.PRECONDITION)

        lines = cart.lines
        request = OrderRequest(
            name=customer.name.strip(),
            phone=customer.phone.strip(),
            items=tuple(OrderItem(line.lesson_id, line.quantity) for line in lines)
        )
        total = cart.total

        self._transition(SubmissionState.SUBMITTING)
        try:
            order_id = await run_guarded(
                self.api.create_order(request),
                token=token,
                timeout=self.timeout,
                operation="Order submission"
            )
        except TransportError as e:
            return self._fail(e.message or ORDER_FAILED_MESSAGE, e, ErrorKind.TRANSPORT)
        except asyncio.CancelledError:
            self._fail(ORDER_FAILED_MESSAGE, None, ErrorKind.TRANSPORT)
            raise
        except Exception as e:
            logger.exception("Unexpected error while creating order")
            return self._fail(ORDER_FAILED_MESSAGE, e, ErrorKind.TRANSPORT)

        # Absolute values from the pre-order snapshots
        updates = [
            SpacesUpdate(line.lesson_id, line.lesson.spaces - line.quantity)
            for line in lines
        ]
        self._placed = _PlacedOrder(
            confirmation=OrderConfirmation(order_id, total, list(request.items)),
            request=request,
            updates=updates,
            cart=cart,
            customer=customer,
            validation=validation
        )

        return await self._reconcile(updates, token)

    async def retry_reconciliation(
        self,
        token: Optional[CancellationToken] = None
    ) -> Result[OrderConfirmation]:
        """
        Re-send the spaces updates that failed after the last order was placed.

        Each update carries an absolute value, so sending it twice has the
        same effect as sending it once. Never called automatically.

        Returns:
            Result with the OrderConfirmation once every update succeeded
        """
        if self.is_processing:
            return Result.failure(
                IN_PROGRESS_MESSAGE,
                PreconditionError(IN_PROGRESS_MESSAGE),
                kind=ErrorKind.PRECONDITION
            )

        if self._placed is None or not self._placed.failed:
            message = "No capacity updates are waiting to be retried"
            return Result.failure(message, PreconditionError(message), kind=ErrorKind.PRECONDITION)

        logger.info(
            f"Retrying {len(self._placed.failed)} spaces update(s) "
            f"for order {self._placed.confirmation.order_id}"
        )
        self.error = None
        return await self._reconcile(list(self._placed.failed), token)

    async def _reconcile(
        self,
        updates: List[SpacesUpdate],
        token: Optional[CancellationToken]
    ) -> Result[OrderConfirmation]:
        placed = self._placed
        self._transition(SubmissionState.RECONCILING_CAPACITY)

        try:
            failed = await self._send_updates(updates, token)
        except asyncio.CancelledError:
            placed.failed = list(updates)
            error = PartialFailureError(
                placed.confirmation.order_id,
                [update.lesson_id for update in updates]
            )
            self._fail(str(error), error, ErrorKind.PARTIAL_FAILURE)
            raise

        placed.failed = failed
        if failed:
            error = PartialFailureError(
                placed.confirmation.order_id,
                [update.lesson_id for update in failed]
            )
            return self._fail(str(error), error, ErrorKind.PARTIAL_FAILURE)

        self._release_ordered(placed)

        self._placed = None
        self.last_confirmation = placed.confirmation
        self._transition(SubmissionState.SUCCEEDED)
        return Result.success(
            placed.confirmation,
            f"Order {placed.confirmation.order_id} placed"
        )

    def _release_ordered(self, placed: _PlacedOrder):
        """
        Take the ordered lines and details out of the checkout.

        Between a partial failure and a successful retry the cart is not
        frozen, so only what still matches the order is removed. Lines
        added or changed since, and edited customer details, are kept.
        """
        for item in placed.confirmation.items:
            line = placed.cart.get(item.lesson_id)
            if line is not None and line.quantity == item.quantity:
                placed.cart.remove(item.lesson_id)
            elif line is not None:
                logger.info(
                    f"Keeping lesson {item.lesson_id} in cart: quantity changed "
                    f"since order {placed.confirmation.order_id}"
                )

        customer = placed.customer
        if (customer.name.strip(), customer.phone.strip()) == (
            placed.request.name,
            placed.request.phone,
        ):
            customer.clear()
            placed.validation.clear()

    async def _send_updates(
        self,
        updates: List[SpacesUpdate],
        token: Optional[CancellationToken]
    ) -> List[SpacesUpdate]:
        """
        Issue every update concurrently and wait for all of them.

        Returns:
            The updates that did not succeed
        """
        calls = [
            self.api.update_lesson_spaces(update.lesson_id, update.spaces)
            for update in updates
        ]

        try:
            outcomes = await run_guarded(
                asyncio.gather(*calls, return_exceptions=True),
                token=token,
                timeout=self.timeout,
                operation="Capacity reconciliation"
            )
        except TransportError as e:
            # Unknown which calls landed; resending an absolute value is safe
            logger.error(f"Capacity reconciliation aborted: {e}")
            return list(updates)

        failed = []
        for update, outcome in zip(updates, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    f"Spaces update failed for lesson {update.lesson_id} "
                    f"(spaces={update.spaces}): {outcome}"
                )
                failed.append(update)
        return failed

    def _check_preconditions(
        self,
        cart: CartStore,
        customer: CustomerDetails,
        validation: ValidationState
    ):
        """
        Run the authoritative validation pass.

        Raises:
            ValidationError: If a customer field is invalid
            PreconditionError: If the cart is empty
        """
        self.validator.refresh(customer, validation)
        if not is_form_valid(customer, validation):
            raise ValidationError(validation.to_dict())

        if cart.is_empty:
            raise PreconditionError(EMPTY_CART_MESSAGE)

    def _fail(
        self,
        message: str,
        error: Optional[Exception],
        kind: ErrorKind
    ) -> Result[OrderConfirmation]:
        logger.error(f"Order submission failed: {message}")
        self.error = message
        self._transition(SubmissionState.FAILED)
        return Result.failure(message, error, kind=kind)

    def get_state_info(self) -> dict:
        """
        Get current workflow state for debugging.

        Returns:
            Dictionary with state, last error and reconciliation backlog
        """
        return {
            "state": self._state.value,
            "processing": self.is_processing,
            "error": self.error,
            "last_order_id": (
                self.last_confirmation.order_id
                if self.last_confirmation
                else None
            ),
            "pending_order_id": self.pending_order_id,
            "pending_reconciliation": [
                {"lesson_id": update.lesson_id, "spaces": update.spaces}
                for update in self.pending_reconciliation
            ],
        }
