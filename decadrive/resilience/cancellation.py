"""
Cancellation and deadlines for backend calls.

Every network call made by the order workflow runs through run_guarded(),
so a hung backend or a customer abandoning checkout ends the call with a
clean error instead of blocking forever.
"""

import asyncio
import logging
from typing import Any, Awaitable, Optional

from ..errors import DeadlineExceededError, OperationCancelledError


logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Cooperative cancellation signal shared by the calls of one operation.

    Examples:
        >>> token = CancellationToken()
        >>> task = asyncio.create_task(session.checkout(token=token))
        >>> token.cancel("customer left checkout")
    """

    def __init__(self):
        """Initialize an uncancelled token."""
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled"):
        """Signal cancellation. Later calls keep the first reason."""
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        logger.info(f"Cancellation requested: {reason}")

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._event.is_set()

    async def wait(self):
        """Wait until cancellation is requested."""
        await self._event.wait()


async def run_guarded(
    awaitable: Awaitable[Any],
    *,
    token: Optional[CancellationToken] = None,
    timeout: Optional[float] = None,
    operation: str = "request"
) -> Any:
    """
    Await ``awaitable`` unless the token fires or the timeout expires first.

    Args:
        awaitable: Coroutine or future to run
        token: Optional cancellation token
        timeout: Seconds to wait, or None for no deadline
        operation: Name used in error messages and logs

    Returns:
        Whatever the awaitable returns

    Raises:
        OperationCancelledError: If the token was cancelled first
        DeadlineExceededError: If the timeout expired first
        Exception: Anything raised by the awaitable itself
    """
    task = asyncio.ensure_future(awaitable)

    if token is not None and token.is_cancelled:
        task.cancel()
        await asyncio.wait({task})
        raise OperationCancelledError(f"{operation} was cancelled")

    waiters = {task}
    cancel_waiter = None
    if token is not None:
        cancel_waiter = asyncio.ensure_future(token.wait())
        waiters.add(cancel_waiter)

    try:
        done, _ = await asyncio.wait(
            waiters,
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        if cancel_waiter is not None:
            cancel_waiter.cancel()
        if not task.done():
            task.cancel()

    if task in done:
        return task.result()

    # The guarded call is abandoned; wait for it to unwind before reporting
    await asyncio.wait({task})

    if token is not None and token.is_cancelled:
        logger.warning(f"{operation} cancelled: {token.reason}")
        raise OperationCancelledError(f"{operation} was cancelled")

    logger.warning(f"{operation} timed out after {timeout}s")
    raise DeadlineExceededError(f"{operation} timed out")
