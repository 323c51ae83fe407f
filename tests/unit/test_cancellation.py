"""
Unit tests for cancellation token and deadline guard.
"""

import asyncio

import pytest

from decadrive.errors import (
    DeadlineExceededError,
    OperationCancelledError,
    TransportError,
)
from decadrive.resilience.cancellation import CancellationToken, run_guarded


class TestCancellationToken:
    """Test cases for CancellationToken."""

    @pytest.mark.asyncio
    async def test_initial_state(self):
        token = CancellationToken()

        assert not token.is_cancelled
        assert token.reason is None

    @pytest.mark.asyncio
    async def test_cancel_keeps_first_reason(self):
        token = CancellationToken()
        token.cancel("customer left checkout")
        token.cancel("second")

        assert token.is_cancelled
        assert token.reason == "customer left checkout"


class TestRunGuarded:
    """Test cases for run_guarded."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        async def call():
            return "O1"

        assert await run_guarded(call(), timeout=1.0) == "O1"

    @pytest.mark.asyncio
    async def test_propagates_call_error(self):
        async def call():
            raise TransportError("Lesson unavailable", 400)

        with pytest.raises(TransportError, match="Lesson unavailable"):
            await run_guarded(call(), timeout=1.0)

    @pytest.mark.asyncio
    async def test_deadline_exceeded(self):
        """Test a hung call is abandoned when the deadline passes."""
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def hang():
            started.set()
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with pytest.raises(DeadlineExceededError, match="create order timed out"):
            await run_guarded(hang(), timeout=0.05, operation="create order")

        assert started.is_set()
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_token_cancels_call(self):
        token = CancellationToken()
        cancelled = asyncio.Event()

        async def hang():
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        async def cancel_soon():
            await asyncio.sleep(0.01)
            token.cancel("customer left checkout")

        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(OperationCancelledError):
            await run_guarded(hang(), token=token, timeout=5.0)
        await canceller

        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_already_cancelled_token(self):
        """Test the call never runs to completion when the token is already set."""
        token = CancellationToken()
        token.cancel()
        calls = []

        async def call():
            calls.append(1)
            return "O1"

        with pytest.raises(OperationCancelledError):
            await run_guarded(call(), token=token)

        assert calls == []

    @pytest.mark.asyncio
    async def test_guard_errors_are_transport_errors(self):
        """Test deadline errors can be handled as transport failures."""
        async def hang():
            await asyncio.sleep(60)

        with pytest.raises(TransportError):
            await run_guarded(hang(), timeout=0.01)
