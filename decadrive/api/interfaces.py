"""
Abstract interface for the booking backend.

The controller depends on this interface rather than on the HTTP client,
so tests can substitute an in-memory fake and the transport can be swapped.
"""

from abc import ABC, abstractmethod
from typing import List, Mapping

from ..models.lesson import Lesson
from ..models.order import OrderRequest


class BookingApi(ABC):
    """
    Abstract interface for backend operations.

    Implementations raise TransportError (or a subclass) when a request
    fails at the network or status level.
    """

    @abstractmethod
    async def list_lessons(self, params: Mapping[str, str]) -> List[Lesson]:
        """
        Fetch lessons, already filtered and sorted by the backend.

        Args:
            params: Query parameters built by build_lesson_query()

        Returns:
            Lesson snapshots in backend order
        """
        pass

    @abstractmethod
    async def create_order(self, request: OrderRequest) -> str:
        """
        Create an order.

        Args:
            request: Customer details and ordered items

        Returns:
            Identifier of the created order
        """
        pass

    @abstractmethod
    async def update_lesson_spaces(self, lesson_id: str, spaces: int) -> None:
        """
        Set a lesson's remaining capacity to an absolute value.

        Args:
            lesson_id: Lesson to update
            spaces: New number of spaces (not a delta)
        """
        pass

    async def aclose(self):
        """Release transport resources. Must not raise."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
