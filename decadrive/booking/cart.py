"""
In-memory shopping cart.

Each line keeps the Lesson snapshot taken when it was first added.
Snapshots are not refreshed; the backend has the final word on capacity
when the order is placed.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from ..models.lesson import Lesson


logger = logging.getLogger(__name__)


@dataclass
class CartLine:
    """
    One lesson selection.

    Attributes:
        lesson: Snapshot of the lesson at add-time
        quantity: Number of places, 1 <= quantity <= lesson.spaces
    """

    lesson: Lesson
    quantity: int = 1

    @property
    def lesson_id(self) -> str:
        return self.lesson.id

    @property
    def subtotal(self) -> float:
        return self.lesson.price * self.quantity

    @property
    def at_capacity(self) -> bool:
        """Check if the snapshot's spaces are all taken by this line."""
        return self.quantity >= self.lesson.spaces


class CartStore:
    """
    Ordered collection of cart lines, unique by lesson id.

    Count and total are computed on demand from the lines, so they can
    never drift from the cart contents.

    Examples:
        >>> cart = CartStore()
        >>> cart.add(lesson)
        True
        >>> cart.increase(lesson.id)
        True
        >>> cart.count, cart.total
        (2, 100.0)
    """

    def __init__(self):
        """Create an empty cart."""
        self._lines: Dict[str, CartLine] = {}

    def add(self, lesson: Lesson) -> bool:
        """
        Add one place on a lesson.

        An existing line grows by one unless it already holds every
        space of its snapshot. A new line starts at quantity 1; a lesson
        with no spaces left is not inserted at all.

        Args:
            lesson: Lesson snapshot from the catalog

        Returns:
            True if the cart changed
        """
        line = self._lines.get(lesson.id)
        if line is not None:
            return self._increment(line)

        if lesson.spaces <= 0:
            logger.debug(f"Lesson {lesson.id} has no spaces left, not added")
            return False

        self._lines[lesson.id] = CartLine(lesson=lesson, quantity=1)
        logger.debug(f"Added lesson {lesson.id} to cart")
        return True

    def remove(self, lesson_id: str) -> bool:
        """
        Remove a line entirely. Removing an absent line is a no-op.

        Returns:
            True if a line was removed
        """
        removed = self._lines.pop(lesson_id, None)
        if removed is not None:
            logger.debug(f"Removed lesson {lesson_id} from cart")
        return removed is not None

    def increase(self, lesson_id: str) -> bool:
        """
        Add one place to an existing line, up to its snapshot's spaces.

        Returns:
            True if the quantity changed
        """
        line = self._lines.get(lesson_id)
        if line is None:
            return False
        return self._increment(line)

    def decrease(self, lesson_id: str) -> bool:
        """
        Take one place off a line; a line at quantity 1 is removed.

        Returns:
            True if the cart changed
        """
        line = self._lines.get(lesson_id)
        if line is None:
            return False

        if line.quantity > 1:
            line.quantity -= 1
            return True

        return self.remove(lesson_id)

    def _increment(self, line: CartLine) -> bool:
        if line.at_capacity:
            logger.debug(
                f"Lesson {line.lesson_id} already at capacity "
                f"({line.quantity}/{line.lesson.spaces})"
            )
            return False
        line.quantity += 1
        return True

    def get(self, lesson_id: str) -> Optional[CartLine]:
        """Return the line for a lesson, or None."""
        return self._lines.get(lesson_id)

    def contains(self, lesson_id: str) -> bool:
        """Check if a lesson is already in the cart."""
        return lesson_id in self._lines

    def clear(self):
        """Remove every line."""
        self._lines.clear()

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        """Lines in insertion order."""
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def count(self) -> int:
        """Total number of places across all lines."""
        return sum(line.quantity for line in self._lines.values())

    @property
    def total(self) -> float:
        """Sum of price x quantity over all lines."""
        return sum(line.subtotal for line in self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)
