"""
Lesson data models.

Lessons are owned by the backend catalog. The controller only keeps
read-only snapshots of them, taken whenever the listing is fetched.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Lesson:
    """
    Snapshot of a bookable driving lesson.

    Attributes:
        id: Opaque lesson identifier
        subject: Lesson subject (e.g. "Motorway driving")
        location: Where the lesson takes place
        price: Price per place, never negative
        spaces: Remaining capacity at the time of the snapshot
        image: Image reference (may be empty)

    Examples:
        >>> lesson = Lesson.from_dict({
        ...     "_id": "L1",
        ...     "subject": "Parallel parking",
        ...     "location": "Hendon",
        ...     "price": 50,
        ...     "spaces": 5,
        ...     "image": "parking.png"
        ... })
        >>> lesson.spaces
        5
    """

    id: str
    subject: str
    location: str
    price: float
    spaces: int
    image: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Lesson':
        """
        Build a Lesson from a backend JSON record.

        The backend stores documents with an ``_id`` key; plain ``id`` is
        accepted as well.

        Raises:
            KeyError: If a required field is missing
            ValueError: If price or spaces cannot be converted
        """
        lesson_id = data.get("_id")
        if lesson_id is None:
            lesson_id = data.get("id")
        if lesson_id is None:
            raise KeyError("_id")

        return cls(
            id=str(lesson_id),
            subject=str(data["subject"]),
            location=str(data["location"]),
            price=float(data["price"]),
            spaces=int(data["spaces"]),
            image=str(data.get("image") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the backend JSON shape."""
        return {
            "_id": self.id,
            "subject": self.subject,
            "location": self.location,
            "price": self.price,
            "spaces": self.spaces,
            "image": self.image,
        }

    @property
    def is_available(self) -> bool:
        """Check if at least one space remains."""
        return self.spaces > 0
