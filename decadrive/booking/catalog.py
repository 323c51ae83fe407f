"""
Lesson catalog state.

Keeps the customer's search and sort choices and the most recently
fetched lessons. Every fetch replaces the collection wholesale.
"""

import logging
from typing import List, Optional, Union

from ..api.interfaces import BookingApi
from ..errors import TransportError
from ..models.lesson import Lesson
from ..models.result import Result
from .query import SortDirection, SortField, build_lesson_query


logger = logging.getLogger(__name__)


LOAD_FAILED_MESSAGE = "Failed to load lessons. Please try again."


class LessonCatalog:
    """
    Search/sort state plus the lessons currently on display.

    Examples:
        >>> catalog = LessonCatalog(api)
        >>> await catalog.search("parking")
        >>> await catalog.toggle_sort_order()
        >>> [lesson.subject for lesson in catalog.lessons]
    """

    def __init__(
        self,
        api: BookingApi,
        sort_field: Optional[SortField] = SortField.SUBJECT,
        sort_direction: SortDirection = SortDirection.ASCENDING
    ):
        self.api = api
        self.search_text = ""
        self.sort_field = sort_field
        self.sort_direction = sort_direction

        self.lessons: List[Lesson] = []
        self.loading = False
        self.error: Optional[str] = None
        self._request_id = 0

    @property
    def query(self) -> dict:
        """Parameters the next fetch will send."""
        return build_lesson_query(self.search_text, self.sort_field, self.sort_direction)

    async def fetch(self) -> Result[List[Lesson]]:
        """
        Fetch lessons for the current search and sort.

        On failure the previous lessons stay on display and ``error``
        holds a message for the customer. When fetches overlap, only the
        most recently started one updates the catalog; older responses
        are returned to their caller but otherwise ignored.
        """
        self._request_id += 1
        request_id = self._request_id
        self.loading = True
        self.error = None
        params = self.query

        try:
            lessons = await self.api.list_lessons(params)
        except TransportError as e:
            logger.error(f"Error fetching lessons: {e}")
            message = e.message or LOAD_FAILED_MESSAGE
            if request_id == self._request_id:
                self.error = message
                self.loading = False
            return Result.failure(message, e)
        except BaseException:
            if request_id == self._request_id:
                self.loading = False
            raise

        if request_id != self._request_id:
            logger.debug(f"Discarding stale lesson listing (params={params})")
            return Result.success(list(lessons), "Superseded by a newer fetch")

        self.loading = False
        self.lessons = list(lessons)
        logger.info(f"Loaded {len(self.lessons)} lessons (params={params})")
        return Result.success(self.lessons)

    async def search(self, text: str) -> Result[List[Lesson]]:
        """Set the search text and refetch."""
        self.search_text = text or ""
        return await self.fetch()

    async def clear_search(self) -> Result[List[Lesson]]:
        """Clear the search text and refetch."""
        self.search_text = ""
        return await self.fetch()

    async def sort_by(
        self,
        field: Optional[Union[SortField, str]]
    ) -> Result[List[Lesson]]:
        """Change the sort field (None for backend order) and refetch."""
        self.sort_field = SortField(field) if field is not None else None
        return await self.fetch()

    async def toggle_sort_order(self) -> Result[List[Lesson]]:
        """Flip ascending/descending and refetch."""
        self.sort_direction = self.sort_direction.toggled()
        return await self.fetch()

    def find(self, lesson_id: str) -> Optional[Lesson]:
        """Return the displayed lesson with this id, or None."""
        for lesson in self.lessons:
            if lesson.id == lesson_id:
                return lesson
        return None
