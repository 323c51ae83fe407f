"""
HTTP client for the booking backend.

Implements BookingApi over httpx.AsyncClient:
- GET /lessons with q / sortBy / order
- POST /orders
- PUT /lessons/{id} with an absolute spaces value
"""

import logging
from typing import Any, List, Mapping, Optional
from urllib.parse import quote

import httpx

from ..errors import DeadlineExceededError, TransportError
from ..models.lesson import Lesson
from ..models.order import OrderRequest
from ..validation.lesson_validator import LessonValidator
from .interfaces import BookingApi


logger = logging.getLogger(__name__)


ORDER_FAILED_MESSAGE = "Failed to place order"
LESSONS_FAILED_MESSAGE = "Failed to load lessons. Please try again."


class HttpBookingApi(BookingApi):
    """
    Booking backend client using httpx.

    Examples:
        >>> async with HttpBookingApi("http://localhost:8080") as api:
        ...     lessons = await api.list_lessons({"sortBy": "price", "order": "asc"})
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL
            timeout: Per-request timeout in seconds
            client: Pre-built httpx client (tests pass one with a mock transport)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.lesson_validator = LessonValidator()
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(timeout),
        )

        logger.info(f"HttpBookingApi initialized with base_url: {self.base_url}")

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise DeadlineExceededError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"Could not reach the booking service: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        """Prefer the ``message`` field of a JSON error body."""
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return fallback

    async def list_lessons(self, params: Mapping[str, str]) -> List[Lesson]:
        # Empty values are never sent
        query = {key: value for key, value in params.items() if value}

        response = await self._request("GET", "/lessons", params=query)
        if not response.is_success:
            raise TransportError(
                f"Failed to fetch lessons: {response.reason_phrase}",
                response.status_code
            )

        try:
            records: Any = response.json()
        except ValueError as e:
            raise TransportError(LESSONS_FAILED_MESSAGE, response.status_code) from e

        if not isinstance(records, list):
            raise TransportError(LESSONS_FAILED_MESSAGE, response.status_code)

        lessons = []
        for record in records:
            result = self.lesson_validator.validate(record)
            if not result.is_valid:
                logger.warning(f"Skipping invalid lesson record: {result.get_summary()}")
                continue
            for warning in result.warnings:
                logger.info(f"Lesson record warning: {warning}")
            lessons.append(Lesson.from_dict(record))

        logger.debug(f"Fetched {len(lessons)} lessons with params {query}")
        return lessons

    async def create_order(self, request: OrderRequest) -> str:
        response = await self._request("POST", "/orders", json=request.to_dict())

        if not response.is_success:
            message = self._error_message(response, ORDER_FAILED_MESSAGE)
            logger.error(f"Order creation rejected ({response.status_code}): {message}")
            raise TransportError(message, response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(ORDER_FAILED_MESSAGE, response.status_code) from e

        order_id = None
        if isinstance(body, dict):
            order_id = body.get("_id") or body.get("id") or body.get("orderId")
        if not order_id:
            raise TransportError(
                "Order response did not include an order identifier",
                response.status_code
            )

        logger.info(f"Order created: {order_id}")
        return str(order_id)

    async def update_lesson_spaces(self, lesson_id: str, spaces: int) -> None:
        path = f"/lessons/{quote(lesson_id, safe='')}"
        response = await self._request("PUT", path, json={"spaces": spaces})

        if not response.is_success:
            message = self._error_message(
                response,
                f"Failed to update spaces for lesson {lesson_id}"
            )
            raise TransportError(message, response.status_code)

        logger.debug(f"Lesson {lesson_id} spaces set to {spaces}")

    async def aclose(self):
        """Close the underlying httpx client."""
        await self._client.aclose()
