"""
Booking session module.

This module provides the cart, the lesson catalog, the lesson query
builder and the order submission workflow, tied together by
BookingSession.

Usage:
    >>> from decadrive.booking import BookingSession
    >>> from decadrive.api.client import HttpBookingApi
    >>>
    >>> api = HttpBookingApi("http://localhost:8080")
    >>> session = BookingSession(api, submit_timeout=30)
"""

from .cart import CartLine, CartStore
from .catalog import LessonCatalog
from .query import SortDirection, SortField, build_lesson_query
from .session import BookingSession, build_session
from .workflow import OrderSubmissionWorkflow

__all__ = [
    "BookingSession",
    "build_session",
    "CartLine",
    "CartStore",
    "LessonCatalog",
    "OrderSubmissionWorkflow",
    "SortDirection",
    "SortField",
    "build_lesson_query",
]
