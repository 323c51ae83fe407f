"""
DecaDrive booking session controller.

Browse driving lessons, build a cart bounded by availability, validate
the customer's details and place an order that reconciles each lesson's
remaining spaces.

Usage:
    >>> from decadrive.booking import build_session
    >>>
    >>> session = build_session()
    >>> await session.catalog.fetch()
"""

__version__ = "0.1.0"
