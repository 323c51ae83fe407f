"""
Runtime settings for the booking controller.

Values come from environment variables, optionally seeded from a .env
file in the working directory. Malformed values fail fast when Config()
is built; range checks run in validate().
"""

import os
from pathlib import Path
from urllib.parse import urlparse
from dotenv import load_dotenv


DEFAULT_BACKEND_URL = "http://localhost:8080"
DEFAULT_PREFERENCES_FILE = ".decadrive/preferences.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """
    Booking controller settings.

    Attributes:
        backend_url: Base URL of the booking backend, no trailing slash
        request_timeout: httpx timeout for a single request, in seconds
        submit_timeout: Deadline for each phase of an order submission
        preferences_file: JSON file holding the theme preference
        log_level: Name of the logging level

    Examples:
        >>> settings = Config()
        >>> settings.validate()
        True
        >>> settings.backend_url
        'http://localhost:8080'
    """

    @staticmethod
    def _read_url(name: str, default: str) -> str:
        url = os.getenv(name, default)
        parsed = urlparse(url)

        if not parsed.scheme:
            raise ValueError(f"{name} must include URL scheme (http/https)")
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"{name} must use http or https, got: {parsed.scheme}")
        if not parsed.netloc:
            raise ValueError(f"{name} must include a host")

        return url.rstrip('/')

    @staticmethod
    def _read_float(name: str, default: str) -> float:
        value = os.getenv(name, default)
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"{name} must be a number, got: {value}")

    def __init__(self):
        load_dotenv()

        self._backend_url = self._read_url("DECADRIVE_BACKEND_URL", DEFAULT_BACKEND_URL)
        self._request_timeout = self._read_float("DECADRIVE_REQUEST_TIMEOUT", "10")
        self._submit_timeout = self._read_float("DECADRIVE_SUBMIT_TIMEOUT", "30")
        self._preferences_file = Path(
            os.getenv("DECADRIVE_PREFERENCES_FILE", DEFAULT_PREFERENCES_FILE)
        )
        self._log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def backend_url(self) -> str:
        return self._backend_url

    @property
    def request_timeout(self) -> float:
        return self._request_timeout

    @property
    def submit_timeout(self) -> float:
        return self._submit_timeout

    @property
    def preferences_file(self) -> Path:
        return self._preferences_file

    @property
    def log_level(self) -> str:
        return self._log_level

    def validate(self) -> bool:
        """
        Check value ranges.

        Returns:
            True when every setting is usable

        Raises:
            ValueError: Listing every problem found
        """
        problems = []

        for name, value in (
            ("DECADRIVE_REQUEST_TIMEOUT", self._request_timeout),
            ("DECADRIVE_SUBMIT_TIMEOUT", self._submit_timeout),
        ):
            if value <= 0:
                problems.append(f"{name} must be positive")

        if self._log_level not in LOG_LEVELS:
            problems.append(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")

        if problems:
            raise ValueError(
                "Configuration validation failed:\n  - " + "\n  - ".join(problems)
            )

        return True


# Singleton instance
config = Config()
