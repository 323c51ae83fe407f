"""
Persisted client preferences.

The only durable local state is the theme preference, stored as a
string under the "darkMode" key in a small JSON file. It is read once
when the session starts and written on every toggle.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional


logger = logging.getLogger(__name__)


DARK_MODE_KEY = "darkMode"


class PreferenceStore:
    """
    String key/value preferences backed by a JSON file.

    Examples:
        >>> store = PreferenceStore(Path(".decadrive/preferences.json"))
        >>> store.set_dark_mode(True)
        >>> store.get_dark_mode()
        True
    """

    def __init__(self, filepath: Path):
        self.filepath = Path(filepath)
        self._values: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._values is not None:
            return self._values

        self._values = {}
        if not self.filepath.exists():
            logger.debug(f"No preferences file at {self.filepath}")
            return self._values

        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in preferences file {self.filepath}: {e}")
            return self._values
        except OSError as e:
            logger.error(f"Failed to read preferences file {self.filepath}: {e}")
            return self._values

        if isinstance(data, dict):
            self._values = {str(key): str(value) for key, value in data.items()}
        else:
            logger.warning(f"Ignoring preferences file {self.filepath}: not an object")
        return self._values

    def get(self, key: str) -> Optional[str]:
        """Return a stored preference, or None if unset."""
        return self._load().get(key)

    def set(self, key: str, value: str) -> bool:
        """
        Store a preference and write the file.

        Returns:
            True if the file was written
        """
        values = self._load()
        values[key] = str(value)

        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            with open(self.filepath, 'w', encoding='utf-8') as f:
                json.dump(values, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error(f"Failed to save preferences file {self.filepath}: {e}")
            return False

        logger.debug(f"Saved preference {key}={value}")
        return True

    def get_dark_mode(self) -> Optional[bool]:
        """Return the saved theme, or None if it was never saved."""
        value = self.get(DARK_MODE_KEY)
        if value is None:
            return None
        return value == "true"

    def set_dark_mode(self, enabled: bool) -> bool:
        """Save the theme as "true" / "false"."""
        return self.set(DARK_MODE_KEY, "true" if enabled else "false")
