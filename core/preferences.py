"""
Persisted UI preferences: view mode, language and theme.

Not part of query correctness. Stored values outside the allowed set fall
back to the default instead of failing.
"""

import logging
from typing import Tuple

from core.storage import KeyValueStore

logger = logging.getLogger(__name__)

VIEW_MODE_KEY = "merinfo_view_mode"
LANGUAGE_KEY = "merinfo_lang"
THEME_KEY = "theme"

VIEW_MODES: Tuple[str, ...] = ("grid", "list")
LANGUAGES: Tuple[str, ...] = ("ru", "sv")
THEMES: Tuple[str, ...] = ("light", "dark", "system")


class Preferences:
    """Scalar preferences read at start and written on every change."""

    def __init__(self, kv_store: KeyValueStore):
        self.kv_store = kv_store

    def _read(self, key: str, allowed: Tuple[str, ...], default: str) -> str:
        value = self.kv_store.get(key)
        if value is None:
            return default
        if value not in allowed:
            logger.warning(f"Ignoring stored {key}={value!r}, using {default!r}")
            return default
        return value

    def _write(self, key: str, allowed: Tuple[str, ...], value: str) -> None:
        if value not in allowed:
            raise ValueError(f"{key} must be one of {allowed}, got {value!r}")
        self.kv_store.set(key, value)

    @property
    def view_mode(self) -> str:
        return self._read(VIEW_MODE_KEY, VIEW_MODES, "grid")

    @view_mode.setter
    def view_mode(self, value: str):
        self._write(VIEW_MODE_KEY, VIEW_MODES, value)

    @property
    def language(self) -> str:
        return self._read(LANGUAGE_KEY, LANGUAGES, "ru")

    @language.setter
    def language(self, value: str):
        self._write(LANGUAGE_KEY, LANGUAGES, value)

    @property
    def theme(self) -> str:
        return self._read(THEME_KEY, THEMES, "system")

    @theme.setter
    def theme(self, value: str):
        self._write(THEME_KEY, THEMES, value)
