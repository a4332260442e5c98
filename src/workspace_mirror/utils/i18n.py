from __future__ import annotations

"""
Internationalization (i18n) Utility.

Singleton manager for user-facing strings. Resolves dot-notation keys in
nested JSON locale files and interpolates keyword arguments, so the CLI,
the GUI and the progress indicator share one message catalogue.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
LOCALES_REL_PATH = os.path.join("..", "interface", "locales")


class I18n:
    """
    Resource manager for locale-specific string translations.

    Missing keys resolve to the caller's default, or to the key itself, so a
    broken locale file degrades to readable identifiers instead of failing.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self._locale = locale
        self._translations: Dict[str, Any] = {}
        self.is_loaded = False

        base_dir = os.path.dirname(os.path.abspath(__file__))
        self._locales_path = os.path.abspath(os.path.join(base_dir, LOCALES_REL_PATH))

        self.load_locale(locale)

    @property
    def locale(self) -> str:
        return self._locale

    def load_locale(self, locale: str) -> None:
        """
        Load a translation dictionary from the locales directory.

        Args:
            locale: ISO identifier for the target language.
        """
        file_path = os.path.join(self._locales_path, f"{locale}.json")

        if not os.path.exists(file_path):
            logger.warning(f"I18n: Locale resource missing at '{file_path}'. Fallback active.")
            self._translations = {}
            self.is_loaded = False
            return

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                self._translations = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"I18n: Corruption in locale file {file_path}: {e}")
            self._translations = {}
            self.is_loaded = False
            return

        self._locale = locale
        self.is_loaded = True
        logger.debug(f"I18n: Loaded locale dictionary: {locale}")

    def t(self, key: str, default: Optional[str] = None, **kwargs: Any) -> str:
        """
        Resolve and format a translation string using dot-notation.

        Args:
            key: Hierarchical identifier (e.g., 'status.uploading').
            default: Template used when the key is missing.
            **kwargs: Values interpolated with str.format.

        Returns:
            str: The formatted string, the default, or the key itself.
        """
        current: Any = self._translations
        for part in key.split("."):
            if not isinstance(current, dict):
                current = None
                break
            current = current.get(part)

        template = current if isinstance(current, str) else default
        if template is None:
            return key

        if not kwargs:
            return template
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError, ValueError) as e:
            logger.debug(f"I18n: Formatting error for '{key}': {e}")
            return template


# Global singleton instance for application-wide resource access
i18n = I18n(DEFAULT_LOCALE)


def apply_locale(locale: Optional[str]) -> str:
    """
    Switch the global catalogue to ``locale``.

    Unknown or broken locales fall back to the default catalogue.

    Returns:
        str: The locale actually active.
    """
    i18n.load_locale(locale or DEFAULT_LOCALE)
    if not i18n.is_loaded:
        i18n.load_locale(DEFAULT_LOCALE)
    return i18n.locale
