"""
Localization
Reads the English and Italian string tables from locales_<lang>.toml files

Lookup order for a key: requested language, then English, then the default
passed by the caller, then the key itself.
"""

from typing import Any, Dict, List, Optional

import toml

from agenda.core.logger import get_logger
from agenda.core.paths import find_config_file

logger = get_logger(__name__)

SUPPORTED_LANGUAGES = ("en", "it")
FALLBACK_LANGUAGE = "en"


class Translator:
    """String table for one language, with English fallback"""

    def __init__(self, language: str = "it"):
        if language not in SUPPORTED_LANGUAGES:
            logger.warning(
                f"Unsupported language {language}, falling back to {FALLBACK_LANGUAGE}"
            )
            language = FALLBACK_LANGUAGE
        self.language = language
        self.table = self._load(language)
        self.fallback = (
            self.table if language == FALLBACK_LANGUAGE else self._load(FALLBACK_LANGUAGE)
        )

    @staticmethod
    def _load(language: str) -> Dict[str, Any]:
        """Load locale configuration"""
        path = find_config_file(f"locales_{language}.toml")
        if path is None:
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                table = toml.load(f)
            logger.debug(f"Loaded locale file: {path}")
            return table
        except toml.TomlDecodeError as e:
            logger.error(f"Failed to parse locale file {path}: {e}")
            return {}

    def t(self, key: str, default: Optional[str] = None, **kwargs) -> str:
        """Translate key, formatting {placeholders} with kwargs"""
        text = self.table.get("strings", {}).get(key)
        if text is None:
            text = self.fallback.get("strings", {}).get(key)
        if text is None:
            text = default if default is not None else key
        if kwargs:
            try:
                return text.format(**kwargs)
            except KeyError as e:
                logger.error(f"Missing placeholder {e} in translation: {key}")
        return text

    def _calendar_list(self, name: str) -> List[str]:
        values = self.table.get("calendar", {}).get(name)
        if not values:
            values = self.fallback.get("calendar", {}).get(name, [])
        return list(values)

    def month_name(self, month: int) -> str:
        """Month name for month number 1-12"""
        return self._calendar_list("months")[month - 1]

    def weekday_names(self, short: bool = False) -> List[str]:
        """Weekday names, Monday first"""
        return self._calendar_list("weekdays_short" if short else "weekdays")

    def strings(self) -> Dict[str, str]:
        """Full string table, English entries filling the gaps"""
        merged = dict(self.fallback.get("strings", {}))
        merged.update(self.table.get("strings", {}))
        return merged


_translators: Dict[str, Translator] = {}


def get_translator(language: str = "it") -> Translator:
    """Get (cached) translator for language"""
    if language not in _translators:
        _translators[language] = Translator(language)
    return _translators[language]
