"""
Settings manager
User preferences (theme, language, notifications) live in the settings
collection of the database; application configuration stays in config.toml
"""

from typing import Any, Callable, Dict, Optional

from agenda.core.db import SETTINGS, DatabaseManager, default_settings, get_db
from agenda.core.errors import ValidationError
from agenda.core.events import Subscription
from agenda.core.logger import get_logger

logger = get_logger(__name__)

THEMES = ("light", "dark")
LANGUAGES = ("en", "it")


class SettingsManager:
    """Typed access to the settings collection with config.toml fallback"""

    def __init__(self, config_loader=None, db_manager: Optional[DatabaseManager] = None):
        """Initialize Settings manager

        Args:
            config_loader: ConfigLoader instance, supplies defaults
            db_manager: DatabaseManager instance, follows get_db() when omitted
        """
        self.config_loader = config_loader
        self._db = db_manager

    @property
    def db(self) -> DatabaseManager:
        return self._db or get_db()

    def _defaults(self) -> Dict[str, Any]:
        language = "it"
        if self.config_loader:
            language = self.config_loader.get("app.default_language", "it")
        return default_settings(language)

    # ======================== Preferences ========================

    def get_all(self) -> Dict[str, Any]:
        """Stored preferences over defaults (the store may be degraded)"""
        values = self._defaults()
        values.update(self.db.get_all_settings())
        return values

    def get_theme(self) -> str:
        return self.db.get_setting("theme", self._defaults()["theme"])

    def get_language(self) -> str:
        return self.db.get_setting("language", self._defaults()["language"])

    def notifications_enabled(self) -> bool:
        return bool(self.db.get_setting("notifications", True))

    def update(self, key: str, value: Any) -> Dict[str, Any]:
        """
        Overwrite a preference in place

        Raises:
            ValidationError: Unknown key or value outside its domain
        """
        if key == "theme":
            if value not in THEMES:
                raise ValidationError("value", f"Unsupported theme: {value}")
        elif key == "language":
            if value not in LANGUAGES:
                raise ValidationError("value", f"Unsupported language: {value}")
        elif key == "notifications":
            if not isinstance(value, bool):
                raise ValidationError("value", "Notifications must be true or false")
        else:
            raise ValidationError("key", f"Unknown setting: {key}")

        self.db.put_setting(key, value)
        logger.info(f"✓ Setting updated: {key} = {value}")
        return {"key": key, "value": value}

    def set_theme(self, theme: str) -> Dict[str, Any]:
        return self.update("theme", theme)

    def set_language(self, language: str) -> Dict[str, Any]:
        return self.update("language", language)

    def set_notifications(self, enabled: bool) -> Dict[str, Any]:
        return self.update("notifications", enabled)

    def subscribe(self, callback: Callable[[Dict[str, Any]], None]) -> Subscription:
        """Live settings snapshot"""
        return self.db.subscribe(SETTINGS, callback)

    # ======================== Application Configuration ========================

    def get_database_path(self) -> str:
        """Get database path"""
        return self.db.db_path

    def set_database_path(self, path: str) -> bool:
        """Set database path (takes effect immediately)"""
        if not self.config_loader:
            logger.error("Configuration loader not initialized")
            return False

        from agenda.core.db import switch_database

        if not switch_database(path):
            logger.error("✗ Database switch failed, path not saved")
            return False

        self._db = None
        self.config_loader.set("database.path", path)
        logger.info(f"✓ Database path updated: {path}")
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """Get any configuration item"""
        if not self.config_loader:
            return default

        return self.config_loader.get(key, default)


# Global Settings instance
_settings_instance: Optional[SettingsManager] = None


def get_settings() -> SettingsManager:
    """Get global Settings instance"""
    global _settings_instance
    if _settings_instance is None:
        from agenda.config.loader import get_config

        _settings_instance = SettingsManager(get_config())
    return _settings_instance


def init_settings(config_loader, db_manager=None) -> SettingsManager:
    """Initialize Settings manager

    Args:
        config_loader: ConfigLoader instance
        db_manager: DatabaseManager instance (optional, follows get_db() if not provided)

    Returns:
        SettingsManager instance
    """
    global _settings_instance
    _settings_instance = SettingsManager(config_loader, db_manager)
    return _settings_instance


def reset_settings() -> None:
    global _settings_instance
    _settings_instance = None
