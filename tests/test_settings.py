"""
Tests for agenda/core/settings.py
"""

import pytest

from agenda.core.errors import ValidationError
from agenda.core.settings import SettingsManager


@pytest.fixture
def settings(db):
    return SettingsManager(db_manager=db)


@pytest.mark.integration
class TestSettingsManager:
    """Test typed preference access."""

    def test_defaults(self, settings):
        assert settings.get_all() == {"theme": "light", "language": "it", "notifications": True}
        assert settings.get_theme() == "light"
        assert settings.get_language() == "it"
        assert settings.notifications_enabled() is True

    def test_update_values(self, settings):
        settings.set_theme("dark")
        settings.set_language("en")
        settings.set_notifications(False)
        assert settings.get_all() == {"theme": "dark", "language": "en", "notifications": False}

    @pytest.mark.parametrize(
        "key,value",
        [("theme", "blue"), ("language", "fr"), ("notifications", "yes"), ("volume", 3)],
    )
    def test_invalid_values_are_rejected(self, settings, db, key, value):
        with pytest.raises(ValidationError):
            settings.update(key, value)
        assert db.get_all_settings() == {"theme": "light", "language": "it", "notifications": True}

    def test_subscribe(self, settings):
        received = []
        subscription = settings.subscribe(received.append)
        settings.set_theme("dark")
        subscription.unsubscribe()
        settings.set_theme("light")
        assert [snapshot["theme"] for snapshot in received] == ["light", "dark"]

    def test_database_path(self, settings, db):
        assert settings.get_database_path() == db.db_path
