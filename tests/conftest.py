"""
Pytest fixtures and configuration for the test suite.

- Configuration, logs and databases live in temporary directories
- Stores are real SQLite files, one per test
- Global singletons (database, settings, dashboard, reminders) are reset
  around every test that installs a store globally
"""

import os
import sys
import tempfile
from collections.abc import Generator
from datetime import date
from pathlib import Path

import pytest

# Add project root to path so tests can import the agenda package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Isolated configuration, written before any agenda import reads it
_TEST_HOME = Path(tempfile.mkdtemp(prefix="agenda-tests-"))
_TEST_CONFIG = _TEST_HOME / "config.toml"
_TEST_CONFIG.write_text(
    f"""
[server]
host = "127.0.0.1"
port = 8000
debug = false

[database]
path = '{_TEST_HOME / "default.db"}'

[logging]
level = "DEBUG"
logs_dir = '{_TEST_HOME / "logs"}'
max_file_size = "1MB"
backup_count = 1

[app]
default_language = "it"

[calendar]
cell_height = 80
max_visible_events = 4

[notifications]
check_interval = 60
lead_minutes = 30
""",
    encoding="utf-8",
)
os.environ["AGENDA_CONFIG"] = str(_TEST_CONFIG)

# Frozen "today" used by layout and statistics tests
TODAY = date(2024, 3, 15)


def _reset_singletons():
    from agenda.core import reminders, settings
    from agenda.core.dashboard import manager
    from agenda.core.db import reset_db

    reset_db()
    settings.reset_settings()
    manager.reset_dashboard_manager()
    reminders.reset_reminder_coordinator()


# === DATABASE FIXTURES ===


@pytest.fixture
def db_path(tmp_path) -> str:
    """Path of a database file that does not exist yet"""
    return str(tmp_path / "agenda.db")


@pytest.fixture
def db(db_path):
    """Provide a DatabaseManager on a fresh, seeded SQLite file"""
    from agenda.core.db import DatabaseManager

    return DatabaseManager(db_path, default_language="it")


@pytest.fixture
def global_db(db) -> Generator:
    """Install the test store as the process-wide database"""
    import agenda.core.db as db_module

    _reset_singletons()
    db_module.db_manager = db
    try:
        yield db
    finally:
        _reset_singletons()


# === SERVICE FIXTURES ===


@pytest.fixture
def event_service(db):
    from agenda.services.event_service import EventService

    return EventService(db)


@pytest.fixture
def entity_service(db):
    from agenda.services.entity_service import EntityService

    return EntityService(db)


@pytest.fixture
def work_entity(entity_service):
    """A non-seeded entity named Work"""
    return entity_service.create_entity("Work", "#123456")


@pytest.fixture
def make_event(event_service, work_entity):
    """Factory storing a valid event, keyword arguments override fields"""

    def _make(**overrides):
        data = {
            "title": "Meeting",
            "date": "2024-03-05",
            "startTime": "09:00",
            "endTime": "10:30",
            "mode": "online",
            "entityId": work_entity["id"],
        }
        data.update(overrides)
        return event_service.save_event(data)

    return _make


@pytest.fixture
def today() -> date:
    return TODAY


# === HTTP FIXTURES ===


@pytest.fixture
def client(global_db):
    """FastAPI TestClient with the lifespan running against the test store"""
    from fastapi.testclient import TestClient

    from agenda.app import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
