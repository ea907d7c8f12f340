"""
Unit tests for agenda/core/db.py
"""

import sqlite3

import pytest

from agenda.core.db import (
    DEFAULT_ENTITIES,
    ENTITIES,
    EVENTS,
    SETTINGS,
    DatabaseManager,
)
from agenda.core.errors import NotFoundError, PersistenceError


def _event_fields(**overrides):
    fields = {
        "title": "Standup",
        "date": "2024-03-05",
        "startTime": "09:00",
        "endTime": "09:15",
        "duration": 15,
        "mode": "online",
        "entityId": 1,
    }
    fields.update(overrides)
    return fields


@pytest.mark.integration
class TestSeeding:
    """Test first-run seeding."""

    def test_seeds_default_entities(self, db):
        """Test that a new store holds the default entity list."""
        entities = db.get_all(ENTITIES)
        assert [(e["name"], e["color"]) for e in entities] == [
            (e["name"], e["color"]) for e in DEFAULT_ENTITIES
        ]
        assert all(isinstance(e["id"], int) for e in entities)

    def test_seeds_default_settings(self, db):
        """Test that settings start at theme=light, language, notifications on."""
        assert db.get_all_settings() == {
            "theme": "light",
            "language": "it",
            "notifications": True,
        }

    def test_default_language_comes_from_argument(self, tmp_path):
        """Test that the seeded language follows the configured default."""
        db = DatabaseManager(str(tmp_path / "en.db"), default_language="en")
        assert db.get_setting("language") == "en"

    def test_failed_seed_leaves_no_tables(self, db_path, monkeypatch):
        """Test that a seed failure rolls back table creation, so the next open seeds."""

        def broken_seed(self, cursor):
            raise sqlite3.OperationalError("disk I/O error")

        with monkeypatch.context() as patch:
            patch.setattr(DatabaseManager, "_seed", broken_seed)
            failed = DatabaseManager(db_path)
        assert failed.available is False

        conn = sqlite3.connect(db_path)
        try:
            tables = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        finally:
            conn.close()
        assert tables == []

        reopened = DatabaseManager(db_path)
        assert reopened.available is True
        assert len(reopened.get_all(ENTITIES)) == len(DEFAULT_ENTITIES)
        assert reopened.get_setting("theme") == "light"

    def test_reopen_does_not_reseed(self, db_path):
        """Test that opening a populated store again leaves it untouched."""
        first = DatabaseManager(db_path)
        first.put_setting("theme", "dark")
        first.add(ENTITIES, {"name": "Extra", "color": "#000000"})

        second = DatabaseManager(db_path)
        assert len(second.get_all(ENTITIES)) == len(DEFAULT_ENTITIES) + 1
        assert second.get_setting("theme") == "dark"

    def test_reopen_after_deleting_all_entities_does_not_reseed(self, db_path):
        """Test that seeding runs at store creation only."""
        first = DatabaseManager(db_path)
        for entity in first.get_all(ENTITIES):
            first.remove(ENTITIES, entity["id"])

        second = DatabaseManager(db_path)
        assert second.get_all(ENTITIES) == []

    def test_events_start_empty(self, db):
        """Test that no events are seeded."""
        assert db.get_all(EVENTS) == []


@pytest.mark.integration
class TestRecordOperations:
    """Test add/update/remove/get on record collections."""

    def test_add_assigns_id_and_returns_camel_case(self, db):
        """Test that add() returns the stored record with camelCase fields."""
        stored = db.add(EVENTS, _event_fields())
        assert stored["id"] > 0
        assert stored["startTime"] == "09:00"
        assert stored["entityId"] == 1
        assert "start_time" not in stored

    def test_add_accepts_snake_case_fields(self, db):
        """Test that snake_case field names map to the same columns."""
        stored = db.add(EVENTS, {"title": "Lunch", "date": "2024-03-05",
                                 "start_time": "12:00", "end_time": "13:00"})
        assert stored["startTime"] == "12:00"
        assert stored["endTime"] == "13:00"

    def test_update_merges_fields(self, db):
        """Test that update() only changes the given fields."""
        stored = db.add(EVENTS, _event_fields())
        updated = db.update(EVENTS, stored["id"], {"title": "Retro"})
        assert updated["title"] == "Retro"
        assert updated["startTime"] == "09:00"

    def test_update_missing_id_raises_not_found(self, db):
        """Test that updating an absent id raises and writes nothing."""
        db.add(EVENTS, _event_fields())
        with pytest.raises(NotFoundError):
            db.update(EVENTS, 999, {"title": "Ghost"})
        assert [e["title"] for e in db.get_all(EVENTS)] == ["Standup"]

    def test_remove_deletes_record(self, db):
        """Test that remove() deletes the record."""
        stored = db.add(EVENTS, _event_fields())
        db.remove(EVENTS, stored["id"])
        assert db.get(EVENTS, stored["id"]) is None

    def test_remove_missing_id_raises_not_found(self, db):
        """Test that removing an absent id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            db.remove(EVENTS, 12345)

    def test_removing_entity_keeps_events(self, db):
        """Test that entity deletion does not cascade to events."""
        event = db.add(EVENTS, _event_fields(entityId=1))
        db.remove(ENTITIES, 1)
        assert db.get(EVENTS, event["id"])["entityId"] == 1

    def test_unknown_collection_rejected(self, db):
        """Test that only known collections are accepted."""
        with pytest.raises(ValueError):
            db.get_all("tasks")

    def test_records_survive_reopen(self, db_path):
        """Test that records are durable across store instances."""
        DatabaseManager(db_path).add(EVENTS, _event_fields())
        assert len(DatabaseManager(db_path).get_all(EVENTS)) == 1


@pytest.mark.integration
class TestSettings:
    """Test settings storage."""

    def test_put_setting_overwrites_in_place(self, db):
        """Test that put_setting() replaces the previous value."""
        db.put_setting("language", "en")
        db.put_setting("language", "it")
        assert db.get_setting("language") == "it"
        assert len(db.get_all_settings()) == 3

    def test_bool_setting_round_trips_as_bool(self, db):
        """Test that boolean settings keep their type."""
        db.put_setting("notifications", False)
        assert db.get_setting("notifications") is False

    def test_missing_setting_returns_default(self, db):
        """Test that unknown keys return the given default."""
        assert db.get_setting("missing", "fallback") == "fallback"


@pytest.mark.integration
class TestSubscriptions:
    """Test live collection subscriptions."""

    def test_subscribe_delivers_current_snapshot(self, db):
        """Test that a new subscriber immediately receives the collection."""
        received = []
        db.subscribe(ENTITIES, received.append)
        assert len(received) == 1
        assert len(received[0]) == len(DEFAULT_ENTITIES)

    def test_mutation_redelivers_snapshot(self, db):
        """Test that add/update/remove each push a fresh snapshot."""
        received = []
        db.subscribe(EVENTS, received.append)

        stored = db.add(EVENTS, _event_fields())
        db.update(EVENTS, stored["id"], {"title": "Changed"})
        db.remove(EVENTS, stored["id"])

        assert [len(snapshot) for snapshot in received] == [0, 1, 1, 0]
        assert received[2][0]["title"] == "Changed"

    def test_only_mutated_collection_is_notified(self, db):
        """Test that subscribers of other collections are not called."""
        received = []
        db.subscribe(ENTITIES, received.append)
        db.add(EVENTS, _event_fields())
        assert len(received) == 1

    def test_settings_subscription_receives_dict(self, db):
        """Test that settings snapshots are key/value mappings."""
        received = []
        db.subscribe(SETTINGS, received.append)
        db.put_setting("theme", "dark")
        assert received[-1]["theme"] == "dark"

    def test_unsubscribe_stops_delivery(self, db):
        """Test that unsubscribed callbacks are no longer invoked."""
        received = []
        subscription = db.subscribe(EVENTS, received.append)
        subscription.unsubscribe()
        db.add(EVENTS, _event_fields())
        assert len(received) == 1
        assert subscription.active is False

    def test_failing_subscriber_does_not_break_write(self, db):
        """Test that a raising callback neither aborts the write nor other subscribers."""
        received = []

        def broken(snapshot):
            if snapshot:
                raise RuntimeError("boom")

        db.subscribe(EVENTS, broken)
        db.subscribe(EVENTS, received.append)
        stored = db.add(EVENTS, _event_fields())

        assert db.get(EVENTS, stored["id"]) is not None
        assert len(received[-1]) == 1


@pytest.mark.integration
class TestDegradedStore:
    """Test behaviour when the database cannot be opened."""

    @pytest.fixture
    def broken_db(self, tmp_path):
        # A directory where the database file should be
        path = tmp_path / "not-a-file.db"
        path.mkdir()
        return DatabaseManager(str(path))

    def test_marks_store_unavailable(self, broken_db):
        """Test that open failures are recorded instead of raised."""
        assert broken_db.available is False
        assert broken_db.last_error

    def test_reads_return_empty_collections(self, broken_db):
        """Test that reads degrade to empty results."""
        assert broken_db.get_all(EVENTS) == []
        assert broken_db.get_all_settings() == {}
        assert broken_db.get_setting("theme", "light") == "light"

    def test_writes_raise_persistence_error(self, broken_db):
        """Test that writes surface PersistenceError."""
        with pytest.raises(PersistenceError):
            broken_db.add(EVENTS, _event_fields())

    def test_sqlite_errors_are_wrapped(self, db):
        """Test that SQLite failures surface as PersistenceError."""
        with pytest.raises(PersistenceError) as excinfo:
            db.execute_query("SELECT * FROM no_such_table")
        assert isinstance(excinfo.value.__cause__, sqlite3.Error)
