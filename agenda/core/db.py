"""
SQLite database wrapper
Owns the events, entities and settings collections: schema, first-run seeding,
record CRUD and change subscriptions
"""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic.alias_generators import to_camel, to_snake

from agenda.core.errors import NotFoundError, PersistenceError
from agenda.core.events import ChangeHub, Subscription
from agenda.core.logger import get_logger
from agenda.core.sqls import queries, schema

logger = get_logger(__name__)

EVENTS = "events"
ENTITIES = "entities"
SETTINGS = "settings"

# Writable columns per record collection ("id" is assigned by SQLite)
COLLECTIONS: Dict[str, Tuple[str, ...]] = {
    EVENTS: (
        "title",
        "date",
        "start_time",
        "end_time",
        "duration",
        "mode",
        "location",
        "meeting_url",
        "entity_id",
        "materials",
        "notes",
        "recurrence",
        "created_at",
        "updated_at",
    ),
    ENTITIES: ("name", "color"),
}

DEFAULT_ENTITIES: List[Dict[str, str]] = [
    {"name": "Lavoro", "color": "#1976D2"},
    {"name": "Personale", "color": "#388E3C"},
    {"name": "Salute", "color": "#D32F2F"},
    {"name": "Studio", "color": "#F57C00"},
    {"name": "Progetti", "color": "#7B1FA2"},
    {"name": "Urgenti", "color": "#C2185B"},
]


def default_settings(language: str = "it") -> Dict[str, Any]:
    """Settings written on first run"""
    return {"theme": "light", "language": language, "notifications": True}


class DatabaseManager:
    """Database manager"""

    def __init__(self, db_path: Optional[str] = None, default_language: str = "it"):
        if db_path is None:
            from agenda.core.paths import get_db_path

            db_path = str(get_db_path())

        self.db_path = db_path
        self.default_language = default_language
        self.hub = ChangeHub()
        self.available = False
        self.last_error: Optional[str] = None
        self._init_database()

    def _init_database(self):
        """Initialize database, entering degraded mode if it cannot be opened"""
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._create_tables()
            self.available = True
            logger.info(f"Database initialization completed: {self.db_path}")
        except (sqlite3.Error, OSError) as e:
            self.available = False
            self.last_error = str(e)
            logger.error(
                f"Failed to open database {self.db_path}, continuing with empty collections: {e}",
                exc_info=True,
            )

    def _create_tables(self):
        """Create database tables, seeding defaults on first creation only

        DDL and seed run in one transaction: if seeding fails the tables are
        rolled back too, so the next open is again a first run.
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("BEGIN")
            try:
                cursor.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
                    (ENTITIES,),
                )
                first_run = cursor.fetchone() is None

                for table_sql in schema.ALL_TABLES:
                    cursor.execute(table_sql)

                for index_sql in schema.ALL_INDEXES:
                    cursor.execute(index_sql)

                if first_run:
                    self._seed(cursor)
            except Exception:
                conn.rollback()
                raise

            conn.commit()
            logger.info("Database table creation completed")

    def _seed(self, cursor):
        """Populate default entities and settings (runs once, on store creation)"""
        cursor.execute(queries.COUNT_ALL.format(table=ENTITIES))
        if cursor.fetchone()[0] == 0:
            cursor.executemany(
                queries.INSERT_ENTITY,
                [(entity["name"], entity["color"]) for entity in DEFAULT_ENTITIES],
            )
            logger.info(f"Seeded {len(DEFAULT_ENTITIES)} default entities")

        for key, value in default_settings(self.default_language).items():
            value_str, setting_type = self._encode_setting(value)
            cursor.execute(queries.INSERT_SETTING_IF_ABSENT, (key, value_str, setting_type))
        logger.info("Seeded default settings")

    @contextmanager
    def get_connection(self):
        """Get database connection context manager"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Enable column name access for results
        try:
            yield conn
        finally:
            conn.close()

    def _require_available(self) -> None:
        if not self.available:
            raise PersistenceError(
                f"Database unavailable: {self.last_error or self.db_path}"
            )

    def execute_query(self, query: str, params: Tuple = ()) -> List[Dict[str, Any]]:
        """Execute query and return results"""
        self._require_available()
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                rows = cursor.fetchall()
                return [dict(row) for row in rows]
        except sqlite3.Error as e:
            raise PersistenceError(f"Query failed: {e}") from e

    def execute_insert(self, query: str, params: Tuple = ()) -> int:
        """Execute insert operation and return inserted ID"""
        self._require_available()
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                conn.commit()
                return cursor.lastrowid or 0
        except sqlite3.Error as e:
            raise PersistenceError(f"Insert failed: {e}") from e

    def execute_update(self, query: str, params: Tuple = ()) -> int:
        """Execute update/delete operation and return affected row count"""
        self._require_available()
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            raise PersistenceError(f"Update failed: {e}") from e

    # ======================== Record collections ========================

    @staticmethod
    def _columns(collection: str) -> Tuple[str, ...]:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return COLLECTIONS[collection]

    @staticmethod
    def _to_record(row: Dict[str, Any]) -> Dict[str, Any]:
        """Row with snake_case columns -> record with camelCase fields"""
        return {to_camel(key): value for key, value in row.items()}

    def _to_columns(self, collection: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Record fields (camelCase or snake_case) -> writable column values"""
        allowed = self._columns(collection)
        columns = {}
        for key, value in fields.items():
            column = to_snake(key)
            if column in allowed:
                columns[column] = value
            elif column != "id":
                logger.debug(f"Ignoring unknown {collection} field: {key}")
        return columns

    def add(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record, returning it with its assigned id"""
        columns = self._to_columns(collection, record)
        query = queries.INSERT_RECORD.format(
            table=collection,
            columns=", ".join(columns),
            placeholders=", ".join("?" for _ in columns),
        )
        record_id = self.execute_insert(query, tuple(columns.values()))
        stored = self.get(collection, record_id)
        self._notify(collection)
        return stored or {}

    def update(
        self, collection: str, record_id: int, fields: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Merge fields into an existing record

        Raises:
            NotFoundError: record_id is absent (nothing is written)
        """
        if self.get(collection, record_id) is None:
            raise NotFoundError(collection, record_id)

        columns = self._to_columns(collection, fields)
        if columns:
            query = queries.UPDATE_RECORD.format(
                table=collection,
                assignments=", ".join(f"{column} = ?" for column in columns),
            )
            self.execute_update(query, tuple(columns.values()) + (record_id,))
            self._notify(collection)

        return self.get(collection, record_id) or {}

    def remove(self, collection: str, record_id: int) -> None:
        """Delete a record (no cascade to other collections)

        Raises:
            NotFoundError: record_id is absent
        """
        self._columns(collection)
        affected = self.execute_update(
            queries.DELETE_RECORD.format(table=collection), (record_id,)
        )
        if affected == 0:
            raise NotFoundError(collection, record_id)
        self._notify(collection)

    def get(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        """Get a single record by id"""
        self._columns(collection)
        rows = self.execute_query(
            queries.SELECT_BY_ID.format(table=collection), (record_id,)
        )
        return self._to_record(rows[0]) if rows else None

    def get_all(self, collection: str) -> List[Dict[str, Any]]:
        """Get every record of a collection, empty when the store is degraded"""
        self._columns(collection)
        try:
            rows = self.execute_query(queries.SELECT_ALL.format(table=collection))
        except PersistenceError as e:
            logger.error(f"Failed to read {collection}: {e}")
            return []
        return [self._to_record(row) for row in rows]

    # ======================== Settings ========================

    @staticmethod
    def _encode_setting(value: Any) -> Tuple[str, str]:
        if isinstance(value, bool):
            return str(value).lower(), "bool"
        if isinstance(value, int):
            return str(value), "int"
        if isinstance(value, (list, dict)):
            return json.dumps(value), "json"
        return str(value), "string"

    @staticmethod
    def _decode_setting(value: str, setting_type: str) -> Any:
        if setting_type == "bool":
            return value.lower() in ("true", "1", "yes")
        if setting_type == "int":
            try:
                return int(value)
            except ValueError:
                return value
        if setting_type == "json":
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value

    def put_setting(self, key: str, value: Any) -> None:
        """Overwrite a setting in place"""
        value_str, setting_type = self._encode_setting(value)
        self.execute_insert(queries.INSERT_OR_REPLACE_SETTING, (key, value_str, setting_type))
        self._notify(SETTINGS)

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value with type conversion"""
        try:
            results = self.execute_query(queries.SELECT_SETTING_BY_KEY, (key,))
        except PersistenceError as e:
            logger.error(f"Failed to read setting {key}: {e}")
            return default
        if results:
            return self._decode_setting(results[0]["value"], results[0]["type"])
        return default

    def get_all_settings(self) -> Dict[str, Any]:
        """Get all settings with type conversion"""
        try:
            results = self.execute_query(queries.SELECT_ALL_SETTINGS)
        except PersistenceError as e:
            logger.error(f"Failed to read settings: {e}")
            return {}
        return {
            row["key"]: self._decode_setting(row["value"], row["type"])
            for row in results
        }

    # ======================== Subscriptions ========================

    def _snapshot(self, collection: str) -> Any:
        if collection == SETTINGS:
            return self.get_all_settings()
        return self.get_all(collection)

    def _notify(self, collection: str) -> None:
        if self.hub.subscriber_count(collection):
            self.hub.publish(collection, self._snapshot(collection))

    def subscribe(
        self, collection: str, callback: Callable[[Any], None]
    ) -> Subscription:
        """Live query: deliver the current snapshot now and after every mutation

        Args:
            collection: "events", "entities" or "settings"
            callback: Receives a list of records (a dict for settings)

        Returns:
            Subscription; call unsubscribe() when the consumer is torn down
        """
        if collection != SETTINGS:
            self._columns(collection)
        subscription = self.hub.subscribe(collection, callback)
        try:
            callback(self._snapshot(collection))
        except Exception:
            logger.error(
                f"Initial snapshot delivery failed for {collection}", exc_info=True
            )
        return subscription


# Global database manager instance
db_manager: Optional[DatabaseManager] = None


def get_db() -> DatabaseManager:
    """Get database manager instance

    Read database path from database.path in config.toml,
    use default path ~/.config/agenda/agenda.db if not configured
    """
    global db_manager
    if db_manager is None:
        from agenda.config.loader import get_config
        from agenda.core.paths import get_db_path

        config = get_config()

        configured_path = config.get("database.path", "")
        if configured_path and str(configured_path).strip():
            db_path = str(configured_path)
        else:
            db_path = str(get_db_path())

        db_manager = DatabaseManager(
            db_path, default_language=config.get("app.default_language", "it")
        )
        logger.info(f"✓ Database manager initialized, path: {db_path}")

    return db_manager


def switch_database(new_db_path: str) -> bool:
    """Switch database to new path (for runtime database location modification)

    Args:
        new_db_path: New database path

    Returns:
        True if switch successful, False otherwise
    """
    global db_manager

    if db_manager is not None and Path(db_manager.db_path).resolve() == Path(new_db_path).resolve():
        logger.info(f"New path is same as current path, no switch needed: {new_db_path}")
        return True

    default_language = db_manager.default_language if db_manager else "it"
    candidate = DatabaseManager(new_db_path, default_language=default_language)
    if not candidate.available:
        logger.error(f"Database switch failed: {candidate.last_error}")
        return False

    db_manager = candidate
    logger.info(f"✓ Database switched to: {new_db_path}")
    return True


def reset_db() -> None:
    """Drop the global database manager (next get_db() reopens)"""
    global db_manager
    db_manager = None
