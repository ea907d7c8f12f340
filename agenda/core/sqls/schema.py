"""
Database schema definitions
Contains all CREATE TABLE and CREATE INDEX statements
"""

# Table creation statements
CREATE_EVENTS_TABLE = """
    CREATE TABLE IF NOT EXISTS events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        date TEXT NOT NULL,
        start_time TEXT NOT NULL,
        end_time TEXT NOT NULL,
        duration INTEGER NOT NULL DEFAULT 0,
        mode TEXT NOT NULL DEFAULT 'online',
        location TEXT DEFAULT '',
        meeting_url TEXT DEFAULT '',
        entity_id INTEGER,
        materials TEXT DEFAULT '',
        notes TEXT DEFAULT '',
        recurrence TEXT NOT NULL DEFAULT 'none',
        created_at INTEGER NOT NULL DEFAULT 0,
        updated_at INTEGER NOT NULL DEFAULT 0
    )
"""

# name uniqueness is checked by EntityService on creation only, not by a constraint
CREATE_ENTITIES_TABLE = """
    CREATE TABLE IF NOT EXISTS entities (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        color TEXT NOT NULL
    )
"""

CREATE_SETTINGS_TABLE = """
    CREATE TABLE IF NOT EXISTS settings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        type TEXT NOT NULL
    )
"""

# Index creation statements
CREATE_EVENTS_DATE_INDEX = """
    CREATE INDEX IF NOT EXISTS idx_events_date
    ON events(date)
"""

CREATE_EVENTS_ENTITY_INDEX = """
    CREATE INDEX IF NOT EXISTS idx_events_entity
    ON events(entity_id)
"""

CREATE_ENTITIES_NAME_INDEX = """
    CREATE INDEX IF NOT EXISTS idx_entities_name
    ON entities(name)
"""

ALL_TABLES = [
    CREATE_EVENTS_TABLE,
    CREATE_ENTITIES_TABLE,
    CREATE_SETTINGS_TABLE,
]

ALL_INDEXES = [
    CREATE_EVENTS_DATE_INDEX,
    CREATE_EVENTS_ENTITY_INDEX,
    CREATE_ENTITIES_NAME_INDEX,
]
