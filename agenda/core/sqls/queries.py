"""
Database query SQL statements
Contains all SELECT, INSERT, UPDATE, DELETE statements

Table names are interpolated with str.format from the fixed COLLECTIONS
whitelist in core.db, never from user input.
"""

# Generic collection queries
SELECT_ALL = """
    SELECT * FROM {table}
    ORDER BY id ASC
"""

SELECT_BY_ID = """
    SELECT * FROM {table}
    WHERE id = ?
"""

COUNT_ALL = """
    SELECT COUNT(*) as count FROM {table}
"""

INSERT_RECORD = """
    INSERT INTO {table} ({columns})
    VALUES ({placeholders})
"""

UPDATE_RECORD = """
    UPDATE {table}
    SET {assignments}
    WHERE id = ?
"""

DELETE_RECORD = """
    DELETE FROM {table}
    WHERE id = ?
"""

# Entities queries
INSERT_ENTITY = """
    INSERT INTO entities (name, color)
    VALUES (?, ?)
"""

# Settings queries
INSERT_SETTING_IF_ABSENT = """
    INSERT OR IGNORE INTO settings (key, value, type)
    VALUES (?, ?, ?)
"""

INSERT_OR_REPLACE_SETTING = """
    INSERT OR REPLACE INTO settings (key, value, type)
    VALUES (?, ?, ?)
"""

SELECT_SETTING_BY_KEY = """
    SELECT key, value, type FROM settings
    WHERE key = ?
"""

SELECT_ALL_SETTINGS = """
    SELECT key, value, type FROM settings
    ORDER BY key
"""
