"""
Error types shared by the store, services and handlers

- ValidationError: a required field is missing or invalid, nothing is persisted
- NotFoundError: update/delete referencing a missing id, nothing is mutated
- PersistenceError: the underlying SQLite storage failed to open or write
"""

from typing import Any, Optional


class AgendaError(Exception):
    """Base class for errors surfaced to callers"""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AgendaError):
    """Input rejected before reaching the store"""

    kind = "validation"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Field '{field}' is required")
        self.field = field


class NotFoundError(AgendaError):
    """Record id absent from its collection"""

    kind = "not_found"

    def __init__(self, collection: str, record_id: Any):
        super().__init__(f"{collection} record not found: {record_id}")
        self.collection = collection
        self.record_id = record_id


class PersistenceError(AgendaError):
    """Storage could not be opened or written"""

    kind = "persistence"
