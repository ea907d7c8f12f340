"""
Entity service layer
Create, rename/recolor and delete the categories events are tagged with.

Name uniqueness is checked when an entity is created only; renaming to an
existing name is accepted. Deleting an entity leaves referencing events
untouched, consumers resolve the dangling id through lookup_entity().
"""

from typing import Any, Dict, Iterable, Optional

from agenda.core.db import ENTITIES, DatabaseManager, get_db
from agenda.core.errors import NotFoundError, ValidationError
from agenda.core.logger import get_logger
from agenda.models.entities import DEFAULT_ENTITY_COLOR

logger = get_logger(__name__)

FALLBACK_ENTITY_COLOR = "#94a3b8"


def lookup_entity(
    entities: Iterable[Dict[str, Any]],
    entity_id: Optional[int],
    fallback_name: str = "",
) -> Dict[str, Any]:
    """
    Resolve an entity id against a snapshot of the entities collection

    Returns:
        The entity record, or a placeholder {id, name, color} when the id is
        unset or references a deleted entity
    """
    for entity in entities:
        if entity.get("id") == entity_id:
            return entity
    return {"id": entity_id, "name": fallback_name, "color": FALLBACK_ENTITY_COLOR}


class EntityService:
    """Entity service class"""

    def __init__(self, db: Optional[DatabaseManager] = None):
        self.db = db or get_db()

    def list_entities(self):
        return self.db.get_all(ENTITIES)

    def create_entity(self, name: str, color: Optional[str] = None) -> Dict[str, Any]:
        """
        Create an entity

        Raises:
            ValidationError: Name empty or already used by another entity
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("name", "Entity name is required")

        existing = {entity["name"].lower() for entity in self.db.get_all(ENTITIES)}
        if name.lower() in existing:
            raise ValidationError("name", f"Entity name already exists: {name}")

        entity = self.db.add(ENTITIES, {"name": name, "color": color or DEFAULT_ENTITY_COLOR})
        logger.info(f"✅ Entity created: {entity.get('id')}, name: {name}")
        return entity

    def update_entity(
        self,
        entity_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Rename and/or recolor an entity

        Raises:
            ValidationError: New name is blank
            NotFoundError: entity_id does not exist
        """
        fields: Dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("name", "Entity name is required")
            fields["name"] = name.strip()
        if color is not None:
            fields["color"] = color

        if not fields:
            entity = self.db.get(ENTITIES, entity_id)
            if entity is None:
                raise NotFoundError(ENTITIES, entity_id)
            return entity

        entity = self.db.update(ENTITIES, entity_id, fields)
        logger.info(f"Entity updated: {entity_id}")
        return entity

    def delete_entity(self, entity_id: int) -> None:
        """Delete an entity; events keep their (now dangling) entityId"""
        self.db.remove(ENTITIES, entity_id)
        logger.info(f"Entity deleted: {entity_id}")
