"""
Entity module command handlers
"""

from typing import Any, Dict

from agenda.core.logger import get_logger
from agenda.models.requests import (
    CreateEntityRequest,
    DeleteEntityRequest,
    UpdateEntityRequest,
)
from agenda.services.entity_service import EntityService

from . import api_handler, error_response, ok_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/entities/list",
    tags=["entities"],
    summary="List entities",
)
async def get_entities() -> Dict[str, Any]:
    """List entities"""
    try:
        entities = EntityService().list_entities()
        return ok_response({"entities": entities, "count": len(entities)})
    except Exception as e:
        return error_response("Failed to list entities", e)


@api_handler(
    body=CreateEntityRequest,
    method="POST",
    path="/entities/create",
    tags=["entities"],
    summary="Create entity",
    description="Create an entity; the name must not be used by another entity",
)
async def create_entity(body: CreateEntityRequest) -> Dict[str, Any]:
    """Create entity"""
    try:
        entity = EntityService().create_entity(body.name, body.color)
        return ok_response(entity, message="Entity created")
    except Exception as e:
        return error_response("Failed to create entity", e)


@api_handler(
    body=UpdateEntityRequest,
    method="POST",
    path="/entities/update",
    tags=["entities"],
    summary="Rename or recolor entity",
)
async def update_entity(body: UpdateEntityRequest) -> Dict[str, Any]:
    """Rename or recolor entity"""
    try:
        entity = EntityService().update_entity(body.entity_id, body.name, body.color)
        return ok_response(entity, message="Entity updated")
    except Exception as e:
        return error_response("Failed to update entity", e)


@api_handler(
    body=DeleteEntityRequest,
    method="POST",
    path="/entities/delete",
    tags=["entities"],
    summary="Delete entity",
    description="Delete an entity; events referencing it are left unchanged",
)
async def delete_entity(body: DeleteEntityRequest) -> Dict[str, Any]:
    """Delete entity"""
    try:
        EntityService().delete_entity(body.entity_id)
        return ok_response({"entityId": body.entity_id}, message="Entity deleted")
    except Exception as e:
        return error_response("Failed to delete entity", e)
