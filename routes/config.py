"""
Config API routes.

Admin-editable configuration: taxonomy items, navigation, form field
configurations and stored field mappings.
"""

from typing import Optional
from fastapi import APIRouter, Query

from models.base import ordered_ids
from models.taxonomy import (
    ConfigCategory,
    ConfigItemCreate,
    ConfigItemUpdate,
    ConfigItemReorder,
)
from models.navigation import NavigationItemCreate, NavigationItemUpdate, NavigationReorder
from models.field_configuration import FieldConfigurationUpdate, FieldConfigurationReorder
from models.field_mapping import FieldMappingCreate, FieldMappingUpdate
from services.taxonomy_service import get_taxonomy_service
from services.navigation_service import get_navigation_service
from services.field_configuration_service import get_field_configuration_service
from services.field_mapping_service import get_field_mapping_service
from exceptions import ConfigItemNotFoundError, FieldMappingNotFoundError
from routes.common import handle_error, lookup_response, success

router = APIRouter()


# ===================
# CONFIG ITEMS
# ===================

@router.get("/items")
async def list_config_items(
    category: Optional[ConfigCategory] = Query(None, description="Filter by category"),
    include_inactive: bool = Query(False, description="Include deactivated items")
):
    """List config items in display order."""
    try:
        items = get_taxonomy_service().get_all(category, include_inactive=include_inactive)
        return success(items, meta={"total": len(items)})
    except Exception as e:
        return handle_error(e)


@router.get("/items/snapshot")
async def get_taxonomy_snapshot():
    """Active items of every category, keyed by category."""
    try:
        return success(get_taxonomy_service().snapshot().items)
    except Exception as e:
        return handle_error(e)


@router.post("/items/reorder")
async def reorder_config_items(data: ConfigItemReorder):
    """Set the display order of one category. Every active item must be listed."""
    try:
        ids = ordered_ids(data.items)
        get_taxonomy_service().reorder(data.category, ids)
        return success({"category": data.category.value, "order": ids})
    except Exception as e:
        return handle_error(e)


@router.get("/items/{item_id}")
async def get_config_item(item_id: str):
    try:
        return lookup_response(get_taxonomy_service().find(item_id), ConfigItemNotFoundError)
    except Exception as e:
        return handle_error(e)


@router.post("/items", status_code=201)
async def create_config_item(data: ConfigItemCreate):
    """Add an item at the end of its category."""
    try:
        item = get_taxonomy_service().create(
            data.category,
            data.label,
            color=data.color,
            created_by_id=data.created_by_id
        )
        return success(item, status_code=201)
    except Exception as e:
        return handle_error(e)


@router.patch("/items/{item_id}")
async def update_config_item(item_id: str, data: ConfigItemUpdate):
    try:
        return success(get_taxonomy_service().update(item_id, data))
    except Exception as e:
        return handle_error(e)


@router.delete("/items/{item_id}")
async def deactivate_config_item(item_id: str):
    """Soft delete: the item disappears from lists but keeps its row."""
    try:
        get_taxonomy_service().deactivate(item_id)
        return success({"id": item_id, "message": "Config item deactivated"})
    except Exception as e:
        return handle_error(e)


# ===================
# NAVIGATION
# ===================

@router.get("/navigation")
async def list_navigation_items(
    visible_only: bool = Query(False, description="Only visible entries")
):
    try:
        items = get_navigation_service().get_all(visible_only=visible_only)
        return success(items, meta={"total": len(items)})
    except Exception as e:
        return handle_error(e)


@router.post("/navigation/reorder")
async def reorder_navigation(data: NavigationReorder):
    try:
        ids = ordered_ids(data.items)
        get_navigation_service().reorder(ids)
        return success({"order": ids})
    except Exception as e:
        return handle_error(e)


@router.post("/navigation", status_code=201)
async def create_navigation_item(data: NavigationItemCreate):
    try:
        return success(get_navigation_service().create(data), status_code=201)
    except Exception as e:
        return handle_error(e)


@router.patch("/navigation/{item_id}")
async def update_navigation_item(item_id: str, data: NavigationItemUpdate):
    try:
        return success(get_navigation_service().update(item_id, data))
    except Exception as e:
        return handle_error(e)


@router.delete("/navigation/{item_id}")
async def delete_navigation_item(item_id: str):
    try:
        get_navigation_service().delete(item_id)
        return success({"id": item_id, "message": "Navigation item deleted"})
    except Exception as e:
        return handle_error(e)


# ===================
# FIELD CONFIGURATIONS
# ===================

@router.get("/field-configurations")
async def list_field_configurations(
    section: Optional[str] = Query(None, description="Form section")
):
    try:
        configs = get_field_configuration_service().get_all(section)
        return success(configs, meta={"total": len(configs)})
    except Exception as e:
        return handle_error(e)


@router.post("/field-configurations/reorder")
async def reorder_field_configurations(data: FieldConfigurationReorder):
    try:
        ids = ordered_ids(data.items)
        get_field_configuration_service().reorder(ids, section=data.section)
        return success({"section": data.section, "order": ids})
    except Exception as e:
        return handle_error(e)


@router.patch("/field-configurations/{config_id}")
async def update_field_configuration(config_id: str, data: FieldConfigurationUpdate):
    try:
        return success(get_field_configuration_service().update(config_id, data))
    except Exception as e:
        return handle_error(e)


# ===================
# FIELD MAPPINGS
# ===================

@router.get("/field-mappings")
async def list_field_mappings(
    field_name: Optional[str] = Query(None, description="Filter by field"),
    active_only: bool = Query(False, description="Only active mappings")
):
    try:
        mappings = get_field_mapping_service().get_all(field_name, active_only=active_only)
        return success(mappings, meta={"total": len(mappings)})
    except Exception as e:
        return handle_error(e)


@router.get("/field-mappings/{mapping_id}")
async def get_field_mapping(mapping_id: str):
    try:
        return lookup_response(get_field_mapping_service().find(mapping_id), FieldMappingNotFoundError)
    except Exception as e:
        return handle_error(e)


@router.post("/field-mappings", status_code=201)
async def create_field_mapping(data: FieldMappingCreate):
    try:
        return success(get_field_mapping_service().create(data), status_code=201)
    except Exception as e:
        return handle_error(e)


@router.patch("/field-mappings/{mapping_id}")
async def update_field_mapping(mapping_id: str, data: FieldMappingUpdate):
    try:
        return success(get_field_mapping_service().update(mapping_id, data))
    except Exception as e:
        return handle_error(e)


@router.delete("/field-mappings/{mapping_id}")
async def delete_field_mapping(mapping_id: str):
    try:
        get_field_mapping_service().delete(mapping_id)
        return success({"id": mapping_id, "message": "Field mapping deleted"})
    except Exception as e:
        return handle_error(e)
