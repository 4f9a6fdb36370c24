"""
Store settings endpoints.
"""
import json
from typing import Any
from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response

from makhzan.dependencies import get_store
from makhzan.schemas.settings import StoreSettings, ColorSchemeUpdate, LanguageUpdate
from makhzan.services.inventory_store import InventoryStore
from makhzan.services.settings_merge import resolve_settings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=StoreSettings)
async def get_settings(store: InventoryStore = Depends(get_store)):
    return store.settings


@router.put("", response_model=StoreSettings)
async def replace_settings(settings: StoreSettings, store: InventoryStore = Depends(get_store)):
    """Replace the settings; omitted fields take their default value."""
    return store.update_settings(settings)


@router.post("/reset", response_model=StoreSettings)
async def reset_settings(store: InventoryStore = Depends(get_store)):
    """Restore the default settings."""
    return store.reset_settings()


@router.patch("/colors", response_model=StoreSettings)
async def update_colors(update: ColorSchemeUpdate, store: InventoryStore = Depends(get_store)):
    """Change some palette colours, keeping the others."""
    return store.update_color_scheme(update.colors)


@router.get("/language")
async def get_language(store: InventoryStore = Depends(get_store)):
    return {"language": store.language}


@router.put("/language")
async def set_language(update: LanguageUpdate, store: InventoryStore = Depends(get_store)):
    return {"language": store.set_language(update.language)}


@router.get("/export")
async def export_settings(store: InventoryStore = Depends(get_store)):
    """Download the settings as a JSON file."""
    content = json.dumps(store.settings.model_dump(mode="json"), ensure_ascii=False, indent=2)
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="inventory-settings.json"'}
    )


@router.post("/import", response_model=StoreSettings)
async def import_settings(
    payload: dict[str, Any] = Body(...),
    store: InventoryStore = Depends(get_store)
):
    """
    Apply an exported settings file. Missing keys take their default value and
    values the schema rejects are replaced by the default.
    """
    return store.update_settings(resolve_settings(payload))
