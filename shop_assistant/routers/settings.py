from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..models import SettingsUpdate, SettingsView
from ..services.provider_config_store import ProviderConfigStore
from .deps import get_provider_config_store_dependency

router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings")
async def get_provider_settings(
    store: ProviderConfigStore = Depends(get_provider_config_store_dependency),
) -> Dict[str, Any]:
    return SettingsView.from_config(store.snapshot()).model_dump(by_alias=True)


@router.post("/settings")
async def update_provider_settings(
    update: SettingsUpdate,
    store: ProviderConfigStore = Depends(get_provider_config_store_dependency),
) -> Dict[str, Any]:
    """Change the LLM provider in memory; the change is lost on restart."""
    config = store.update(update)
    return {
        "status": "success",
        "message": "Settings updated successfully",
        "settings": SettingsView.from_config(config).model_dump(by_alias=True),
    }
