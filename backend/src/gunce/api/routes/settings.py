"""API routes for user settings."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ...core.settings_store import SettingsStore
from ...schemas.settings import UserSettings, UserSettingsUpdate
from ..deps import get_settings_store, require_unlocked

router = APIRouter(prefix="/api/v1/settings", tags=["Settings"])


@router.get("", response_model=UserSettings)
async def get_settings(store: Annotated[SettingsStore, Depends(get_settings_store)]):
    return store.settings


@router.put("", response_model=UserSettings, dependencies=[Depends(require_unlocked)])
async def update_settings(
    changes: UserSettingsUpdate,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Apply a partial settings update and persist it."""
    return store.update(changes)
