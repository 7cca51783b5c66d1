"""
FastAPI dependencies.

Process-wide objects (settings store, password gate, adapter, sentiment and
sync services) are created at startup and kept on ``app.state``; a
DiaryService is assembled per request around the caller's access token.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.security import PasswordGate
from ..core.settings_store import SettingsStore
from ..services.diary_service import DiaryService
from ..services.sentiment_service import SentimentService
from ..services.storage.adapters.base import StorageAdapter
from ..services.sync_service import SyncService

http_bearer = HTTPBearer(auto_error=False, scheme_name="BearerAuth")


def get_settings_store(request: Request) -> SettingsStore:
    return request.app.state.settings_store


def get_gate(request: Request) -> PasswordGate:
    return request.app.state.gate


def get_storage_adapter(request: Request) -> StorageAdapter:
    return request.app.state.adapter


def get_sentiment_service(request: Request) -> Optional[SentimentService]:
    return getattr(request.app.state, "sentiment", None)


def get_sync_service(request: Request) -> Optional[SyncService]:
    return getattr(request.app.state, "sync_service", None)


def get_access_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(http_bearer)],
) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_diary_service(
    adapter: Annotated[StorageAdapter, Depends(get_storage_adapter)],
    settings_store: Annotated[SettingsStore, Depends(get_settings_store)],
    gate: Annotated[PasswordGate, Depends(get_gate)],
    sentiment: Annotated[Optional[SentimentService], Depends(get_sentiment_service)],
    sync: Annotated[Optional[SyncService], Depends(get_sync_service)],
    access_token: Annotated[Optional[str], Depends(get_access_token)],
) -> DiaryService:
    return DiaryService(
        adapter,
        settings_store,
        gate,
        sentiment=sentiment,
        sync=sync,
        access_token=access_token,
        require_token=True,
    )


def require_unlocked(
    gate: Annotated[PasswordGate, Depends(get_gate)],
    access_token: Annotated[Optional[str], Depends(get_access_token)],
) -> None:
    """Guard for mutating routes outside the diary service (settings, password changes)."""
    gate.ensure_unlocked(access_token, require_token=True)


DiaryServiceDep = Annotated[DiaryService, Depends(get_diary_service)]
