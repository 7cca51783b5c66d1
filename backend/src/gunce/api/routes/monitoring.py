"""Health check routes."""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends

from ...core.config import config
from ...services.storage.adapters.base import StorageAdapter
from ...services.sync_service import SyncService
from ..deps import get_storage_adapter, get_sync_service

router = APIRouter(prefix="/api/v1", tags=["System"])


@router.get("/health")
async def detailed_health(
    adapter: Annotated[StorageAdapter, Depends(get_storage_adapter)],
    sync: Annotated[Optional[SyncService], Depends(get_sync_service)],
) -> Dict[str, Any]:
    """Storage and reconciliation health."""
    storage_ok = await adapter.health_check()
    components: Dict[str, Any] = {"storage": {"backend": adapter.name, "healthy": storage_ok}}

    if sync is not None and sync.available:
        components["remote"] = {"healthy": await sync.remote.health_check(), "syncing": sync.running}

    return {
        "status": "healthy" if storage_ok else "degraded",
        "storage_mode": config.STORAGE_MODE,
        "components": components,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
