"""API routes for local/remote reconciliation."""

from fastapi import APIRouter

from ...core.logging import get_logger
from ...schemas.sync import SyncReport
from ..deps import DiaryServiceDep

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/sync", tags=["Sync"])


@router.post("", response_model=SyncReport)
async def run_sync(service: DiaryServiceDep):
    """
    Run one reconciliation pass.

    Returns status "skipped" if a pass is already running and "unavailable"
    when no remote store is configured.
    """
    report = await service.sync()
    logger.info(f"Sync requested via API: {report.status}")
    return report
