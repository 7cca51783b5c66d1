"""API routes for diary statistics."""

from fastapi import APIRouter

from ...schemas.statistics import DiaryStatistics
from ..deps import DiaryServiceDep

router = APIRouter(prefix="/api/v1/stats", tags=["Statistics"])


@router.get("", response_model=DiaryStatistics)
async def get_statistics(service: DiaryServiceDep):
    """Totals, date range, top tags and sentiment distribution over live entries."""
    return await service.get_statistics()
