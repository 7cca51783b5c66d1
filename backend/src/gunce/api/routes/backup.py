"""API routes for backup export and restore."""

from fastapi import APIRouter

from ...schemas.backup import BackupDocument, RestoreReport
from ..deps import DiaryServiceDep

router = APIRouter(prefix="/api/v1/backup", tags=["Backup"])


@router.get("", response_model=BackupDocument)
async def export_backup(service: DiaryServiceDep):
    """Export all live entries and tags. Encrypted entries stay sealed."""
    return await service.export_backup()


@router.post("/restore", response_model=RestoreReport)
async def restore_backup(document: BackupDocument, service: DiaryServiceDep):
    """Re-create entries and missing tags from a backup document."""
    return await service.restore_backup(document)
