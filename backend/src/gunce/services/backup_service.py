"""Backup export and restore over any storage adapter."""

from typing import List

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..models.base import utcnow
from ..schemas.backup import BACKUP_FORMAT_VERSION, BackupDocument, RestoreReport
from ..schemas.diary_entry import DiaryEntryRead, DiaryEntryRestore
from ..schemas.diary_tag import DiaryTagCreate
from .storage.adapters.base import StorageAdapter

logger = get_logger(__name__)

RESTORE_FIELDS = set(DiaryEntryRestore.model_fields)


class BackupService:
    def __init__(self, adapter: StorageAdapter):
        self.adapter = adapter

    async def export(self) -> BackupDocument:
        """Snapshot of all live entries and tags. Encrypted entries stay sealed."""
        entries = await self.adapter.list()
        tags = await self.adapter.list_tags()
        logger.info(f"Exported backup: {len(entries)} entries, {len(tags)} tags")
        return BackupDocument(
            exported_at=utcnow(),
            entries=[entry.model_copy(update={"sync_status": None}) for entry in entries],
            tags=tags,
        )

    @staticmethod
    def _restore_payload(entry: DiaryEntryRead) -> DiaryEntryRestore:
        return DiaryEntryRestore(**entry.model_dump(include=RESTORE_FIELDS))

    async def restore(self, document: BackupDocument) -> RestoreReport:
        """
        Re-create every entry through the adapter's create.

        Entries get fresh ids. Tags whose name already exists are skipped.
        """
        if document.version != BACKUP_FORMAT_VERSION:
            raise ValidationError("version", f"Unsupported backup version {document.version}")

        report = RestoreReport()
        existing: List[str] = [tag.name for tag in await self.adapter.list_tags()]
        for tag in document.tags:
            if tag.name in existing:
                report.skipped_tags += 1
                continue
            await self.adapter.create_tag(
                DiaryTagCreate(name=tag.name, color=tag.color, description=tag.description)
            )
            existing.append(tag.name)
            report.restored_tags += 1

        for entry in document.entries:
            await self.adapter.create(self._restore_payload(entry))
            report.restored_entries += 1

        logger.info(
            f"Restored backup: {report.restored_entries} entries, "
            f"{report.restored_tags} tags ({report.skipped_tags} skipped)"
        )
        return report
