"""
Reconciliation of the local store with the remote store.

Pending rows are pushed (upserted) to the remote table, soft-deleted rows
are removed there and then purged locally. A pass is best-effort: failures
are recorded per entry and the pass continues.
"""

import asyncio
from typing import Optional

from ..core.exceptions import GunceError, NotFoundError
from ..core.logging import get_logger
from ..models.base import utcnow
from ..schemas.diary_entry import DiaryEntryRead, SyncStatus
from ..schemas.sync import SyncFailure, SyncReport
from .storage.adapters.local_adapter import LocalStorageAdapter
from .storage.adapters.remote_adapter import RemoteStorageAdapter

logger = get_logger(__name__)


class SyncService:
    """Runs one reconciliation pass at a time between local and remote stores."""

    def __init__(self, local: LocalStorageAdapter, remote: Optional[RemoteStorageAdapter]):
        self.local = local
        self.remote = remote
        self._lock = asyncio.Lock()

    @property
    def available(self) -> bool:
        return self.remote is not None

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def sync(self) -> SyncReport:
        """
        Run a reconciliation pass.

        Returns:
            SyncReport; status is "skipped" when another pass is running and
            "unavailable" when no remote store is configured.
        """
        if self.remote is None:
            return SyncReport(status="unavailable")
        if self._lock.locked():
            logger.info("Reconciliation already running, skipping")
            return SyncReport(status="skipped")

        async with self._lock:
            report = SyncReport(started_at=utcnow())
            unsynced = await self.local.list_unsynced()
            logger.info(f"Reconciliation started: {len(unsynced)} unsynced entries")

            for entry in unsynced:
                try:
                    if entry.sync_status == SyncStatus.DELETED:
                        await self._push_delete(entry)
                        report.deleted += 1
                    elif await self._push_entry(entry):
                        report.pushed += 1
                    else:
                        report.already_synced += 1
                except GunceError as e:
                    logger.error(f"Failed to reconcile entry {entry.id}: {e.message}")
                    report.failed.append(SyncFailure(entry_id=entry.id, error=e.message))

            report.finished_at = utcnow()
            logger.info(
                f"Reconciliation finished: pushed={report.pushed} deleted={report.deleted} "
                f"already_synced={report.already_synced} failed={len(report.failed)}"
            )
            return report

    async def _push_entry(self, entry: DiaryEntryRead) -> bool:
        """Upsert a pending entry; returns False when the remote copy was already current."""
        remote_copy = await self.remote.find(entry.id)
        wrote = remote_copy is None or remote_copy.updated_at != entry.updated_at
        if wrote:
            await self.remote.upsert(entry)
        if not await self.local.mark_synced(entry.id, entry.updated_at):
            logger.debug(f"Entry {entry.id} changed during reconciliation, left pending")
        return wrote

    async def _push_delete(self, entry: DiaryEntryRead) -> None:
        try:
            await self.remote.delete(entry.id)
        except NotFoundError:
            logger.debug(f"Entry {entry.id} already absent remotely")
        await self.local.hard_delete(entry.id)
