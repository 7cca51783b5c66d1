"""
Diary application service.

Single entry point for the UI and HTTP layers. Every mutation passes the
password gate first; reads are always allowed but encrypted entries only
come back decrypted when the entry password is supplied.
"""

import asyncio
from collections import Counter
from typing import List, Optional

from ..core.config import BaseConfig, config as default_config
from ..core.exceptions import GunceError, ValidationError
from ..core.logging import get_logger
from ..core.security import PasswordGate
from ..core.settings_store import SettingsStore
from ..schemas.backup import BackupDocument, RestoreReport
from ..schemas.diary_entry import (
    DiaryEntryCreate,
    DiaryEntryListResponse,
    DiaryEntryRead,
    DiaryEntryUpdate,
    EntryFilters,
)
from ..schemas.diary_tag import DiaryTagCreate, DiaryTagRead
from ..schemas.sentiment import SentimentResult
from ..schemas.statistics import DiaryStatistics, TagUsage
from ..schemas.sync import SyncReport
from . import entry_record
from .backup_service import BackupService
from .sentiment_service import SentimentService, calculate_sentiment_stats, entry_sentiment
from .storage.adapters.base import StorageAdapter
from .sync_service import SyncService

logger = get_logger(__name__)

TOP_TAGS = 10


class DiaryService:
    """Facade over the storage adapter, password gate, sentiment and sync services."""

    def __init__(
        self,
        adapter: StorageAdapter,
        settings_store: SettingsStore,
        gate: PasswordGate,
        sentiment: Optional[SentimentService] = None,
        sync: Optional[SyncService] = None,
        access_token: Optional[str] = None,
        require_token: bool = False,
        settings: Optional[BaseConfig] = None,
    ):
        self.adapter = adapter
        self.settings_store = settings_store
        self.gate = gate
        self.sentiment = sentiment
        self.sync_service = sync
        self.access_token = access_token
        self.require_token = require_token
        self.settings = settings or default_config

    def _ensure_unlocked(self) -> None:
        self.gate.ensure_unlocked(self.access_token, require_token=self.require_token)

    async def _after_mutation(self) -> None:
        if not (self.settings.AUTO_SYNC and self.sync_service and self.sync_service.available):
            return
        try:
            await self.sync_service.sync()
        except GunceError as e:
            # The local write already succeeded; the entry stays pending
            logger.warning(f"Automatic reconciliation failed: {e.message}")

    # Entries

    async def create_entry(self, data: DiaryEntryCreate, password: Optional[str] = None) -> DiaryEntryRead:
        self._ensure_unlocked()

        if data.sentiment is None and self.settings.SENTIMENT_AUTO_TAG and self.sentiment and data.content:
            result = await self.sentiment.analyze(data.content)
            if result.error is None:
                data = data.model_copy(update={"sentiment": result.sentiment, "sentiment_score": result.score})

        entry = await self.adapter.create(data, password)
        await self._after_mutation()
        return entry

    async def read_entry(self, entry_id: str, password: Optional[str] = None) -> DiaryEntryRead:
        """
        Read one entry.

        Args:
            entry_id: Entry id
            password: Entry password; when given, an encrypted entry is returned with its plaintext

        Raises:
            NotFoundError: Unknown or deleted id
            DecryptionError: Wrong password or corrupted package
        """
        entry = await self.adapter.read(entry_id)
        if password and entry.is_encrypted:
            return await asyncio.to_thread(entry_record.decrypt_entry, entry, password)
        return entry

    async def list_entries(self, filters: Optional[EntryFilters] = None) -> DiaryEntryListResponse:
        filters = filters or EntryFilters()
        items = await self.adapter.list(filters)
        total = await self.adapter.count(filters)
        return DiaryEntryListResponse(total=total, items=items)

    async def search_entries(self, query: str, filters: Optional[EntryFilters] = None) -> DiaryEntryListResponse:
        if not query or not query.strip():
            raise ValidationError("q", "Search query is required")
        filters = (filters or EntryFilters()).model_copy(update={"search": query.strip()})
        return await self.list_entries(filters)

    async def update_entry(
        self, entry_id: str, changes: DiaryEntryUpdate, password: Optional[str] = None
    ) -> DiaryEntryRead:
        self._ensure_unlocked()
        entry = await self.adapter.update(entry_id, changes, password)
        await self._after_mutation()
        return entry

    async def delete_entry(self, entry_id: str) -> None:
        self._ensure_unlocked()
        await self.adapter.delete(entry_id)
        await self._after_mutation()

    async def toggle_favorite(self, entry_id: str) -> DiaryEntryRead:
        self._ensure_unlocked()
        entry = await self.adapter.toggle_favorite(entry_id)
        await self._after_mutation()
        return entry

    async def delete_all_entries(self) -> int:
        self._ensure_unlocked()
        deleted = await self.adapter.delete_all()
        await self._after_mutation()
        return deleted

    # Tags

    async def list_tags(self) -> List[DiaryTagRead]:
        return await self.adapter.list_tags()

    async def create_tag(self, data: DiaryTagCreate) -> DiaryTagRead:
        self._ensure_unlocked()
        return await self.adapter.create_tag(data)

    async def delete_tag(self, tag_id: str) -> None:
        self._ensure_unlocked()
        await self.adapter.delete_tag(tag_id)

    # Statistics and sentiment

    async def get_statistics(self) -> DiaryStatistics:
        entries = await self.adapter.list()
        if not entries:
            return DiaryStatistics()

        total_words = sum(entry.word_count for entry in entries)
        tag_counts = Counter(tag for entry in entries for tag in entry.tags)
        dates = [entry.entry_date for entry in entries]

        return DiaryStatistics(
            total_entries=len(entries),
            total_words=total_words,
            average_word_count=round(total_words / len(entries), 1),
            total_read_time=sum(entry.read_time for entry in entries),
            favorite_count=sum(1 for entry in entries if entry.is_favorite),
            encrypted_count=sum(1 for entry in entries if entry.is_encrypted),
            first_entry_date=min(dates),
            last_entry_date=max(dates),
            top_tags=[TagUsage(name=name, count=count) for name, count in tag_counts.most_common(TOP_TAGS)],
            sentiment=calculate_sentiment_stats(entry_sentiment(entry) for entry in entries),
        )

    async def analyze_sentiment(self, text: str) -> SentimentResult:
        if self.sentiment is None:
            return SentimentResult(error="Sentiment analysis is not available")
        return await self.sentiment.analyze(text)

    # Backup and reconciliation

    async def export_backup(self) -> BackupDocument:
        return await BackupService(self.adapter).export()

    async def restore_backup(self, document: BackupDocument) -> RestoreReport:
        self._ensure_unlocked()
        report = await BackupService(self.adapter).restore(document)
        await self._after_mutation()
        return report

    async def sync(self) -> SyncReport:
        if self.sync_service is None:
            return SyncReport(status="unavailable")
        return await self.sync_service.sync()
