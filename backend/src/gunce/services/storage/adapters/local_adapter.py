"""Local SQLite storage adapter (desktop mode)."""

import asyncio
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import String, func, literal, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ....core.exceptions import NotFoundError, StorageError, ValidationError
from ....core.logging import get_logger
from ....models.base import utcnow
from ....models.diary_entry import DiaryEntry
from ....models.diary_tag import DiaryTag
from ....schemas.diary_entry import (
    DiaryEntryCreate,
    DiaryEntryRead,
    DiaryEntryUpdate,
    EntryFilters,
    SyncStatus,
)
from ....schemas.diary_tag import DiaryTagCreate, DiaryTagRead
from ... import entry_record
from .base import StorageAdapter, count_tag_usage

logger = get_logger(__name__)


class LocalStorageAdapter(StorageAdapter):
    """
    Entries in the embedded database.

    Deletes are soft: the row is kept with sync_status=deleted until the
    reconciliation pass has removed the remote copy and calls hard_delete.
    """

    name = "local"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        locale: str = entry_record.DEFAULT_LOCALE,
    ):
        self.session_factory = session_factory
        self.locale = locale

    @staticmethod
    def _live():
        return DiaryEntry.sync_status != SyncStatus.DELETED.value

    @staticmethod
    def _conditions(filters: EntryFilters) -> List[Any]:
        conditions = [LocalStorageAdapter._live()]

        if filters.date_from:
            conditions.append(DiaryEntry.entry_date >= filters.date_from)
        if filters.date_to:
            conditions.append(DiaryEntry.entry_date <= filters.date_to)
        if filters.sentiment:
            conditions.append(DiaryEntry.sentiment == filters.sentiment.value)
        if filters.is_favorite is not None:
            conditions.append(DiaryEntry.is_favorite == filters.is_favorite)
        if filters.tag:
            tag_values = func.json_each(DiaryEntry.tags).table_valued("value")
            conditions.append(
                select(literal(1)).select_from(tag_values).where(tag_values.c.value == filters.tag).exists()
            )
        if filters.search:
            needle = filters.search.strip().casefold()
            conditions.append(
                or_(
                    func.casefold(DiaryEntry.title, type_=String).contains(needle, autoescape=True),
                    func.casefold(DiaryEntry.content, type_=String).contains(needle, autoescape=True),
                )
            )

        return conditions

    async def _get_row(self, session: AsyncSession, entry_id: str, include_deleted: bool = False) -> DiaryEntry:
        query = select(DiaryEntry).where(DiaryEntry.id == entry_id)
        if not include_deleted:
            query = query.where(self._live())
        result = await session.execute(query)
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError("DiaryEntry", entry_id)
        return row

    async def create(self, data: DiaryEntryCreate, password: Optional[str] = None) -> DiaryEntryRead:
        if password:
            record = await asyncio.to_thread(entry_record.build_new_record, data, password, self.locale)
        else:
            record = entry_record.build_new_record(data, locale=self.locale)

        row = DiaryEntry(**record, sync_status=SyncStatus.PENDING.value)
        try:
            async with self.session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create entry: {e}")
            raise StorageError(f"Failed to create entry: {e}") from e

        logger.info(f"Created entry {row.id} (encrypted={row.is_encrypted})")
        return DiaryEntryRead.model_validate(row)

    async def read(self, entry_id: str) -> DiaryEntryRead:
        try:
            async with self.session_factory() as session:
                row = await self._get_row(session, entry_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read entry {entry_id}: {e}") from e
        return DiaryEntryRead.model_validate(row)

    async def list(self, filters: Optional[EntryFilters] = None) -> List[DiaryEntryRead]:
        filters = filters or EntryFilters()
        query = (
            select(DiaryEntry)
            .where(*self._conditions(filters))
            .order_by(DiaryEntry.entry_date.desc(), DiaryEntry.created_at.desc())
            .offset(filters.skip)
        )
        if filters.limit is not None:
            query = query.limit(filters.limit)

        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list entries: {e}") from e
        return [DiaryEntryRead.model_validate(row) for row in rows]

    async def count(self, filters: Optional[EntryFilters] = None) -> int:
        filters = filters or EntryFilters()
        query = select(func.count()).select_from(DiaryEntry).where(*self._conditions(filters))
        try:
            async with self.session_factory() as session:
                return (await session.execute(query)).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count entries: {e}") from e

    async def update(
        self, entry_id: str, changes: DiaryEntryUpdate, password: Optional[str] = None
    ) -> DiaryEntryRead:
        try:
            async with self.session_factory() as session:
                row = await self._get_row(session, entry_id)
                current = DiaryEntryRead.model_validate(row)
                if password:
                    values = await asyncio.to_thread(
                        entry_record.merge_update, current, changes, password, self.locale
                    )
                else:
                    values = entry_record.merge_update(current, changes, locale=self.locale)

                for key, value in values.items():
                    setattr(row, key, value)
                row.sync_status = SyncStatus.PENDING.value
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to update entry {entry_id}: {e}")
            raise StorageError(f"Failed to update entry {entry_id}: {e}") from e

        logger.info(f"Updated entry {entry_id}")
        return DiaryEntryRead.model_validate(row)

    async def soft_delete(self, entry_id: str) -> None:
        """Hide the entry from reads and queue its remote deletion."""
        try:
            async with self.session_factory() as session:
                row = await self._get_row(session, entry_id)
                row.sync_status = SyncStatus.DELETED.value
                row.updated_at = utcnow()
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete entry {entry_id}: {e}") from e
        logger.info(f"Soft-deleted entry {entry_id}")

    async def delete(self, entry_id: str) -> None:
        await self.soft_delete(entry_id)

    async def hard_delete(self, entry_id: str) -> None:
        """
        Physically remove a row that was already soft-deleted.

        Raises:
            NotFoundError: No row with this id
            ValidationError: The row is still live
        """
        try:
            async with self.session_factory() as session:
                row = await self._get_row(session, entry_id, include_deleted=True)
                if row.sync_status != SyncStatus.DELETED.value:
                    raise ValidationError("sync_status", "Only deleted entries can be purged")
                await session.delete(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to purge entry {entry_id}: {e}") from e
        logger.debug(f"Purged entry {entry_id}")

    async def delete_all(self) -> int:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    update(DiaryEntry)
                    .where(self._live())
                    .values(sync_status=SyncStatus.DELETED.value, updated_at=utcnow())
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete entries: {e}") from e
        logger.warning(f"Soft-deleted all entries ({result.rowcount})")
        return result.rowcount

    async def list_unsynced(self) -> List[DiaryEntryRead]:
        """Pending and deleted rows, oldest change first."""
        query = (
            select(DiaryEntry)
            .where(DiaryEntry.sync_status != SyncStatus.SYNCED.value)
            .order_by(DiaryEntry.updated_at.asc())
        )
        try:
            async with self.session_factory() as session:
                rows = (await session.execute(query)).scalars().all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list unsynced entries: {e}") from e
        return [DiaryEntryRead.model_validate(row) for row in rows]

    async def mark_synced(self, entry_id: str, updated_at: datetime) -> bool:
        """
        Mark a pushed row as synced.

        Returns False (and leaves the row pending) when it changed after the push
        or was deleted meanwhile.
        """
        try:
            async with self.session_factory() as session:
                row = await session.get(DiaryEntry, entry_id)
                if row is None or row.sync_status != SyncStatus.PENDING.value or row.updated_at != updated_at:
                    return False
                row.sync_status = SyncStatus.SYNCED.value
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to mark entry {entry_id} synced: {e}") from e
        return True

    async def list_tags(self) -> List[DiaryTagRead]:
        try:
            async with self.session_factory() as session:
                tags = (await session.execute(select(DiaryTag).order_by(DiaryTag.name))).scalars().all()
                entry_tags = (await session.execute(select(DiaryEntry.tags).where(self._live()))).scalars().all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list tags: {e}") from e

        usage = count_tag_usage(list(entry_tags))
        return [
            DiaryTagRead.model_validate(tag).model_copy(update={"usage_count": usage.get(tag.name, 0)})
            for tag in tags
        ]

    async def create_tag(self, data: DiaryTagCreate) -> DiaryTagRead:
        name = data.name.strip()
        if not name:
            raise ValidationError("name", "name is required")

        tag = DiaryTag(name=name, color=data.color, description=data.description)
        try:
            async with self.session_factory() as session:
                session.add(tag)
                await session.commit()
        except IntegrityError as e:
            raise ValidationError("name", f"Tag '{name}' already exists") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create tag: {e}") from e
        return DiaryTagRead.model_validate(tag)

    async def delete_tag(self, tag_id: str) -> None:
        try:
            async with self.session_factory() as session:
                tag = await session.get(DiaryTag, tag_id)
                if tag is None:
                    raise NotFoundError("DiaryTag", tag_id)
                await session.delete(tag)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete tag {tag_id}: {e}") from e

    async def health_check(self) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(select(literal(1)))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Local store health check failed: {e}")
            return False

