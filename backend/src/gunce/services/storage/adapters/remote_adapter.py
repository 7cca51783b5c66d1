"""Remote storage adapter backed by Supabase (web mode)."""

import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple

from fastapi.encoders import jsonable_encoder

from ....core.exceptions import NotFoundError, ValidationError
from ....core.logging import get_logger
from ....models.base import generate_id, utcnow
from ....schemas.diary_entry import DiaryEntryCreate, DiaryEntryRead, DiaryEntryUpdate, EntryFilters
from ....schemas.diary_tag import DiaryTagCreate, DiaryTagRead
from ... import entry_record
from ..supabase_client import SupabaseClient
from .base import StorageAdapter, count_tag_usage

logger = get_logger(__name__)

ORDER = "entry_date.desc,created_at.desc"


def _quote(value: str) -> str:
    """Double-quote a value for a PostgREST logic tree (or=...)."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _like_literal(value: str) -> str:
    """Escape LIKE wildcards; PostgREST reads * as %, so a literal * matches any one character."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "_")


class RemoteStorageAdapter(StorageAdapter):
    """
    Entries in the remote Supabase tables.

    The remote store has no sync_status column: deletes are immediate.
    Tags are stored as a jsonb array, so tag filtering uses ``cs.["name"]``.
    """

    name = "remote"

    def __init__(
        self,
        client: SupabaseClient,
        locale: str = entry_record.DEFAULT_LOCALE,
        entries_table: str = "diary_entries",
        tags_table: str = "diary_tags",
    ):
        self.client = client
        self.locale = locale
        self.entries_table = entries_table
        self.tags_table = tags_table

    @staticmethod
    def _to_entry(row: Dict[str, Any]) -> DiaryEntryRead:
        data = {key: value for key, value in row.items() if value is not None and key != "sync_status"}
        return DiaryEntryRead.model_validate(data)

    @staticmethod
    def _by_id(entry_id: str) -> List[Tuple[str, str]]:
        return [("id", f"eq.{entry_id}")]

    @staticmethod
    def _filter_params(filters: EntryFilters) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = []
        if filters.date_from:
            params.append(("entry_date", f"gte.{filters.date_from.isoformat()}"))
        if filters.date_to:
            params.append(("entry_date", f"lte.{filters.date_to.isoformat()}"))
        if filters.tag:
            params.append(("tags", f"cs.{json.dumps([filters.tag], ensure_ascii=False)}"))
        if filters.sentiment:
            params.append(("sentiment", f"eq.{filters.sentiment.value}"))
        if filters.is_favorite is not None:
            params.append(("is_favorite", f"eq.{str(filters.is_favorite).lower()}"))
        if filters.search and filters.search.strip():
            pattern = _quote(f"*{_like_literal(filters.search.strip())}*")
            params.append(("or", f"(title.ilike.{pattern},content.ilike.{pattern})"))
        return params

    def _row_payload(self, entry: DiaryEntryRead) -> Dict[str, Any]:
        return entry.model_dump(mode="json", exclude={"sync_status"})

    async def create(self, data: DiaryEntryCreate, password: Optional[str] = None) -> DiaryEntryRead:
        if password:
            record = await asyncio.to_thread(entry_record.build_new_record, data, password, self.locale)
        else:
            record = entry_record.build_new_record(data, locale=self.locale)

        rows = await self.client.insert(self.entries_table, [self._row_payload(DiaryEntryRead(**record))])
        logger.info(f"Created remote entry {record['id']} (encrypted={record['is_encrypted']})")
        return self._to_entry(rows[0]) if rows else DiaryEntryRead(**record)

    async def read(self, entry_id: str) -> DiaryEntryRead:
        rows = await self.client.select(self.entries_table, self._by_id(entry_id))
        if not rows:
            raise NotFoundError("DiaryEntry", entry_id)
        return self._to_entry(rows[0])

    async def find(self, entry_id: str) -> Optional[DiaryEntryRead]:
        """Like read, but None instead of NotFoundError."""
        try:
            return await self.read(entry_id)
        except NotFoundError:
            return None

    async def list(self, filters: Optional[EntryFilters] = None) -> List[DiaryEntryRead]:
        filters = filters or EntryFilters()
        params = self._filter_params(filters)
        params.append(("order", ORDER))
        if filters.skip:
            params.append(("offset", str(filters.skip)))
        if filters.limit is not None:
            params.append(("limit", str(filters.limit)))

        rows = await self.client.select(self.entries_table, params)
        return [self._to_entry(row) for row in rows]

    async def count(self, filters: Optional[EntryFilters] = None) -> int:
        return await self.client.count(self.entries_table, self._filter_params(filters or EntryFilters()))

    async def update(
        self, entry_id: str, changes: DiaryEntryUpdate, password: Optional[str] = None
    ) -> DiaryEntryRead:
        current = await self.read(entry_id)
        if password:
            values = await asyncio.to_thread(entry_record.merge_update, current, changes, password, self.locale)
        else:
            values = entry_record.merge_update(current, changes, locale=self.locale)

        rows = await self.client.update(self.entries_table, self._by_id(entry_id), jsonable_encoder(values))
        if not rows:
            raise NotFoundError("DiaryEntry", entry_id)
        logger.info(f"Updated remote entry {entry_id}")
        return self._to_entry(rows[0])

    async def delete(self, entry_id: str) -> None:
        rows = await self.client.delete(self.entries_table, self._by_id(entry_id))
        if not rows:
            raise NotFoundError("DiaryEntry", entry_id)
        logger.info(f"Deleted remote entry {entry_id}")

    async def delete_all(self) -> int:
        # PostgREST refuses unfiltered deletes
        rows = await self.client.delete(self.entries_table, [("id", "not.is.null")])
        logger.warning(f"Deleted all remote entries ({len(rows)})")
        return len(rows)

    async def upsert(self, entry: DiaryEntryRead) -> DiaryEntryRead:
        """Write an entry verbatim, keeping its id, timestamps and derived fields."""
        rows = await self.client.insert(self.entries_table, [self._row_payload(entry)], upsert=True)
        return self._to_entry(rows[0]) if rows else entry

    async def list_tags(self) -> List[DiaryTagRead]:
        tags = await self.client.select(self.tags_table, [("order", "name.asc")])
        entry_tags = await self.client.select(self.entries_table, columns="tags")
        usage = count_tag_usage([row.get("tags") or [] for row in entry_tags])
        return [DiaryTagRead(**tag, usage_count=usage.get(tag["name"], 0)) for tag in tags]

    async def create_tag(self, data: DiaryTagCreate) -> DiaryTagRead:
        name = data.name.strip()
        if not name:
            raise ValidationError("name", "name is required")
        if await self.client.select(self.tags_table, [("name", f"eq.{name}")], columns="id"):
            raise ValidationError("name", f"Tag '{name}' already exists")

        now = utcnow()
        tag = DiaryTagRead(
            id=generate_id(),
            name=name,
            color=data.color,
            description=data.description,
            created_at=now,
            updated_at=now,
        )
        rows = await self.client.insert(
            self.tags_table, [tag.model_dump(mode="json", exclude={"usage_count"})]
        )
        return DiaryTagRead(**rows[0]) if rows else tag

    async def delete_tag(self, tag_id: str) -> None:
        rows = await self.client.delete(self.tags_table, [("id", f"eq.{tag_id}")])
        if not rows:
            raise NotFoundError("DiaryTag", tag_id)

    async def health_check(self) -> bool:
        return await self.client.health_check(self.entries_table)
