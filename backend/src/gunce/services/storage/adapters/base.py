from abc import ABC, abstractmethod
from typing import List, Optional

from ....schemas.diary_entry import DiaryEntryCreate, DiaryEntryRead, DiaryEntryUpdate, EntryFilters
from ....schemas.diary_tag import DiaryTagCreate, DiaryTagRead


class StorageAdapter(ABC):
    """
    Abstract base class for diary storage adapters.

    Both adapters raise the same errors: NotFoundError for ids that do not
    resolve to a live entry, ValidationError for bad input and StorageError
    for driver or network failures.
    """

    name: str = "storage"

    @abstractmethod
    async def create(self, data: DiaryEntryCreate, password: Optional[str] = None) -> DiaryEntryRead:
        """
        Validate, derive and store a new entry.

        Args:
            data: Create payload
            password: When given, the content is encrypted before storing

        Returns:
            The stored entry
        """
        pass

    @abstractmethod
    async def read(self, entry_id: str) -> DiaryEntryRead:
        """Return a live entry or raise NotFoundError."""
        pass

    @abstractmethod
    async def list(self, filters: Optional[EntryFilters] = None) -> List[DiaryEntryRead]:
        """Live entries, newest entry_date first."""
        pass

    @abstractmethod
    async def count(self, filters: Optional[EntryFilters] = None) -> int:
        """Number of live entries matching the filters, ignoring skip/limit."""
        pass

    @abstractmethod
    async def update(
        self, entry_id: str, changes: DiaryEntryUpdate, password: Optional[str] = None
    ) -> DiaryEntryRead:
        """Merge, re-validate and store a partial update."""
        pass

    @abstractmethod
    async def delete(self, entry_id: str) -> None:
        """Remove an entry from normal reads (soft delete locally, hard delete remotely)."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every live entry; returns how many were removed."""
        pass

    async def toggle_favorite(self, entry_id: str) -> DiaryEntryRead:
        current = await self.read(entry_id)
        return await self.update(entry_id, DiaryEntryUpdate(is_favorite=not current.is_favorite))

    @abstractmethod
    async def list_tags(self) -> List[DiaryTagRead]:
        """Defined tags with usage counts computed from live entries."""
        pass

    @abstractmethod
    async def create_tag(self, data: DiaryTagCreate) -> DiaryTagRead:
        pass

    @abstractmethod
    async def delete_tag(self, tag_id: str) -> None:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass


def count_tag_usage(entries_tags: List[List[str]]) -> dict:
    """Tag name -> number of entries carrying it."""
    counts: dict = {}
    for tags in entries_tags:
        for name in set(tags or []):
            counts[name] = counts.get(name, 0) + 1
    return counts
