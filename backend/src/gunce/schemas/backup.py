"""
Backup document schemas.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from .diary_entry import DiaryEntryRead
from .diary_tag import DiaryTagRead

BACKUP_FORMAT_VERSION = 1


class BackupDocument(BaseModel):
    version: int = BACKUP_FORMAT_VERSION
    exported_at: datetime
    entries: List[DiaryEntryRead] = Field(default_factory=list)
    tags: List[DiaryTagRead] = Field(default_factory=list)


class RestoreReport(BaseModel):
    restored_entries: int = 0
    restored_tags: int = 0
    skipped_tags: int = 0
