"""
Reconciliation report schema.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SyncFailure(BaseModel):
    entry_id: str
    error: str


class SyncReport(BaseModel):
    status: str = "completed"  # completed, skipped, unavailable
    pushed: int = 0
    deleted: int = 0
    already_synced: int = 0
    failed: List[SyncFailure] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def remote_writes(self) -> int:
        return self.pushed + self.deleted
