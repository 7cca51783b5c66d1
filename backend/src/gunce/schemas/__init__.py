"""
Pydantic schemas for request/response validation.

Exports all schemas for easy importing.
"""

from .auth import (
    GateStatus,
    PasswordClearRequest,
    PasswordSetRequest,
    PasswordStrengthRequest,
    PasswordStrengthResponse,
    TokenResponse,
    UnlockRequest,
)
from .backup import BACKUP_FORMAT_VERSION, BackupDocument, RestoreReport
from .base import BaseCreateSchema, BaseSchema, BaseUpdateSchema
from .diary_entry import (
    DiaryEntryCreate,
    DiaryEntryCreateRequest,
    DiaryEntryListResponse,
    DiaryEntryRead,
    DiaryEntryRestore,
    DiaryEntryUpdate,
    DiaryEntryUpdateRequest,
    EntryFilters,
    Sentiment,
    SyncStatus,
)
from .diary_tag import DiaryTagCreate, DiaryTagRead
from .sentiment import SentimentAnalyzeRequest, SentimentResult, SentimentStats
from .settings import UserSettings, UserSettingsUpdate
from .statistics import DiaryStatistics, TagUsage
from .sync import SyncFailure, SyncReport

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "DiaryEntryCreate",
    "DiaryEntryCreateRequest",
    "DiaryEntryRestore",
    "DiaryEntryUpdate",
    "DiaryEntryUpdateRequest",
    "DiaryEntryRead",
    "DiaryEntryListResponse",
    "EntryFilters",
    "Sentiment",
    "SyncStatus",
    "DiaryTagCreate",
    "DiaryTagRead",
    "SentimentAnalyzeRequest",
    "SentimentResult",
    "SentimentStats",
    "DiaryStatistics",
    "TagUsage",
    "SyncFailure",
    "SyncReport",
    "BackupDocument",
    "RestoreReport",
    "BACKUP_FORMAT_VERSION",
    "UserSettings",
    "UserSettingsUpdate",
    "PasswordSetRequest",
    "PasswordClearRequest",
    "UnlockRequest",
    "TokenResponse",
    "PasswordStrengthRequest",
    "PasswordStrengthResponse",
    "GateStatus",
]
