"""
Services module for business logic.

Includes:
- DiaryService: Application facade used by the API
- SyncService: Local/remote reconciliation
- SentimentService: Transformers-based sentiment tagging
- BackupService: Export and restore of entries and tags
"""

from .backup_service import BackupService
from .diary_service import DiaryService
from .sentiment_service import SentimentService
from .storage import LocalStorageAdapter, RemoteStorageAdapter, StorageAdapter, StorageAdapterFactory
from .sync_service import SyncService

__all__ = [
    "DiaryService",
    "SyncService",
    "SentimentService",
    "BackupService",
    "StorageAdapter",
    "LocalStorageAdapter",
    "RemoteStorageAdapter",
    "StorageAdapterFactory",
]
