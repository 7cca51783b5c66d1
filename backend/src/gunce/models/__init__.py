"""
SQLAlchemy ORM models for the local diary store.

Exports all models for easy importing.
"""

from .base import Base, BaseModel, UTCDateTime, generate_id, utcnow
from .diary_entry import DiaryEntry
from .diary_tag import DiaryTag

__all__ = [
    "Base",
    "BaseModel",
    "UTCDateTime",
    "DiaryEntry",
    "DiaryTag",
    "generate_id",
    "utcnow",
]
