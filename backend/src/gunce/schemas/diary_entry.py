"""
Diary entry schemas for request/response validation.

Title and content emptiness is checked by the entry record model, which
reports the offending field; these schemas only bound lengths and ranges.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .base import BaseCreateSchema, BaseSchema, BaseUpdateSchema


class Sentiment(str, Enum):
    VERY_POSITIVE = "very_positive"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    VERY_NEGATIVE = "very_negative"


class SyncStatus(str, Enum):
    SYNCED = "synced"
    PENDING = "pending"
    DELETED = "deleted"


class DiaryEntryCreate(BaseCreateSchema):
    """Schema for creating a diary entry."""

    title: Optional[str] = Field(None, max_length=255, description="Entry title")
    content: Optional[str] = Field(None, description="Entry content (plaintext)")
    entry_date: Optional[date] = Field(None, description="Day the entry belongs to; defaults to today")
    tags: List[str] = Field(default_factory=list, description="Tag names")
    sentiment: Optional[Sentiment] = Field(None, description="Sentiment label; defaults to neutral")
    sentiment_score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Sentiment score in [0, 1]")
    weather: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    is_favorite: bool = False


class DiaryEntryCreateRequest(DiaryEntryCreate):
    """Create payload as sent over HTTP; entry_password encrypts the entry."""

    entry_password: Optional[str] = Field(None, min_length=1, description="Password to encrypt the entry with")


class DiaryEntryRestore(DiaryEntryCreate):
    """
    Entry as read back from a backup.

    Encrypted entries arrive without plaintext; their package and derived
    counts are taken verbatim.
    """

    encrypted_content: Optional[str] = None
    is_encrypted: bool = False
    word_count: Optional[int] = Field(None, ge=0)
    read_time: Optional[int] = Field(None, ge=0)


class DiaryEntryUpdate(BaseUpdateSchema):
    """Schema for updating a diary entry."""

    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    entry_date: Optional[date] = None
    tags: Optional[List[str]] = None
    sentiment: Optional[Sentiment] = None
    sentiment_score: Optional[float] = Field(None, ge=0.0, le=1.0)
    weather: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    is_favorite: Optional[bool] = None


class DiaryEntryUpdateRequest(DiaryEntryUpdate):
    """
    Update payload as sent over HTTP.

    entry_password encrypts the entry, and is required to change the content
    of an entry that is already encrypted.
    """

    entry_password: Optional[str] = Field(None, min_length=1)


class DiaryEntryRead(BaseSchema):
    """Schema for reading a diary entry."""

    title: str
    content: str
    encrypted_content: Optional[str] = None
    is_encrypted: bool = False
    entry_date: date
    day_of_week: str
    tags: List[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    sentiment_score: float = 0.5
    weather: Optional[str] = None
    location: Optional[str] = None
    is_favorite: bool = False
    word_count: int = 0
    read_time: int = 0
    sync_status: Optional[SyncStatus] = None


class DiaryEntryListResponse(BaseSchema):
    """Schema for diary entry list response."""

    total: int
    items: list[DiaryEntryRead]


class EntryFilters(BaseModel):
    """Filters accepted by every storage adapter's list operation."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    tag: Optional[str] = None
    sentiment: Optional[Sentiment] = None
    is_favorite: Optional[bool] = None
    search: Optional[str] = None
    skip: int = Field(0, ge=0)
    limit: Optional[int] = Field(None, ge=1, le=1000)
