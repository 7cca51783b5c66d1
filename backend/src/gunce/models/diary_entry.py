"""
Diary entry model for the local store.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import JSON, Boolean, Date, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class DiaryEntry(BaseModel):
    """Diary entry row, including the local-only sync_status marker."""

    __tablename__ = "diary_entries"
    __table_args__ = (
        Index("idx_diary_entry_date", "entry_date"),
        Index("idx_diary_sentiment", "sentiment"),
        Index("idx_diary_is_favorite", "is_favorite"),
        Index("idx_diary_sync_status", "sync_status"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    # Empty for encrypted entries; plaintext only lives in memory
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    encrypted_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_encrypted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    day_of_week: Mapped[str] = mapped_column(String(20), nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    sentiment: Mapped[str] = mapped_column(String(20), nullable=False, default="neutral")
    sentiment_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)
    weather: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    read_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # minutes

    sync_status: Mapped[str] = mapped_column(String(10), nullable=False, default="pending")  # synced, pending, deleted

    def __repr__(self) -> str:
        """String representation."""
        return f"<DiaryEntry(id={self.id}, title={self.title}, sync_status={self.sync_status})>"
