"""
Diary tag model.

Usage counts are not stored; they are counted from live entries on read.
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class DiaryTag(BaseModel):
    """User-defined tag with display color."""

    __tablename__ = "diary_tags"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#007bff")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<DiaryTag(id={self.id}, name={self.name})>"
