"""
Diary tag schemas.
"""

from typing import Optional

from pydantic import Field

from .base import BaseCreateSchema, BaseSchema


class DiaryTagCreate(BaseCreateSchema):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field("#007bff", pattern=r"^#[0-9a-fA-F]{6}$")
    description: Optional[str] = None


class DiaryTagRead(BaseSchema):
    """Tag with its usage count, computed from live entries at read time."""

    name: str
    color: str = "#007bff"
    description: Optional[str] = None
    usage_count: int = 0
