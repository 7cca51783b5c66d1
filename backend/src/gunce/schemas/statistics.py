"""
Diary statistics schema.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from .sentiment import SentimentStats


class TagUsage(BaseModel):
    name: str
    count: int


class DiaryStatistics(BaseModel):
    total_entries: int = 0
    total_words: int = 0
    average_word_count: float = 0.0
    total_read_time: int = 0
    favorite_count: int = 0
    encrypted_count: int = 0
    first_entry_date: Optional[date] = None
    last_entry_date: Optional[date] = None
    top_tags: List[TagUsage] = Field(default_factory=list)
    sentiment: SentimentStats = Field(default_factory=SentimentStats)
