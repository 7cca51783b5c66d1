"""
Sentiment analysis schemas.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field

from .diary_entry import Sentiment


class SentimentAnalyzeRequest(BaseModel):
    text: str


class SentimentResult(BaseModel):
    sentiment: Sentiment = Sentiment.NEUTRAL
    score: float = Field(0.5, ge=0.0, le=1.0)
    confidence: str = "low"
    raw_label: Optional[str] = None
    raw_score: Optional[float] = None
    error: Optional[str] = None


class SentimentStats(BaseModel):
    average: float = 0.5
    distribution: Dict[str, int] = Field(default_factory=dict)
    dominant: Sentiment = Sentiment.NEUTRAL
    confidence: str = "low"
    total: int = 0
