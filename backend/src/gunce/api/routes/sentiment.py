"""API routes for sentiment analysis."""

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends

from ...schemas.sentiment import SentimentAnalyzeRequest, SentimentResult
from ...services.sentiment_service import SentimentService
from ..deps import DiaryServiceDep, get_sentiment_service

router = APIRouter(prefix="/api/v1/sentiment", tags=["Sentiment"])


@router.post("/analyze", response_model=SentimentResult)
async def analyze(request: SentimentAnalyzeRequest, service: DiaryServiceDep):
    """Analyze text; failures come back as a neutral result with an error message."""
    return await service.analyze_sentiment(request.text)


@router.get("/status")
async def sentiment_status(
    sentiment: Annotated[Optional[SentimentService], Depends(get_sentiment_service)],
) -> Dict[str, Any]:
    if sentiment is None:
        return {"initialized": False, "model": None}
    return sentiment.status()
