"""
Sentiment analysis for diary entries.

Uses a Hugging Face transformers pipeline (multilingual 1-5 star model by
default). The model is loaded on first use in a worker thread; transformers
is an optional dependency (the ``sentiment`` extra).
"""

import asyncio
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..core.config import config
from ..core.exceptions import SentimentError
from ..core.logging import get_logger
from ..schemas.diary_entry import DiaryEntryRead, Sentiment
from ..schemas.sentiment import SentimentResult, SentimentStats

logger = get_logger(__name__)

POSITIVE_LABELS = ("5 stars", "4 stars", "POSITIVE")
NEGATIVE_LABELS = ("2 stars", "1 star", "NEGATIVE")
STRONG_SCORE = 0.8


def confidence_level(score: float) -> str:
    if score >= 0.8:
        return "high"
    if score >= 0.6:
        return "medium"
    return "low"


def normalize_prediction(prediction: Dict[str, Any]) -> SentimentResult:
    """
    Map a raw pipeline prediction ({"label", "score"}) to the diary scale.

    Positive labels land in (0.5, 1], negative in [0, 0.5), anything else at 0.5.
    """
    label = prediction.get("label", "")
    score = float(prediction.get("score", 0.0))

    if label in POSITIVE_LABELS:
        sentiment = Sentiment.VERY_POSITIVE if score > STRONG_SCORE else Sentiment.POSITIVE
        normalized = min(0.5 + score * 0.5, 1.0)
    elif label in NEGATIVE_LABELS:
        sentiment = Sentiment.VERY_NEGATIVE if score > STRONG_SCORE else Sentiment.NEGATIVE
        normalized = max(0.5 - score * 0.5, 0.0)
    else:
        sentiment = Sentiment.NEUTRAL
        normalized = 0.5

    return SentimentResult(
        sentiment=sentiment,
        score=round(normalized, 3),
        confidence=confidence_level(score),
        raw_label=label,
        raw_score=round(score, 3),
    )


def calculate_sentiment_stats(results: Iterable[SentimentResult]) -> SentimentStats:
    results = list(results)
    if not results:
        return SentimentStats()

    distribution = {sentiment.value: 0 for sentiment in Sentiment}
    total_score = 0.0
    high_confidence = 0
    for result in results:
        distribution[result.sentiment.value] += 1
        total_score += result.score
        if result.confidence == "high":
            high_confidence += 1

    dominant = Sentiment.VERY_POSITIVE.value
    for name, count in distribution.items():
        if count >= distribution[dominant]:
            dominant = name

    high_ratio = high_confidence / len(results)
    if high_ratio >= 0.5:
        overall = "high"
    elif high_ratio >= 0.3:
        overall = "medium"
    else:
        overall = "low"

    return SentimentStats(
        average=round(total_score / len(results), 3),
        distribution=distribution,
        dominant=Sentiment(dominant),
        confidence=overall,
        total=len(results),
    )


def entry_sentiment(entry: DiaryEntryRead) -> SentimentResult:
    """Stored sentiment of an entry; confidence is recovered from the score's distance to neutral."""
    return SentimentResult(
        sentiment=entry.sentiment,
        score=entry.sentiment_score,
        confidence=confidence_level(abs(entry.sentiment_score - 0.5) * 2),
    )


class SentimentService:
    """Lazy-loading wrapper around the transformers sentiment pipeline."""

    def __init__(self, model_name: Optional[str] = None, pipeline: Optional[Callable[..., Any]] = None):
        self.model_name = model_name or config.SENTIMENT_MODEL
        self._pipeline = pipeline
        self._load_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._pipeline is not None

    def _load_pipeline(self) -> Callable[..., Any]:
        try:
            from transformers import pipeline
        except ImportError as e:
            raise SentimentError("transformers is not installed; install the 'sentiment' extra") from e

        logger.info(f"Loading sentiment model {self.model_name}")
        try:
            return pipeline("sentiment-analysis", model=self.model_name)
        except Exception as e:
            raise SentimentError(f"Sentiment model could not be loaded: {e}") from e

    async def initialize(self) -> Callable[..., Any]:
        async with self._load_lock:
            if self._pipeline is None:
                self._pipeline = await asyncio.to_thread(self._load_pipeline)
                logger.info("Sentiment model loaded")
        return self._pipeline

    async def analyze(self, text: Optional[str]) -> SentimentResult:
        """
        Analyze text.

        Never raises: failures return a neutral result with ``error`` set.
        """
        if not text or not text.strip():
            return SentimentResult()

        try:
            pipeline = await self.initialize()
            predictions = await asyncio.to_thread(pipeline, text.strip(), truncation=True)
            if not predictions:
                raise SentimentError("Sentiment pipeline returned no prediction")
            result = normalize_prediction(predictions[0])
        except Exception as e:
            logger.error(f"Sentiment analysis failed: {e}")
            return SentimentResult(error=str(e))

        logger.debug(f"Sentiment: {result.sentiment.value} ({result.score})")
        return result

    async def analyze_batch(self, texts: List[str]) -> List[SentimentResult]:
        # One model call at a time
        return [await self.analyze(text) for text in texts]

    def status(self) -> Dict[str, Any]:
        return {"initialized": self.is_initialized, "model": self.model_name}

    def cleanup(self) -> None:
        self._pipeline = None
