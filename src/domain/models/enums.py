"""Domain enumerations for the portfolio analytics engine.

All string-valued enums use str mixin so they serialize cleanly to JSON
and remain comparable to plain strings (Pydantic default behaviour).
"""

from enum import Enum


class ForecastMethod(str, Enum):
    LINEAR = "linear"
    SENTIMENT_WEIGHTED = "sentimentWeighted"


class SentimentLabel(str, Enum):
    """Article-level sentiment supplied by the classification collaborator."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @property
    def score(self) -> int:
        """Numeric score used when averaging recent sentiment."""
        return {
            SentimentLabel.POSITIVE: 1,
            SentimentLabel.NEGATIVE: -1,
            SentimentLabel.NEUTRAL: 0,
        }[self]


class Availability(str, Enum):
    """Outcome tag for computations that degrade instead of raising."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
