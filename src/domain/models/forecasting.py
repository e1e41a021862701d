"""Forecasting and market-comparison domain models.

ForecastConfig   — tunables for trend / sentiment forecasts and comparisons
ForecastPoint    — one predicted close for a future calendar day
ForecastResult   — tagged outcome: available points, or the reason there are none
MarketComparison — company trailing return against tracked market indices

Forecasts and comparisons never raise on thin data. Instead the result is
tagged UNAVAILABLE with a plain-language reason so callers can tell
"no data" apart from a computed answer.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import Availability, ForecastMethod


class ForecastConfig(BaseModel):
    """Tunable parameters for forecasting and market comparison.

    price_lookback       — most recent bars fed to the regression
    min_price_points     — fewer bars gives an unavailable forecast
    sentiment_window     — most recent sentiment labels averaged
    sentiment_adjustment — max relative price shift at |avg sentiment| = 1
    min_confidence       — floor applied to sentiment-weighted confidence
    default_days_ahead   — horizon used when the caller gives none
    market_days_back     — trailing window for market comparison
    """

    model_config = ConfigDict(frozen=True)

    price_lookback: int = Field(default=90, ge=2)
    min_price_points: int = Field(default=7, ge=2)
    sentiment_window: int = Field(default=10, ge=1)
    sentiment_adjustment: float = Field(default=0.05, ge=0.0, lt=1.0)
    min_confidence: float = Field(default=0.1, ge=0.0, le=1.0)
    default_days_ahead: int = Field(default=30, ge=1)
    market_days_back: int = Field(default=30, ge=1)

    @classmethod
    def default(cls) -> ForecastConfig:
        return cls()


class ForecastPoint(BaseModel):
    """Predicted close for one future calendar day."""

    model_config = ConfigDict(frozen=True)

    forecast_date: date
    predicted_price: float = Field(ge=0.0)
    confidence: float = Field(ge=0.0, le=1.0)
    method: ForecastMethod


class ForecastResult(BaseModel):
    """Tagged forecast outcome.

    Invariants (enforced by validator):
      status = AVAILABLE    → reason is None
      status = UNAVAILABLE  → reason is a non-empty string and points is empty
    """

    model_config = ConfigDict(frozen=True)

    status: Availability
    points: list[ForecastPoint] = Field(default_factory=list)
    reason: str | None = None

    @model_validator(mode="after")
    def _status_and_reason_consistent(self) -> ForecastResult:
        if self.status == Availability.AVAILABLE:
            if self.reason is not None:
                raise ValueError("reason must be None when status is AVAILABLE")
        else:
            if not self.reason:
                raise ValueError("reason is required (non-empty) when status is UNAVAILABLE")
            if self.points:
                raise ValueError("points must be empty when status is UNAVAILABLE")
        return self

    @property
    def is_available(self) -> bool:
        return self.status == Availability.AVAILABLE

    @classmethod
    def available(cls, points: list[ForecastPoint]) -> ForecastResult:
        return cls(status=Availability.AVAILABLE, points=points)

    @classmethod
    def unavailable(cls, reason: str) -> ForecastResult:
        return cls(status=Availability.UNAVAILABLE, reason=reason)


class MarketComparison(BaseModel):
    """Company trailing return compared with each tracked index.

    Returns are simple (non-compounded) over the window. Ties with an index
    put it in neither list. An UNAVAILABLE comparison is fully zeroed.
    """

    model_config = ConfigDict(frozen=True)

    company_return: float = 0.0
    market_returns: dict[str, float] = Field(default_factory=dict)
    outperformers: list[str] = Field(default_factory=list)
    underperformers: list[str] = Field(default_factory=list)
    status: Availability = Availability.AVAILABLE
    reason: str | None = None

    @property
    def is_available(self) -> bool:
        return self.status == Availability.AVAILABLE

    @classmethod
    def unavailable(cls, reason: str) -> MarketComparison:
        return cls(status=Availability.UNAVAILABLE, reason=reason)
