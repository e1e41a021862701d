"""Forecasting service: linear price trend and sentiment-weighted forecast.

Linear trend (ordinary least squares of close on x = 0..n−1):
    slope     = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)
    intercept = (Σy − slope·Σx) / n
    R²        = 1 − SS_res / SS_tot,   confidence = clamp(R², 0, 1)
    P̂(n+i−1) = max(0, slope·(n+i−1) + intercept),   i = 1..days_ahead

Sentiment weighting (s̄ = mean of +1 / −1 / 0 over recent labels):
    P̂'  = max(0, P̂ · (1 + s̄ · adjustment))
    c'  = max(min_confidence, c · (0.8 + |s̄| · 0.2))

Neither forecast raises on thin data: the result is tagged UNAVAILABLE
with a reason instead.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

import numpy as np

from src.domain.models.enums import ForecastMethod, SentimentLabel
from src.domain.models.forecasting import ForecastConfig, ForecastPoint, ForecastResult
from src.domain.models.market_data import PricePoint

from .estimation import EstimationService

logger = logging.getLogger(__name__)


class ForecastingService:
    """Pure computation service for short-horizon price forecasts.

    The class is stateless; configuration is passed per-call.
    """

    def __init__(self, estimation: EstimationService | None = None) -> None:
        self._estimation = estimation or EstimationService()

    def forecast_trend(
        self,
        prices: Sequence[PricePoint],
        days_ahead: int | None = None,
        config: ForecastConfig | None = None,
    ) -> ForecastResult:
        """Extrapolate the OLS trend of the most recent closes.

        Args:
            prices: Price bars for one asset, any order.  Only the most recent
                config.price_lookback bars are used, oldest first.
            days_ahead: Number of calendar days to forecast (≥ 1);
                config.default_days_ahead when None.
            config: Forecast tunables; ForecastConfig.default() when None.

        Returns:
            AVAILABLE result with one LINEAR point per day, or UNAVAILABLE
            when fewer than config.min_price_points bars are supplied.
        """
        config = config or ForecastConfig.default()
        days_ahead = days_ahead if days_ahead is not None else config.default_days_ahead
        if days_ahead < 1:
            return ForecastResult.unavailable(f"days_ahead must be at least 1, got {days_ahead}.")

        recent = self._estimation.sort_prices(prices)[-config.price_lookback:]
        if len(recent) < config.min_price_points:
            logger.debug("Trend forecast unavailable: %d price point(s)", len(recent))
            return ForecastResult.unavailable(
                f"At least {config.min_price_points} price points are required for a "
                f"forecast, got {len(recent)}."
            )

        y = np.array([p.close for p in recent], dtype=float)
        if not np.all(np.isfinite(y)):
            logger.debug("Trend forecast unavailable: non-finite close in history")
            return ForecastResult.unavailable("Price history contains non-finite closes.")

        slope, intercept, r_squared = _fit_linear_trend(y)
        confidence = float(np.clip(r_squared, 0.0, 1.0))
        n = len(y)
        last_date = recent[-1].bar_date

        points = [
            ForecastPoint(
                forecast_date=last_date + timedelta(days=i),
                predicted_price=max(0.0, slope * (n + i - 1) + intercept),
                confidence=confidence,
                method=ForecastMethod.LINEAR,
            )
            for i in range(1, days_ahead + 1)
        ]
        return ForecastResult.available(points)

    def forecast_with_sentiment(
        self,
        prices: Sequence[PricePoint],
        sentiments: Sequence[SentimentLabel | str | None],
        days_ahead: int | None = None,
        config: ForecastConfig | None = None,
    ) -> ForecastResult:
        """Shift the linear trend forecast by recent news sentiment.

        Args:
            prices: Price bars for one asset, any order.
            sentiments: Sentiment labels, newest first; only the first
                config.sentiment_window are averaged.  Unrecognised
                labels score 0.
            days_ahead: Forecast horizon; config.default_days_ahead when None.
            config: Forecast tunables; ForecastConfig.default() when None.

        Returns:
            AVAILABLE result with SENTIMENT_WEIGHTED points, or UNAVAILABLE
            when there are no labels or the trend forecast is unavailable.
        """
        config = config or ForecastConfig.default()
        if not sentiments:
            logger.debug("Sentiment forecast unavailable: no sentiment labels")
            return ForecastResult.unavailable("No sentiment labels available for this asset.")

        trend = self.forecast_trend(prices, days_ahead, config)
        if not trend.is_available:
            return trend

        avg = average_sentiment(sentiments[: config.sentiment_window])
        price_factor = 1 + avg * config.sentiment_adjustment
        confidence_factor = 0.8 + abs(avg) * 0.2

        points = [
            ForecastPoint(
                forecast_date=p.forecast_date,
                predicted_price=max(0.0, p.predicted_price * price_factor),
                confidence=max(config.min_confidence, p.confidence * confidence_factor),
                method=ForecastMethod.SENTIMENT_WEIGHTED,
            )
            for p in trend.points
        ]
        return ForecastResult.available(points)


def average_sentiment(labels: Sequence[SentimentLabel | str | None]) -> float:
    """Mean score of the labels (+1 positive, −1 negative, 0 otherwise).

    Labels outside SentimentLabel (including None) score 0.
    """
    if not labels:
        return 0.0
    return sum(_label_score(label) for label in labels) / len(labels)


def _label_score(label: SentimentLabel | str | None) -> int:
    try:
        return SentimentLabel(label).score
    except ValueError:
        return 0


def _fit_linear_trend(y: np.ndarray) -> tuple[float, float, float]:
    """(slope, intercept, R²) of y against its index, via closed-form sums.

    A flat series (SS_tot = 0) is fitted exactly, so R² is 1.
    """
    n = len(y)
    x = np.arange(n, dtype=float)
    sum_x = float(x.sum())
    sum_y = float(y.sum())
    sum_xy = float(np.dot(x, y))
    sum_xx = float(np.dot(x, x))

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n

    fitted = slope * x + intercept
    ss_res = float(np.sum((y - fitted) ** 2))
    ss_tot = float(np.sum((y - sum_y / n) ** 2))
    r_squared = 1.0 - ss_res / ss_tot if ss_tot > 0 else 1.0
    return slope, intercept, r_squared
