"""Estimation service: daily return series, mean returns, and covariance.

Return series are keyed by ISO date so that assets with different trading
calendars (holidays, data gaps) are aligned by date, never by position.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np
import pandas as pd

from src.domain.models.market_data import PricePoint, ReturnPoint, ReturnSeries

logger = logging.getLogger(__name__)

_MIN_PAIRED_OBSERVATIONS = 2


class EstimationService:
    """Pure computation service for return series and parameter estimation.

    Responsibilities (single, focused):
    - Convert an unordered price history into a daily simple-return series.
    - Estimate the per-asset mean daily return vector (μ).
    - Estimate the date-aligned covariance matrix (Σ).

    The class is stateless; all inputs are passed per-call.
    """

    def sort_prices(self, prices: Sequence[PricePoint]) -> list[PricePoint]:
        """Return prices ascending by date (stable for equal dates)."""
        return sorted(prices, key=lambda p: p.bar_date)

    def build_return_series(
        self,
        symbol: str,
        prices: Sequence[PricePoint],
    ) -> ReturnSeries:
        """Compute simple daily returns from a price history.

        r_t = (P_t − P_{t−1}) / P_{t−1}, keyed by the date of P_t.

        Prices are sorted ascending first (arrival order is not trusted).
        A pair is skipped (not zero-filled) when P_{t−1} is non-finite or
        exactly zero.  Fewer than two prices gives an empty series.

        Args:
            symbol: Asset symbol carried on the resulting series.
            prices: Price bars in any order.

        Returns:
            ReturnSeries, possibly empty.
        """
        ordered = self.sort_prices(prices)
        points: list[ReturnPoint] = []
        skipped = 0

        for previous, current in zip(ordered, ordered[1:]):
            if not math.isfinite(previous.close) or previous.close == 0:
                skipped += 1
                continue
            points.append(
                ReturnPoint(
                    bar_date=current.bar_date,
                    daily_return=(current.close - previous.close) / previous.close,
                )
            )

        if skipped:
            logger.debug("%s: skipped %d return(s) with unusable previous close", symbol, skipped)
        return ReturnSeries(symbol=symbol, points=points)

    def compute_mean_returns(self, series: Sequence[ReturnSeries]) -> np.ndarray:
        """Arithmetic mean daily return per series; 0.0 for an empty series.

        Each mean uses the asset's full series (no date alignment).

        Returns:
            1-D numpy array of shape (n_assets,).
        """
        return np.array(
            [float(np.mean(s.values)) if len(s) > 0 else 0.0 for s in series],
            dtype=float,
        )

    def compute_covariance(self, a: ReturnSeries, b: ReturnSeries) -> float:
        """Sample covariance of two series over their common dates.

        Only dates present in both series are paired (inner join).  The means
        in Σ(x − x̄)(y − ȳ) / (n − 1) are taken over the paired values only,
        not over each asset's full series.

        Returns 0.0 when fewer than two dates are shared.
        """
        cov = a.to_series().cov(b.to_series(), min_periods=_MIN_PAIRED_OBSERVATIONS)
        return 0.0 if pd.isna(cov) else float(cov)

    def compute_covariance_matrix(self, series: Sequence[ReturnSeries]) -> np.ndarray:
        """Symmetric covariance matrix Σ indexed by asset position.

        Off-diagonal: pairwise covariance over the intersection of date keys
        (pandas pairwise-complete covariance, min_periods=2, else 0).
        Diagonal: ordinary sample variance of the full series (0 when the
        series has fewer than two observations).

        Build once per request and share it across every weight vector that
        is evaluated.

        Returns:
            2-D numpy array of shape (n_assets, n_assets).
        """
        n = len(series)
        if n == 0:
            return np.zeros((0, 0))

        frame = pd.concat([s.to_series() for s in series], axis=1, keys=range(n))
        matrix = (
            frame.cov(min_periods=_MIN_PAIRED_OBSERVATIONS)
            .reindex(index=range(n), columns=range(n))
            .fillna(0.0)
            .to_numpy(dtype=float, copy=True)
        )
        for i, s in enumerate(series):
            matrix[i, i] = _sample_variance(s.values)
        return matrix


def _sample_variance(values: np.ndarray) -> float:
    """Σ(x − x̄)² / (n − 1); 0.0 for n < 2 or a non-finite result."""
    if len(values) < 2:
        return 0.0
    variance = float(np.var(values, ddof=1))
    return variance if math.isfinite(variance) else 0.0
