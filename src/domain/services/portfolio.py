"""Portfolio service: weight handling, portfolio moments, and dashboard stats.

Portfolio moments (all daily, no annualisation):
    E[R_p] = Σ wᵢ μᵢ
    σ²_p   = Σᵢ Σⱼ wᵢ wⱼ Σᵢⱼ      (clamped to ≥ 0)
    σ_p    = √σ²_p
    Sharpe = E[R_p] / σ_p         (0 when σ_p = 0; no risk-free rate)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

import numpy as np

from src.domain.exceptions import InvalidWeightsError
from src.domain.models.holdings import Holding, Portfolio, WeightValidation
from src.domain.models.optimization import PortfolioMoments, PortfolioStats

from .estimation import EstimationService

logger = logging.getLogger(__name__)

_WEIGHT_SUM_TOLERANCE = 0.01   # validate_weights accepts |Σw − 1| ≤ 1 %
_EQUAL_WEIGHT_QUANTUM = Decimal("0.0001")
_STATS_PRICE_LOOKBACK = 120


class PortfolioService:
    """Pure computation service for portfolio weights and statistics.

    Responsibilities (single, focused):
    - Normalise raw weights (equal-weight fallback when they sum to zero).
    - Compute expected return, variance, volatility and Sharpe ratio.
    - Produce the equal-weight allocation of a portfolio.
    - Validate user weight maps and compute dashboard statistics.

    The class is stateless; all inputs are passed per-call.
    """

    def __init__(self, estimation: EstimationService | None = None) -> None:
        self._estimation = estimation or EstimationService()

    # ------------------------------------------------------------------ #
    # Weights                                                              #
    # ------------------------------------------------------------------ #

    def normalise_weights(self, raw: Sequence[float] | np.ndarray) -> np.ndarray:
        """Scale raw weights to sum to 1; equal weights when the sum is 0.

        Raises:
            InvalidWeightsError: if any weight is NaN or ±inf.
        """
        return normalise_weights(raw)

    def normalise_weight_map(self, weights: Mapping[str, float]) -> dict[str, float]:
        """Normalise a symbol → weight map; an all-zero map is returned unchanged."""
        total = sum(weights.values())
        if total == 0:
            return dict(weights)
        return {symbol: w / total for symbol, w in weights.items()}

    def validate_weights(self, weights: Mapping[str, float]) -> WeightValidation:
        """Check that weights sum to 1 within a 1 % tolerance."""
        total = float(sum(weights.values()))
        if abs(total - 1.0) > _WEIGHT_SUM_TOLERANCE:
            return WeightValidation(
                is_valid=False,
                total=total,
                message=f"Weights should sum to 1.0, currently {total:.3f}",
            )
        return WeightValidation(is_valid=True, total=total, message="Weights are valid")

    def equal_weight(self, portfolio: Portfolio) -> Portfolio | None:
        """Assign round(1/N, 4) to every holding.

        Returns a new Portfolio; None when the portfolio has no holdings.
        Idempotent: an equal-weighted portfolio comes back unchanged.
        """
        n = len(portfolio.holdings)
        if n == 0:
            return None
        weight = float((Decimal(1) / Decimal(n)).quantize(_EQUAL_WEIGHT_QUANTUM, ROUND_HALF_UP))
        holdings = [h.model_copy(update={"raw_weight": weight}) for h in portfolio.holdings]
        return portfolio.model_copy(update={"holdings": holdings})

    # ------------------------------------------------------------------ #
    # Moments                                                              #
    # ------------------------------------------------------------------ #

    def compute_moments(
        self,
        weights: Sequence[float] | np.ndarray,
        mean_returns: np.ndarray,
        covariance: np.ndarray,
    ) -> PortfolioMoments:
        """Expected return, variance, volatility and Sharpe for raw weights.

        Weights are normalised first.  Variance is clamped to ≥ 0 to absorb
        floating-point cancellation (a non-finite variance counts as 0).

        The Sharpe ratio here is E[R_p] / σ_p: no risk-free rate is
        subtracted.  Callers wanting excess-return Sharpe must adjust μ.

        Args:
            weights: Raw weights aligned to mean_returns, shape (n,).
            mean_returns: Mean daily return per asset, shape (n,).
            covariance: Covariance matrix, shape (n, n).

        Raises:
            InvalidWeightsError: on non-finite weights or a length mismatch.
        """
        w = normalise_weights(weights)
        mean_returns = np.asarray(mean_returns, dtype=float)
        covariance = np.asarray(covariance, dtype=float)
        if w.shape != mean_returns.shape or covariance.shape != (len(w), len(w)):
            raise InvalidWeightsError(
                f"weights of length {len(w)} do not match {len(mean_returns)} assets"
            )
        expected_return, variance, volatility = portfolio_moments(w, mean_returns, covariance)
        sharpe = expected_return / volatility if volatility > 0 else 0.0
        return PortfolioMoments(
            expected_return=expected_return,
            variance=variance,
            volatility=volatility,
            sharpe_ratio=sharpe,
        )

    # ------------------------------------------------------------------ #
    # Dashboard statistics                                                 #
    # ------------------------------------------------------------------ #

    def calculate_stats(
        self,
        holdings: Sequence[Holding],
        price_lookback: int = _STATS_PRICE_LOOKBACK,
    ) -> PortfolioStats:
        """Statistics of the holdings at their current weights.

        Only the most recent price_lookback bars of each holding are used.
        Empty holdings give zeroed stats.  Holdings with no usable returns
        contribute a zero mean and zero (co)variance rather than failing.
        """
        if not holdings:
            return PortfolioStats.empty()

        estimation = self._estimation
        raw = [h.raw_weight for h in holdings]
        weights = normalise_weights(raw)

        recent = [estimation.sort_prices(h.price_history)[-price_lookback:] for h in holdings]
        series = [
            estimation.build_return_series(h.asset_symbol, prices)
            for h, prices in zip(holdings, recent)
        ]
        mu = estimation.compute_mean_returns(series)
        sigma = estimation.compute_covariance_matrix(series)

        latest = [prices[-1].close if prices else 0.0 for prices in recent]
        total_value = float(np.dot(weights, latest))

        lengths = [len(s) for s in series if len(s) > 0]
        observation_count = min(lengths) if lengths else 0

        moments = self.compute_moments(weights, mu, sigma)
        return PortfolioStats(
            total_value=total_value,
            expected_return=moments.expected_return,
            variance=moments.variance,
            volatility=moments.volatility,
            sharpe_ratio=moments.sharpe_ratio,
            weight_sum=float(sum(raw)),
            observation_count=observation_count,
            mean_returns={h.asset_symbol: float(m) for h, m in zip(holdings, mu)},
        )


# ─────────────────────────────────────────────────────────────────────────── #
# Module-level helpers (shared with the frontier sampler)                      #
# ─────────────────────────────────────────────────────────────────────────── #


def normalise_weights(raw: Sequence[float] | np.ndarray) -> np.ndarray:
    """Raw weights → weights summing to 1 (equal weights if Σ raw = 0).

    A negative raw sum is divided through like any other, so the result
    still sums to 1 and every weight flips sign.
    """
    w = np.asarray(raw, dtype=float)
    if not np.all(np.isfinite(w)):
        raise InvalidWeightsError("weights must be finite numbers")
    if len(w) == 0:
        return w
    total = float(np.sum(w))
    if total == 0:
        return np.full(len(w), 1.0 / len(w))
    return w / total


def portfolio_moments(
    w: np.ndarray,
    mean_returns: np.ndarray,
    covariance: np.ndarray,
) -> tuple[float, float, float]:
    """(expected return, clamped variance, volatility) for normalised weights."""
    expected_return = float(np.dot(w, mean_returns))
    variance = float(w @ covariance @ w)
    variance = max(variance, 0.0) if math.isfinite(variance) else 0.0
    return expected_return, variance, math.sqrt(variance)
