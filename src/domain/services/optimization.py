"""Portfolio optimization service: Monte-Carlo efficient frontier.

Pipeline for build_efficient_frontier:
  1. Check preconditions (≥ 2 holdings, enough history per holding).
  2. Estimate μ and Σ once; Σ is indexed by asset position and shared by
     every candidate, so the cost is O(samples · n²).
  3. Candidates: the portfolio's own weights plus random weight vectors.
  4. Sweep candidates by ascending risk to extract the frontier.
  5. Select max-Sharpe and min-variance weights from the full candidate pool.

All methods are pure computation with no persistence.  The command handler
hands the OptimizationResult to the persistence collaborator.

Random weights are drawn one uniform(0, 1) value per asset and rescaled to
sum to 1.  This is NOT a uniform draw over the simplex (it is biased away
from the corners).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from src.domain.exceptions import EmptyFrontierError, InsufficientHistoryError
from src.domain.models.holdings import Holding
from src.domain.models.market_data import ReturnSeries
from src.domain.models.optimization import FrontierConfig, FrontierPoint, OptimizationResult

from .estimation import EstimationService
from .portfolio import normalise_weights, portfolio_moments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Candidate:
    """One evaluated weight vector; weights aligned to the asset ordering."""

    weights: np.ndarray
    risk: float
    expected_return: float

    @property
    def sharpe(self) -> float:
        """return / risk, falling back to the raw return when risk is 0."""
        return self.expected_return / self.risk if self.risk > 0 else self.expected_return


class OptimizationService:
    """Pure computation service for Monte-Carlo frontier optimization.

    Responsibilities (single, focused):
      - Validate that a portfolio has enough holdings and history.
      - Sample candidate weight vectors and evaluate their risk / return.
      - Extract an epsilon-tolerant Pareto frontier.
      - Select the max-Sharpe and min-variance candidates.

    The class is stateless; configuration and the random source are passed
    per-call.
    """

    def __init__(self, estimation: EstimationService | None = None) -> None:
        self._estimation = estimation or EstimationService()

    # ─────────────────────────────────────────────────────────────────── #
    # Public API                                                           #
    # ─────────────────────────────────────────────────────────────────── #

    def build_efficient_frontier(
        self,
        holdings: Sequence[Holding],
        config: FrontierConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> OptimizationResult:
        """Sample portfolios and return the frontier plus selected weights.

        Args:
            holdings: Portfolio holdings in display order; raw weights.
            config: Sampler tunables; FrontierConfig.default() when None.
            rng: Random source.  Pass np.random.default_rng(seed) for
                reproducible output; an unseeded generator is used when None.

        Returns:
            OptimizationResult with the frontier sorted by ascending risk.

        Raises:
            InsufficientHistoryError: fewer than config.min_holdings holdings,
                or any holding short of price / return history.
            EmptyFrontierError: no candidate had a finite return and risk.
        """
        config = config or FrontierConfig.default()
        rng = rng if rng is not None else np.random.default_rng()

        series = self.check_history(holdings, config)
        symbols = [s.symbol for s in series]

        mu = self._estimation.compute_mean_returns(series)
        sigma = self._estimation.compute_covariance_matrix(series)

        candidates = self._evaluate_candidates(
            self._candidate_weights(holdings, config, rng), mu, sigma
        )
        if not candidates:
            raise EmptyFrontierError(
                "Unable to construct the efficient frontier: no candidate portfolio "
                "has a finite return and risk."
            )

        frontier = self._extract_frontier(candidates, config)
        max_sharpe = _select_max_sharpe(candidates)
        min_variance = _select_min_variance(candidates)

        logger.info(
            "Frontier built for %s: %d candidates, %d frontier points",
            ", ".join(symbols), len(candidates), len(frontier),
        )

        return OptimizationResult(
            max_sharpe_weights=_to_weight_map(symbols, max_sharpe.weights),
            min_variance_weights=_to_weight_map(symbols, min_variance.weights),
            efficient_frontier=[
                FrontierPoint(
                    risk=c.risk,
                    expected_return=c.expected_return,
                    weights=_to_weight_map(symbols, c.weights),
                )
                for c in frontier
            ],
        )

    def check_history(
        self,
        holdings: Sequence[Holding],
        config: FrontierConfig,
    ) -> list[ReturnSeries]:
        """Build return series, raising if any precondition is violated.

        Each holding is limited to its most recent config.price_lookback bars.
        Every holding short of min_price_points bars or min_return_observations
        returns is collected, so the error names all of them at once.
        """
        if len(holdings) < config.min_holdings:
            raise InsufficientHistoryError.too_few_holdings(config.min_holdings, len(holdings))

        series: list[ReturnSeries] = []
        short: list[str] = []
        for holding in holdings:
            prices = self._estimation.sort_prices(holding.price_history)[-config.price_lookback:]
            if len(prices) < config.min_price_points:
                short.append(holding.asset_symbol)
                continue
            returns = self._estimation.build_return_series(holding.asset_symbol, prices)
            if len(returns) < config.min_return_observations:
                short.append(holding.asset_symbol)
                continue
            series.append(returns)

        if short:
            logger.warning("Insufficient price history for %s", ", ".join(short))
            raise InsufficientHistoryError.for_symbols(short)
        return series

    def _extract_frontier(
        self,
        candidates: Sequence[_Candidate],
        config: FrontierConfig,
    ) -> list[_Candidate]:
        """Epsilon-tolerant upper boundary of the risk / return cloud.

        Candidates are swept by ascending risk (stable sort).  A candidate is
        kept when its return is ≥ best − ε, where best is the highest return
        kept so far; the result is truncated to max_frontier_points.
        """
        frontier: list[_Candidate] = []
        best_return = -math.inf
        for candidate in sorted(candidates, key=lambda c: c.risk):
            if candidate.expected_return >= best_return - config.frontier_epsilon:
                frontier.append(candidate)
                best_return = max(best_return, candidate.expected_return)
        return frontier[: config.max_frontier_points]

    # ─────────────────────────────────────────────────────────────────── #
    # Candidate generation and evaluation                                  #
    # ─────────────────────────────────────────────────────────────────── #

    def _candidate_weights(
        self,
        holdings: Sequence[Holding],
        config: FrontierConfig,
        rng: np.random.Generator,
    ) -> list[np.ndarray]:
        """Current weights (when their raw sum is positive) then random draws."""
        n = len(holdings)
        candidates: list[np.ndarray] = []

        raw = np.array([h.raw_weight for h in holdings], dtype=float)
        if float(np.sum(raw)) > 0:
            candidates.append(normalise_weights(raw))

        for _ in range(config.sample_count(n)):
            candidates.append(normalise_weights(rng.random(n)))
        return candidates

    def _evaluate_candidates(
        self,
        weight_vectors: Sequence[np.ndarray],
        mu: np.ndarray,
        sigma: np.ndarray,
    ) -> list[_Candidate]:
        """Risk / return for each vector against the shared μ and Σ.

        Candidates with a non-finite return or risk are dropped.
        """
        candidates: list[_Candidate] = []
        for w in weight_vectors:
            expected_return, _, risk = portfolio_moments(w, mu, sigma)
            if not (math.isfinite(expected_return) and math.isfinite(risk)):
                continue
            candidates.append(_Candidate(weights=w, risk=risk, expected_return=expected_return))

        dropped = len(weight_vectors) - len(candidates)
        if dropped:
            logger.debug("Dropped %d candidate(s) with non-finite moments", dropped)
        return candidates


# ─────────────────────────────────────────────────────────────────────────── #
# Module-level helpers (no self state needed)                                  #
# ─────────────────────────────────────────────────────────────────────────── #


def _select_max_sharpe(candidates: Sequence[_Candidate]) -> _Candidate:
    """Highest return / risk over all candidates; the first one wins ties."""
    best = candidates[0]
    best_sharpe = -math.inf
    for candidate in candidates:
        if candidate.sharpe > best_sharpe:
            best, best_sharpe = candidate, candidate.sharpe
    return best


def _select_min_variance(candidates: Sequence[_Candidate]) -> _Candidate:
    """Lowest risk over all candidates; the first one wins ties."""
    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.risk < best.risk:
            best = candidate
    return best


def _to_weight_map(symbols: Sequence[str], weights: np.ndarray) -> dict[str, float]:
    """Symbol → weight; non-finite weights are reported as 0."""
    return {
        symbol: float(w) if math.isfinite(w) else 0.0
        for symbol, w in zip(symbols, weights)
    }
