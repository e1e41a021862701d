"""Optimization domain models.

FrontierConfig      — tunables for the Monte-Carlo frontier sampler
PortfolioMoments    — return / risk statistics of one weight vector
FrontierPoint       — one retained Pareto-efficient sample
OptimizationResult  — max-Sharpe / min-variance weights plus the frontier
PortfolioStats      — dashboard statistics for a portfolio's current weights
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Default sampler parameters
_DEFAULT_MIN_PRICE_POINTS = 45
_DEFAULT_MIN_RETURN_OBSERVATIONS = 30
_DEFAULT_MAX_SAMPLES = 500
_DEFAULT_SAMPLES_PER_ASSET = 160
_DEFAULT_FRONTIER_EPSILON = 1e-4
_DEFAULT_MAX_FRONTIER_POINTS = 40


class FrontierConfig(BaseModel):
    """Tunable parameters for one frontier-sampling run.

    min_holdings            — fewer holdings is a user error
    min_price_points        — per-asset minimum of sorted price bars
    min_return_observations — per-asset minimum of computed daily returns
    price_lookback          — only the most recent N bars of each asset are used
    max_samples / samples_per_asset
                            — random candidates = min(max_samples, n · samples_per_asset)
    frontier_epsilon        — tolerance below the running best return
    max_frontier_points     — frontier is truncated to this many points
    """

    model_config = ConfigDict(frozen=True)

    min_holdings: int = Field(default=2, ge=2)
    min_price_points: int = Field(default=_DEFAULT_MIN_PRICE_POINTS, ge=2)
    min_return_observations: int = Field(default=_DEFAULT_MIN_RETURN_OBSERVATIONS, ge=1)
    price_lookback: int = Field(default=180, ge=2)
    max_samples: int = Field(default=_DEFAULT_MAX_SAMPLES, ge=0)
    samples_per_asset: int = Field(default=_DEFAULT_SAMPLES_PER_ASSET, ge=0)
    frontier_epsilon: float = Field(default=_DEFAULT_FRONTIER_EPSILON, ge=0.0)
    max_frontier_points: int = Field(default=_DEFAULT_MAX_FRONTIER_POINTS, ge=1)

    def sample_count(self, n_assets: int) -> int:
        return min(self.max_samples, n_assets * self.samples_per_asset)

    @classmethod
    def default(cls) -> FrontierConfig:
        return cls()


class PortfolioMoments(BaseModel):
    """Expected return, variance, volatility and Sharpe ratio of a weight vector.

    All figures are daily (no annualisation). sharpe_ratio is
    expected_return / volatility with no risk-free rate subtracted, and 0
    when volatility is 0.
    """

    model_config = ConfigDict(frozen=True)

    expected_return: float
    variance: float = Field(ge=0.0)
    volatility: float = Field(ge=0.0)
    sharpe_ratio: float


class FrontierPoint(BaseModel):
    """One efficient-frontier sample.

    weights maps asset symbol → normalised weight. The return figure is
    serialised under the key "return" (a Python keyword, hence the alias).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    risk: float = Field(ge=0.0)
    expected_return: float = Field(alias="return")
    weights: dict[str, float]


class OptimizationResult(BaseModel):
    """Result of one frontier-sampling run for a portfolio.

    One result is kept per portfolio; the persistence collaborator replaces
    the previous one on every run (upsert).
    efficient_frontier is sorted by non-decreasing risk.
    """

    model_config = ConfigDict(frozen=True)

    max_sharpe_weights: dict[str, float]
    min_variance_weights: dict[str, float]
    efficient_frontier: list[FrontierPoint]
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def _frontier_sorted_by_risk(self) -> OptimizationResult:
        risks = [p.risk for p in self.efficient_frontier]
        if any(b < a for a, b in zip(risks, risks[1:])):
            raise ValueError("efficient_frontier must be sorted by ascending risk")
        return self


class PortfolioStats(BaseModel):
    """Statistics of a portfolio at its current (normalised) weights.

    total_value       — Σ wᵢ · latest closeᵢ
    weight_sum        — sum of the raw (un-normalised) weights
    observation_count — length of the shortest non-empty return series
    mean_returns      — symbol → mean daily return
    """

    model_config = ConfigDict(frozen=True)

    total_value: float = 0.0
    expected_return: float = 0.0
    variance: float = Field(default=0.0, ge=0.0)
    volatility: float = Field(default=0.0, ge=0.0)
    sharpe_ratio: float = 0.0
    weight_sum: float = 0.0
    observation_count: int = Field(default=0, ge=0)
    mean_returns: dict[str, float] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> PortfolioStats:
        return cls()
