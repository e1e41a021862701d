"""Domain model package.

All domain objects are pure Python / Pydantic models with no I/O or
infrastructure dependencies.  Import from this package to avoid coupling
application code to individual module paths.
"""

from .enums import Availability, ForecastMethod, SentimentLabel
from .forecasting import ForecastConfig, ForecastPoint, ForecastResult, MarketComparison
from .holdings import Holding, Portfolio, WeightValidation
from .market_data import MarketIndex, MarketIndexSnapshot, PricePoint, ReturnPoint, ReturnSeries
from .optimization import (
    FrontierConfig,
    FrontierPoint,
    OptimizationResult,
    PortfolioMoments,
    PortfolioStats,
)

__all__ = [
    # enums
    "Availability",
    "ForecastMethod",
    "SentimentLabel",
    # market data
    "PricePoint",
    "ReturnPoint",
    "ReturnSeries",
    "MarketIndex",
    "MarketIndexSnapshot",
    # holdings
    "Holding",
    "Portfolio",
    "WeightValidation",
    # optimization
    "FrontierConfig",
    "PortfolioMoments",
    "FrontierPoint",
    "OptimizationResult",
    "PortfolioStats",
    # forecasting
    "ForecastConfig",
    "ForecastPoint",
    "ForecastResult",
    "MarketComparison",
]
