"""Domain services package."""

from .estimation import EstimationService
from .forecasting import ForecastingService
from .market import MarketService
from .optimization import OptimizationService
from .portfolio import PortfolioService

__all__ = [
    "EstimationService",
    "ForecastingService",
    "MarketService",
    "OptimizationService",
    "PortfolioService",
]
