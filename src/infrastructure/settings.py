"""Environment-driven engine settings.

Every field can be overridden with an ANALYTICS_-prefixed environment
variable (or a .env file), e.g. ANALYTICS_MAX_SAMPLES=1000.  Domain services
never read the environment themselves; callers build FrontierConfig /
ForecastConfig from these settings and pass them per call.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.domain.models.forecasting import ForecastConfig
from src.domain.models.optimization import FrontierConfig


class EngineSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANALYTICS_", env_file=".env", extra="ignore")

    # Frontier sampler
    min_holdings: int = 2
    min_price_points: int = 45
    min_return_observations: int = 30
    frontier_price_lookback: int = 180
    max_samples: int = 500
    samples_per_asset: int = 160
    frontier_epsilon: float = 1e-4
    max_frontier_points: int = 40
    random_seed: int | None = None

    # Forecasting / market comparison
    forecast_price_lookback: int = 90
    forecast_min_price_points: int = 7
    sentiment_window: int = 10
    sentiment_adjustment: float = 0.05
    min_confidence: float = 0.1
    default_days_ahead: int = 30
    market_days_back: int = 30

    def frontier_config(self) -> FrontierConfig:
        return FrontierConfig(
            min_holdings=self.min_holdings,
            min_price_points=self.min_price_points,
            min_return_observations=self.min_return_observations,
            price_lookback=self.frontier_price_lookback,
            max_samples=self.max_samples,
            samples_per_asset=self.samples_per_asset,
            frontier_epsilon=self.frontier_epsilon,
            max_frontier_points=self.max_frontier_points,
        )

    def forecast_config(self) -> ForecastConfig:
        return ForecastConfig(
            price_lookback=self.forecast_price_lookback,
            min_price_points=self.forecast_min_price_points,
            sentiment_window=self.sentiment_window,
            sentiment_adjustment=self.sentiment_adjustment,
            min_confidence=self.min_confidence,
            default_days_ahead=self.default_days_ahead,
            market_days_back=self.market_days_back,
        )


settings = EngineSettings()
