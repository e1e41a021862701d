"""Market service: company vs. index performance and index snapshots.

Period return over a trailing window (newest first):
    R = (P_newest − P_oldest) / P_oldest      (simple, not compounded)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from src.domain.models.forecasting import ForecastConfig, MarketComparison
from src.domain.models.market_data import MarketIndex, MarketIndexSnapshot, PricePoint

logger = logging.getLogger(__name__)


class MarketService:
    """Pure computation service for market-relative performance.

    Nothing here raises on thin data; a company with too little history
    gives a zeroed, UNAVAILABLE comparison.
    """

    def compare_with_market(
        self,
        company_prices: Sequence[PricePoint],
        indices: Sequence[MarketIndex],
        days_back: int | None = None,
        config: ForecastConfig | None = None,
    ) -> MarketComparison:
        """Compare the company's trailing return with every tracked index.

        Each series is cut to its days_back + 1 most recent bars.  An index
        with fewer than two bars records a return of 0 and is not ranked.
        Ties are neither out- nor under-performers.

        Args:
            company_prices: Company price bars, any order.
            indices: Tracked market indices with their bars.
            days_back: Window length in bars; config.market_days_back when None.
            config: Tunables; ForecastConfig.default() when None.
        """
        config = config or ForecastConfig.default()
        days_back = days_back if days_back is not None else config.market_days_back
        if days_back < 1:
            return MarketComparison.unavailable(f"days_back must be at least 1, got {days_back}.")

        company_return = self.period_return(company_prices, days_back)
        if company_return is None:
            logger.debug("Market comparison unavailable: insufficient company history")
            return MarketComparison.unavailable(
                "At least two usable company price points are required for a comparison."
            )

        market_returns: dict[str, float] = {}
        outperformers: list[str] = []
        underperformers: list[str] = []

        for index in indices:
            index_return = self.period_return(index.prices, days_back)
            if index_return is None:
                market_returns[index.symbol] = 0.0
                continue

            market_returns[index.symbol] = index_return
            if company_return > index_return:
                outperformers.append(index.symbol)
            elif company_return < index_return:
                underperformers.append(index.symbol)

        return MarketComparison(
            company_return=company_return,
            market_returns=market_returns,
            outperformers=outperformers,
            underperformers=underperformers,
        )

    def period_return(self, prices: Sequence[PricePoint], days_back: int) -> float | None:
        """Simple return across the days_back + 1 most recent bars.

        None when days_back < 1, when there are fewer than two bars, or when
        the oldest close in the window is zero or non-finite.
        """
        if days_back < 1:
            return None
        window = _newest_first(prices)[: days_back + 1]
        if len(window) < 2:
            return None
        newest, oldest = window[0].close, window[-1].close
        if not math.isfinite(oldest) or oldest == 0:
            return None
        return (newest - oldest) / oldest

    def summarise_indices(self, indices: Sequence[MarketIndex]) -> list[MarketIndexSnapshot]:
        """Latest close and day-over-day change for each index, by symbol."""
        snapshots: list[MarketIndexSnapshot] = []
        for index in sorted(indices, key=lambda i: i.symbol):
            ordered = _newest_first(index.prices)
            current = ordered[0].close if ordered else 0.0
            previous = ordered[1].close if len(ordered) > 1 else None

            change = current - previous if previous is not None else 0.0
            change_percent = change / previous * 100 if previous else 0.0
            snapshots.append(
                MarketIndexSnapshot(
                    symbol=index.symbol,
                    name=index.name,
                    current_price=current,
                    change=change,
                    change_percent=change_percent,
                )
            )
        return snapshots


def _newest_first(prices: Sequence[PricePoint]) -> list[PricePoint]:
    return sorted(prices, key=lambda p: p.bar_date, reverse=True)
