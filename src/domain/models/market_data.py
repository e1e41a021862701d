"""Market data domain models.

PricePoint          — a single daily price observation for one asset.
ReturnPoint         — a daily simple return derived from two consecutive closes.
ReturnSeries        — the ordered return points of one asset.
MarketIndex         — a tracked market index with its recent price history.
MarketIndexSnapshot — latest level and day-over-day change of one index.

All are immutable value objects (no identity beyond their natural key).
"""

from __future__ import annotations

from datetime import date

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field


class PricePoint(BaseModel):
    """Daily price bar for one asset.

    close is the field used for every computation. It is not
    range-checked: the return builder skips predecessors whose close is zero
    or non-finite, so such bars must be representable.
    open / high / low / volume are carried for the presentation layer only.
    """

    model_config = ConfigDict(frozen=True)

    bar_date: date
    close: float
    open: float | None = None
    high: float | None = None
    low: float | None = None
    volume: int | None = Field(default=None, ge=0)


class ReturnPoint(BaseModel):
    """Simple daily return keyed by the later of the two bar dates.

    daily_return = (close_t − close_{t−1}) / close_{t−1}
    """

    model_config = ConfigDict(frozen=True)

    bar_date: date
    daily_return: float

    @property
    def date_key(self) -> str:
        """ISO date string used to align series across trading calendars."""
        return self.bar_date.isoformat()


class ReturnSeries(BaseModel):
    """Ordered (oldest first) daily returns for one asset.

    May be empty; fewer than two usable prices is a normal outcome and
    callers must check len() before using the series.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    points: list[ReturnPoint] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def values(self) -> np.ndarray:
        """Return values in series order, shape (n,)."""
        return np.array([p.daily_return for p in self.points], dtype=float)

    def to_series(self) -> pd.Series:
        """Date-keyed pandas Series; a repeated date key keeps its last value."""
        series = pd.Series(
            [p.daily_return for p in self.points],
            index=[p.date_key for p in self.points],
            dtype=float,
            name=self.symbol,
        )
        return series[~series.index.duplicated(keep="last")]


class MarketIndex(BaseModel):
    """A tracked market index (e.g. SPX) and its recent closes, any order."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    prices: list[PricePoint] = Field(default_factory=list)


class MarketIndexSnapshot(BaseModel):
    """Latest close of an index and its change against the previous close.

    change and change_percent are 0 when there is no previous close (or the
    previous close is zero); current_price is 0 when the index has no prices.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    current_price: float
    change: float
    change_percent: float
