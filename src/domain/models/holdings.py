"""Portfolio holdings domain models.

A Portfolio is an aggregate root containing a set of Holdings. Unlike a
normalised allocation, holding weights are stored exactly as the user
entered them; normalisation happens at consumption time (see
PortfolioService.normalise_weights).
"""

from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from .market_data import PricePoint


class Holding(BaseModel):
    """A single asset position with its price history.

    raw_weight must be finite; it is not required to be in [0, 1] nor to sum
    to 1 with its siblings.
    price_history may arrive in any order.
    """

    model_config = ConfigDict(frozen=True)

    asset_symbol: str = Field(min_length=1)
    raw_weight: float = Field(allow_inf_nan=False)
    price_history: list[PricePoint] = Field(default_factory=list)


class Portfolio(BaseModel):
    """A user portfolio: an ordered list of holdings."""

    model_config = ConfigDict(frozen=True)

    portfolio_id: UUID = Field(default_factory=uuid4)
    name: str = ""
    holdings: list[Holding] = Field(default_factory=list)

    @property
    def symbols(self) -> list[str]:
        return [h.asset_symbol for h in self.holdings]

    @property
    def weight_sum(self) -> float:
        return sum(h.raw_weight for h in self.holdings)


class WeightValidation(BaseModel):
    """Outcome of checking that a weight map sums to approximately 1."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    total: float
    message: str
