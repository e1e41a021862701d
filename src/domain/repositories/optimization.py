"""Optimization result repository interface.

Concrete implementations belong to the persistence collaborator and are
wired at the application boundary via dependency injection.

Design notes:
  - Methods are async to accommodate async database drivers.
  - Exactly one result is stored per portfolio: upsert() replaces any
    previous result for the same portfolio_id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.models.optimization import OptimizationResult


class OptimizationResultRepository(ABC):
    """Read/write interface for the latest OptimizationResult per portfolio."""

    @abstractmethod
    async def upsert(self, portfolio_id: UUID, result: OptimizationResult) -> OptimizationResult:
        """Store result as the portfolio's current result, replacing any previous one."""

    @abstractmethod
    async def get_for_portfolio(self, portfolio_id: UUID) -> OptimizationResult | None:
        """Return the portfolio's current result, or None if it was never optimised."""
