"""Command handlers: run domain services and hand results to collaborators."""

from __future__ import annotations

import logging

import numpy as np

from src.domain.models.holdings import Portfolio
from src.domain.models.optimization import OptimizationResult
from src.domain.repositories.optimization import OptimizationResultRepository
from src.domain.services.optimization import OptimizationService
from src.infrastructure.settings import EngineSettings
from src.infrastructure.settings import settings as default_settings

logger = logging.getLogger(__name__)


class OptimisePortfolioHandler:
    """Build a portfolio's efficient frontier and upsert it.

    Domain errors (InsufficientHistoryError, EmptyFrontierError) propagate
    unchanged and nothing is written, so a failed run never replaces the
    previously stored result.
    """

    def __init__(
        self,
        repository: OptimizationResultRepository,
        optimization: OptimizationService | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self._repository = repository
        self._optimization = optimization or OptimizationService()
        self._settings = settings or default_settings

    async def handle(
        self,
        portfolio: Portfolio,
        rng: np.random.Generator | None = None,
    ) -> OptimizationResult:
        """Optimise portfolio and store the result as its current one.

        rng defaults to a generator seeded with settings.random_seed
        (unseeded when that is None).
        """
        if rng is None:
            rng = np.random.default_rng(self._settings.random_seed)

        result = self._optimization.build_efficient_frontier(
            portfolio.holdings,
            config=self._settings.frontier_config(),
            rng=rng,
        )
        stored = await self._repository.upsert(portfolio.portfolio_id, result)
        logger.info(
            "Stored optimisation result for portfolio %s (%d frontier points)",
            portfolio.portfolio_id, len(stored.efficient_frontier),
        )
        return stored
