"""Unit tests for src/application/handlers.py.

The repository is an AsyncMock; no persistence is involved.
"""

import asyncio
from datetime import date, timedelta
from unittest.mock import AsyncMock

import numpy as np
import pytest

from src.application.handlers import OptimisePortfolioHandler
from src.domain.exceptions import InsufficientHistoryError
from src.domain.models.holdings import Holding, Portfolio
from src.domain.models.market_data import PricePoint
from src.domain.repositories.optimization import OptimizationResultRepository
from src.infrastructure.settings import EngineSettings


def _holding(symbol: str, seed: int, n: int = 60) -> Holding:
    rng = np.random.default_rng(seed)
    closes = 100.0 * np.cumprod(1.0 + rng.normal(0.001, 0.01, size=n))
    prices = [PricePoint(bar_date=date(2024, 1, 1) + timedelta(days=i), close=float(c)) for i, c in enumerate(closes)]
    return Holding(asset_symbol=symbol, raw_weight=0.5, price_history=prices)


@pytest.fixture
def repository() -> AsyncMock:
    repo = AsyncMock(spec=OptimizationResultRepository)
    repo.upsert.side_effect = lambda portfolio_id, result: result
    return repo


@pytest.fixture
def portfolio() -> Portfolio:
    return Portfolio(name="Core", holdings=[_holding("A", 1), _holding("B", 2)])


def test_handle_upserts_result_for_portfolio(repository, portfolio):
    handler = OptimisePortfolioHandler(repository, settings=EngineSettings())
    stored = asyncio.run(handler.handle(portfolio, rng=np.random.default_rng(0)))

    repository.upsert.assert_awaited_once()
    portfolio_id, result = repository.upsert.await_args.args
    assert portfolio_id == portfolio.portfolio_id
    assert stored is result
    assert set(stored.max_sharpe_weights) == {"A", "B"}


def test_handle_uses_settings_for_frontier_config(repository, portfolio):
    handler = OptimisePortfolioHandler(repository, settings=EngineSettings(max_frontier_points=1))
    stored = asyncio.run(handler.handle(portfolio, rng=np.random.default_rng(0)))
    assert len(stored.efficient_frontier) == 1


def test_handle_seeded_settings_are_reproducible(repository, portfolio):
    handler = OptimisePortfolioHandler(repository, settings=EngineSettings(random_seed=11))
    first = asyncio.run(handler.handle(portfolio))
    second = asyncio.run(handler.handle(portfolio))
    assert first.max_sharpe_weights == second.max_sharpe_weights


def test_handle_insufficient_history_propagates_without_write(repository):
    handler = OptimisePortfolioHandler(repository, settings=EngineSettings())
    with pytest.raises(InsufficientHistoryError):
        asyncio.run(handler.handle(Portfolio(holdings=[_holding("A", 1)])))
    repository.upsert.assert_not_awaited()
