"""Tests for src/domain/repositories/optimization.py."""

import asyncio
import pytest
from uuid import uuid4

from src.domain.models.optimization import OptimizationResult
from src.domain.repositories.optimization import OptimizationResultRepository


def _result(weight: float = 1.0) -> OptimizationResult:
    return OptimizationResult(
        max_sharpe_weights={"A": weight},
        min_variance_weights={"A": weight},
        efficient_frontier=[],
    )


def _concrete() -> OptimizationResultRepository:
    class _Impl(OptimizationResultRepository):
        def __init__(self):
            self.rows = {}

        async def upsert(self, portfolio_id, result):
            self.rows[portfolio_id] = result
            return result

        async def get_for_portfolio(self, portfolio_id):
            return self.rows.get(portfolio_id)

    return _Impl()


def test_result_repository_is_abstract():
    with pytest.raises(TypeError):
        OptimizationResultRepository()  # type: ignore[abstract]


def test_result_repository_missing_method_is_abstract():
    class _Partial(OptimizationResultRepository):
        async def upsert(self, portfolio_id, result): return result

    with pytest.raises(TypeError):
        _Partial()  # type: ignore[abstract]


def test_result_repository_concrete_instantiates():
    assert _concrete() is not None


def test_result_repository_get_unknown_portfolio_returns_none():
    assert asyncio.run(_concrete().get_for_portfolio(uuid4())) is None


def test_result_repository_upsert_replaces_previous_result():
    repo = _concrete()
    portfolio_id = uuid4()
    asyncio.run(repo.upsert(portfolio_id, _result(1.0)))
    asyncio.run(repo.upsert(portfolio_id, _result(0.5)))

    stored = asyncio.run(repo.get_for_portfolio(portfolio_id))
    assert stored.max_sharpe_weights == {"A": 0.5}
    assert len(repo.rows) == 1
