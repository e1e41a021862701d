"""Tests for src/domain/models/market_data.py."""

import math

import pytest
from datetime import date
from pydantic import ValidationError

from src.domain.models.market_data import (
    MarketIndex,
    MarketIndexSnapshot,
    PricePoint,
    ReturnPoint,
    ReturnSeries,
)


# --- PricePoint ---

def test_price_point_construction():
    bar = PricePoint(bar_date=date(2024, 1, 15), close=150.25)
    assert bar.close == 150.25
    assert bar.open is None
    assert bar.volume is None


def test_price_point_zero_close_is_representable():
    assert PricePoint(bar_date=date(2024, 1, 15), close=0.0).close == 0.0


def test_price_point_non_finite_close_is_representable():
    assert math.isinf(PricePoint(bar_date=date(2024, 1, 15), close=float("inf")).close)


def test_price_point_negative_volume_raises():
    with pytest.raises(ValidationError):
        PricePoint(bar_date=date(2024, 1, 15), close=1.0, volume=-1)


def test_price_point_ohlcv_stored():
    bar = PricePoint(bar_date=date(2024, 1, 15), close=10.0, open=9.0, high=11.0, low=8.5, volume=1_000)
    assert (bar.open, bar.high, bar.low, bar.volume) == (9.0, 11.0, 8.5, 1_000)


# --- ReturnPoint / ReturnSeries ---

def test_return_point_date_key_is_iso():
    assert ReturnPoint(bar_date=date(2024, 2, 5), daily_return=0.01).date_key == "2024-02-05"


def test_return_series_empty_by_default():
    series = ReturnSeries(symbol="A")
    assert len(series) == 0
    assert series.values.shape == (0,)


def test_return_series_values_in_order():
    series = ReturnSeries(symbol="A", points=[
        ReturnPoint(bar_date=date(2024, 1, 2), daily_return=0.01),
        ReturnPoint(bar_date=date(2024, 1, 3), daily_return=-0.02),
    ])
    assert series.values.tolist() == [0.01, -0.02]


def test_return_series_to_series_is_date_keyed():
    series = ReturnSeries(symbol="A", points=[
        ReturnPoint(bar_date=date(2024, 1, 2), daily_return=0.01),
        ReturnPoint(bar_date=date(2024, 1, 3), daily_return=-0.02),
    ]).to_series()
    assert series.name == "A"
    assert series.to_dict() == {"2024-01-02": 0.01, "2024-01-03": -0.02}


def test_return_series_to_series_duplicate_date_keeps_last():
    series = ReturnSeries(symbol="A", points=[
        ReturnPoint(bar_date=date(2024, 1, 2), daily_return=0.01),
        ReturnPoint(bar_date=date(2024, 1, 2), daily_return=0.05),
    ]).to_series()
    assert series.to_dict() == {"2024-01-02": 0.05}


# --- MarketIndex / MarketIndexSnapshot ---

def test_market_index_prices_default_empty():
    assert MarketIndex(symbol="SPX", name="S&P 500").prices == []


def test_market_index_snapshot_construction():
    snap = MarketIndexSnapshot(symbol="SPX", name="S&P 500", current_price=5100.0, change=50.0, change_percent=0.99)
    assert snap.change == 50.0
