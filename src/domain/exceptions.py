"""Domain error taxonomy.

Only the frontier sampler raises: its output is persisted, so a silent
failure would overwrite a user's stored result with garbage. Forecasts and
market comparisons degrade to tagged UNAVAILABLE results instead.

status_code is a hint for the calling layer (4xx for user-correctable
errors, 5xx otherwise); the engine itself has no HTTP surface.
"""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for all engine errors."""

    user_correctable: bool = False

    @property
    def status_code(self) -> int:
        return 400 if self.user_correctable else 500


class InsufficientHistoryError(AnalyticsError):
    """Too few holdings, or too little price history for some holdings.

    symbols lists every asset that fell short; it is empty when the error is
    the minimum-holdings rule (min_holdings=True).
    """

    user_correctable = True

    def __init__(self, message: str, symbols: list[str] | None = None, min_holdings: bool = False):
        super().__init__(message)
        self.symbols = list(symbols or [])
        self.min_holdings = min_holdings

    @classmethod
    def too_few_holdings(cls, required: int, actual: int) -> InsufficientHistoryError:
        return cls(
            f"Add at least {required} holdings before running the optimiser "
            f"(portfolio has {actual}).",
            min_holdings=True,
        )

    @classmethod
    def for_symbols(cls, symbols: list[str]) -> InsufficientHistoryError:
        return cls(
            f"Need more price history for {', '.join(symbols)} before building "
            "the frontier. Try another refresh after the next data pull.",
            symbols=symbols,
        )


class InvalidWeightsError(AnalyticsError, ValueError):
    """A weight vector contains NaN or ±inf, or does not match the asset count."""

    user_correctable = True


class EmptyFrontierError(AnalyticsError):
    """No candidate portfolio produced a finite return and risk.

    Only reachable with malformed inputs (e.g. infinite closes); treated as
    an internal failure rather than a user error.
    """
