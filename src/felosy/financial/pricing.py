"""Price oracles: the single external capability the valuation core consumes.

An oracle answers ``get_price(symbol)`` with a positive ``Decimal`` or raises
``PriceUnavailableError``. It never substitutes a default or a stale value;
callers that want a fallback must decide that explicitly.

Symbols are upper-case: equity tickers ("AAPL", "BRK.B"), coin codes
("BTC"), and metal spot codes quoted per gram of pure metal ("XAU").
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping
from decimal import Decimal

from loguru import logger

from felosy.core.exceptions import PriceUnavailableError
from felosy.core.types import Numeric

from .models import CoinType, MetalType
from .money import require_positive

# Placeholder market data standing in for a live provider.
_REFERENCE_EQUITY_PRICE = Decimal("150.75")
_REFERENCE_TICKERS = (
    "AAPL", "ABBV", "ABT", "ACN", "ADBE", "AIG", "AMD", "AMGN", "AMT", "AMZN",
    "AVGO", "AXP", "BA", "BAC", "BK", "BKNG", "BLK", "BMY", "BRK.B", "C",
    "CAT", "CHTR", "CL", "CMCSA", "COF", "COP", "COST", "CRM", "CSCO", "CVS",
    "CVX", "DE", "DHR", "DIS", "DUK", "EMR", "FDX", "GD", "GE", "GILD",
    "GM", "GOOG", "GOOGL", "GS", "HD", "HON", "IBM", "INTC", "INTU", "ISRG",
    "MSFT",
)  # fmt: skip

_REFERENCE_COIN_PRICES = {
    CoinType.BTC: Decimal("45000.00"),
    CoinType.ETH: Decimal("2500.00"),
    CoinType.XRP: Decimal("100.00"),
    CoinType.LTC: Decimal("100.00"),
    CoinType.ADA: Decimal("100.00"),
    CoinType.DOT: Decimal("100.00"),
    CoinType.DOGE: Decimal("100.00"),
}

# Per gram of pure metal
_REFERENCE_METAL_PRICES = {
    MetalType.GOLD: Decimal("65.00"),
    MetalType.SILVER: Decimal("0.80"),
    MetalType.PLATINUM: Decimal("31.00"),
    MetalType.PALLADIUM: Decimal("33.00"),
}

REFERENCE_PRICES: dict[str, Decimal] = {
    **{ticker: _REFERENCE_EQUITY_PRICE for ticker in _REFERENCE_TICKERS},
    **{coin.value: price for coin, price in _REFERENCE_COIN_PRICES.items()},
    **{metal.symbol: price for metal, price in _REFERENCE_METAL_PRICES.items()},
}


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper().replace("_", ".")


class PriceOracle(ABC):
    """Source of current unit prices."""

    @abstractmethod
    def get_price(self, symbol: str) -> Decimal:
        """Return the current unit price for ``symbol``.

        Raises:
            PriceUnavailableError: when no current price can be provided.
        """

    def has_price(self, symbol: str) -> bool:
        try:
            self.get_price(symbol)
        except PriceUnavailableError:
            return False
        return True


class FixedPriceOracle(PriceOracle):
    """Deterministic oracle backed by an in-memory table.

    Used by tests and anywhere prices are supplied by hand. Prices can be
    moved with :meth:`set_price` to simulate market changes.
    """

    def __init__(self, prices: Mapping[str, Numeric] | None = None):
        self._lock = threading.Lock()
        self._prices: dict[str, Decimal] = {}
        for symbol, price in (prices or {}).items():
            self._prices[normalize_symbol(symbol)] = require_positive(price, f"price[{symbol}]")

    def get_price(self, symbol: str) -> Decimal:
        key = normalize_symbol(symbol)
        with self._lock:
            price = self._prices.get(key)
        if price is None:
            logger.warning(f"No price for {key}")
            raise PriceUnavailableError(key)
        return price

    def set_price(self, symbol: str, price: Numeric) -> None:
        key = normalize_symbol(symbol)
        value = require_positive(price, f"price[{symbol}]")
        with self._lock:
            self._prices[key] = value
        logger.debug(f"Price set: {key} = {value}")

    def remove_price(self, symbol: str) -> None:
        with self._lock:
            self._prices.pop(normalize_symbol(symbol), None)

    def symbols(self) -> list[str]:
        with self._lock:
            return sorted(self._prices)

    def table(self) -> dict[str, Decimal]:
        with self._lock:
            return dict(sorted(self._prices.items()))


class ReferencePriceOracle(FixedPriceOracle):
    """Oracle carrying the reference placeholder table, optionally overridden per symbol."""

    def __init__(self, overrides: Mapping[str, Numeric] | None = None):
        super().__init__({**REFERENCE_PRICES, **dict(overrides or {})})

    @classmethod
    def from_settings(cls, settings) -> "ReferencePriceOracle":
        """Build from a validated ``PricingSettings`` section."""
        return cls(overrides=settings.overrides)
