"""
Felosy exception hierarchy.

All felosy exceptions inherit from FelosyError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.

Input problems (bad amounts, out-of-range ratios, missing dates) are
ValidationErrors and also ValueErrors, so generic callers keep working.
Operations rejected against the current state of an asset (selling more than
is held, impossible refinement) are StateErrors. In both cases the asset is
left exactly as it was before the call.
"""

from decimal import Decimal


class FelosyError(Exception):
    """Base exception class for all felosy errors."""


class ConfigurationError(FelosyError):
    """Raised for configuration errors (missing keys, invalid values)."""


class ValidationError(FelosyError, ValueError):
    """Raised when a field or argument fails boundary validation."""


class StateError(FelosyError):
    """Raised when an operation is not allowed in the asset's current state."""


class InvalidQuantityError(StateError, ValidationError):
    """Raised for a non-positive trade quantity."""


class InvalidPriceError(StateError, ValidationError):
    """Raised for a non-positive trade price."""


class SellExceedsHoldingsError(StateError):
    """Raised when a sale asks for more shares than are held."""

    def __init__(self, ticker: str, requested: Decimal, available: Decimal):
        self.ticker = ticker
        self.requested = requested
        self.available = available
        super().__init__(f"Cannot sell {requested} shares of {ticker}: only {available} held")


class InvalidPurityError(StateError, ValidationError):
    """Raised when a refinement target purity is outside (0, 1]."""


class InvalidAppreciationError(StateError, ValidationError):
    """Raised for negative appreciation periods or a non-positive result."""


class PortfolioError(FelosyError):
    """Raised for portfolio collection errors."""


class AssetNotFoundError(PortfolioError, KeyError):
    """Raised when an asset id is not present in a portfolio."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class DuplicateAssetError(PortfolioError):
    """Raised when adding an asset whose id is already present."""


class PlanningError(FelosyError):
    """Raised for financial plan and goal errors."""


class GoalNotFoundError(PlanningError, KeyError):
    """Raised when a goal id is not present in a plan."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class PriceUnavailableError(FelosyError):
    """Raised when a price oracle cannot provide a current price."""

    def __init__(self, symbol: str, reason: str = "no price available"):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Price unavailable for {symbol}: {reason}")
