"""Asset valuation and portfolio accounting: assets, portfolio, calculators, reports."""

from .assets import Coin, Equity, PreciousMetal, Property
from .models import AssetKind, AssetSnapshot, CoinType, MetalType, PortfolioSnapshot, PropertyType, ScreeningProfile
from .planning import AssetAllocation, FinancialGoal, FinancialPlan, GoalPriority, GoalStatus
from .portfolio import Portfolio
from .pricing import FixedPriceOracle, PriceOracle, ReferencePriceOracle
from .repository import PortfolioRepository

__all__ = [
    "AssetAllocation",
    "AssetKind",
    "AssetSnapshot",
    "Coin",
    "CoinType",
    "Equity",
    "FinancialGoal",
    "FinancialPlan",
    "FixedPriceOracle",
    "GoalPriority",
    "GoalStatus",
    "MetalType",
    "Portfolio",
    "PortfolioRepository",
    "PortfolioSnapshot",
    "PreciousMetal",
    "PriceOracle",
    "Property",
    "PropertyType",
    "ReferencePriceOracle",
    "ScreeningProfile",
]
