"""Asset variants a portfolio can hold."""

from .base import Asset, MarketPricedAsset
from .coin import Coin
from .equity import Equity
from .ledger import LotLedger
from .metal import PreciousMetal
from .real_estate import BASE_RATE, Property

__all__ = [
    "Asset",
    "BASE_RATE",
    "Coin",
    "Equity",
    "LotLedger",
    "MarketPricedAsset",
    "PreciousMetal",
    "Property",
]
