"""
Asset valuation contract shared by every asset kind.

Each concrete variant (Equity, PreciousMetal, Property, Coin) declares its
``kind`` and overrides ``get_current_value``; callers dispatch through the
methods, never by inspecting the stored type.

Valuation is derived on read. Getters never write state; the only things
that change an asset are its explicit commands (buy/sell, refine,
appreciate, edit), each of which validates and computes the complete new
state from one locked read before committing it.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from loguru import logger

from felosy.core.exceptions import PriceUnavailableError, ValidationError
from felosy.financial.models import AssetKind, AssetSnapshot, ScreeningProfile, positive_money
from felosy.financial.money import quantize_ratio
from felosy.financial.pricing import PriceOracle, ReferencePriceOracle


def require_text(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} cannot be empty")
    return str(value).strip()


def require_date(value: date | None, field: str) -> date:
    if value is None:
        raise ValidationError(f"{field} is required")
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise ValidationError(f"{field} must be a date, got {value!r}")
    return value


class Asset(ABC):
    """Abstract base for anything a portfolio can hold.

    Attributes:
        asset_id: Unique identifier within a portfolio.
        name: Display name.
        purchase_date: Acquisition date.
        purchase_price: Total amount paid at acquisition (positive, >= 2 places).
        action_date: Timestamp of the last successful mutation.
        screening: Facts read by the compliance screen.
    """

    kind: ClassVar[AssetKind]

    def __init__(
        self,
        asset_id: str,
        name: str,
        purchase_date: date,
        purchase_price: Decimal,
        *,
        screening: ScreeningProfile | None = None,
    ):
        self._asset_id = require_text(asset_id, "asset_id")
        self._name = require_text(name, "name")
        self._purchase_date = require_date(purchase_date, "purchase_date")
        self._purchase_price = positive_money(purchase_price, "purchase_price")
        self._screening = screening or ScreeningProfile()
        self._action_date = datetime.now()
        self._lock = threading.RLock()

    # --- identity -----------------------------------------------------------

    @property
    def asset_id(self) -> str:
        return self._asset_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def purchase_date(self) -> date:
        return self._purchase_date

    @property
    def purchase_price(self) -> Decimal:
        return self._purchase_price

    @property
    def action_date(self) -> datetime:
        return self._action_date

    @property
    def screening(self) -> ScreeningProfile:
        return self._screening

    # --- valuation ----------------------------------------------------------

    def fetch_price(self) -> Decimal:
        """Current unit price. Only market-priced kinds have one."""
        raise PriceUnavailableError(self._asset_id, f"{self.kind.label} assets have no market price")

    @abstractmethod
    def get_current_value(self) -> Decimal:
        """Total current value, quantized to 2 places."""

    def calculate_return(self) -> Decimal:
        """Return on purchase price: (current - purchase) / purchase, 4 places half-up."""
        with self._lock:
            current = self.get_current_value()
            purchase = self._purchase_price
        return quantize_ratio((current - purchase) / purchase)

    def snapshot(self) -> AssetSnapshot:
        """Frozen copy of this asset, consistent with one point in time."""
        with self._lock:
            return AssetSnapshot(
                asset_id=self._asset_id,
                name=self._name,
                kind=self.kind,
                purchase_date=self._purchase_date,
                purchase_price=self._purchase_price,
                current_value=self.get_current_value(),
                action_date=self._action_date,
                screening=self._screening,
            )

    # --- edits --------------------------------------------------------------

    def rename(self, name: str) -> None:
        new_name = require_text(name, "name")
        with self._lock:
            self._name = new_name
            self._touch()

    def update_purchase(self, purchase_date: date | None = None, purchase_price: Decimal | None = None) -> None:
        """Correct the recorded acquisition date and/or price."""
        new_date = require_date(purchase_date, "purchase_date") if purchase_date is not None else None
        new_price = positive_money(purchase_price, "purchase_price") if purchase_price is not None else None
        with self._lock:
            if new_date is not None:
                self._purchase_date = new_date
            if new_price is not None:
                self._purchase_price = new_price
            self._touch()

    def update_screening(self, screening: ScreeningProfile) -> None:
        if not isinstance(screening, ScreeningProfile):
            raise ValidationError(f"screening must be a ScreeningProfile, got {type(screening).__name__}")
        with self._lock:
            self._screening = screening
            self._touch()

    def _touch(self) -> None:
        self._action_date = datetime.now()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(asset_id={self._asset_id!r}, name={self._name!r})"


class MarketPricedAsset(Asset):
    """An asset whose value is a quoted unit price times a held quantity."""

    def __init__(self, *args, oracle: PriceOracle | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._oracle = oracle or ReferencePriceOracle()

    @property
    @abstractmethod
    def price_symbol(self) -> str:
        """Symbol this asset is quoted under in the price oracle."""

    @property
    def oracle(self) -> PriceOracle:
        return self._oracle

    def fetch_price(self) -> Decimal:
        price = self._oracle.get_price(self.price_symbol)
        logger.debug(f"Fetched price for {self.price_symbol}: {price}")
        return price
