"""Cryptocurrency holdings."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from loguru import logger

from felosy.core.exceptions import ValidationError
from felosy.financial.models import AssetKind, CoinType, ScreeningProfile
from felosy.financial.money import ZERO, quantize_money, require_non_negative
from felosy.financial.pricing import PriceOracle, normalize_symbol

from .base import MarketPricedAsset


class Coin(MarketPricedAsset):
    """An amount of one cryptocurrency, valued at its unit price.

    ``CoinType.OTHER`` has no reference price; pass ``symbol`` to quote it
    under a specific code in the oracle.
    """

    kind = AssetKind.COIN

    def __init__(
        self,
        asset_id: str,
        name: str,
        purchase_date: date,
        purchase_price: Decimal,
        coin_type: CoinType | str,
        amount: Decimal = ZERO,
        *,
        symbol: str | None = None,
        oracle: PriceOracle | None = None,
        screening: ScreeningProfile | None = None,
    ):
        super().__init__(asset_id, name, purchase_date, purchase_price, oracle=oracle, screening=screening)
        try:
            self._coin_type = CoinType(str(coin_type).upper())
        except ValueError as e:
            raise ValidationError(f"Unknown coin type: {coin_type}") from e
        self._symbol = normalize_symbol(symbol) if symbol else self._coin_type.value
        self._amount = require_non_negative(amount, "amount")

    @property
    def price_symbol(self) -> str:
        return self._symbol

    @property
    def coin_type(self) -> CoinType:
        return self._coin_type

    @property
    def amount(self) -> Decimal:
        return self._amount

    def get_current_value(self) -> Decimal:
        with self._lock:
            amount = self._amount
        if amount == ZERO:
            return quantize_money(ZERO)
        return quantize_money(self.fetch_price() * amount)

    def set_amount(self, amount) -> None:
        """Record a new holding size (e.g. after a transfer in or out)."""
        new_amount = require_non_negative(amount, "amount")
        with self._lock:
            old = self._amount
            self._amount = new_amount
            self._touch()
        logger.info(f"Coin {self.asset_id} amount {old} -> {new_amount} {self._symbol}")
