"""Physical precious metal holdings (bars, coins, jewellery)."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from loguru import logger

from felosy.core.exceptions import InvalidPurityError, ValidationError
from felosy.financial.models import AssetKind, MetalType, ScreeningProfile
from felosy.financial.money import ONE, ZERO, quantize_money, quantize_quantity, require_positive, to_decimal
from felosy.financial.pricing import PriceOracle

from .base import MarketPricedAsset

KARAT_SCALE = Decimal("24")


def _purity(value, error=ValidationError) -> Decimal:
    """Purity must be in (0, 1]; a zero purity would leave no pure content."""
    try:
        purity = to_decimal(value, "purity")
    except ValidationError as e:
        raise error(str(e)) from e
    if purity <= ZERO or purity > ONE:
        raise error(f"Purity must be greater than 0 and at most 1, got {purity}")
    return purity


class PreciousMetal(MarketPricedAsset):
    """Metal valued at the spot price per gram of pure content.

    Refining changes purity while conserving pure content, so the weight is
    recomputed as ``weight * purity / new_purity``.
    """

    kind = AssetKind.PRECIOUS_METAL

    def __init__(
        self,
        asset_id: str,
        name: str,
        purchase_date: date,
        purchase_price: Decimal,
        metal: MetalType | str,
        weight_grams: Decimal,
        purity: Decimal = ONE,
        *,
        oracle: PriceOracle | None = None,
        screening: ScreeningProfile | None = None,
    ):
        super().__init__(asset_id, name, purchase_date, purchase_price, oracle=oracle, screening=screening)
        self._metal = metal if isinstance(metal, MetalType) else MetalType.from_id(metal)
        self._weight = require_positive(weight_grams, "weight_grams")
        self._purity = _purity(purity)

    @classmethod
    def from_karat(
        cls,
        asset_id: str,
        name: str,
        purchase_date: date,
        purchase_price: Decimal,
        weight_grams: Decimal,
        karat: int | Decimal,
        **kwargs,
    ) -> PreciousMetal:
        """Gold item described by karat (24k = pure)."""
        purity = require_positive(karat, "karat") / KARAT_SCALE
        return cls(asset_id, name, purchase_date, purchase_price, MetalType.GOLD, weight_grams, purity, **kwargs)

    @property
    def price_symbol(self) -> str:
        return self._metal.symbol

    @property
    def metal(self) -> MetalType:
        return self._metal

    @property
    def weight_grams(self) -> Decimal:
        return self._weight

    @property
    def purity(self) -> Decimal:
        return self._purity

    @property
    def pure_content(self) -> Decimal:
        """Grams of pure metal: weight * purity."""
        with self._lock:
            return self._weight * self._purity

    @property
    def karat(self) -> Decimal:
        return (self._purity * KARAT_SCALE).quantize(Decimal("0.01"))

    def get_current_value(self) -> Decimal:
        with self._lock:
            pure = self._weight * self._purity
        return quantize_money(self.fetch_price() * pure)

    def refine(self, new_purity) -> Decimal:
        """Change purity, conserving pure content. Returns the new weight in grams.

        Raises:
            InvalidPurityError: if ``new_purity`` is not in (0, 1].
        """
        target = _purity(new_purity, InvalidPurityError)
        with self._lock:
            pure = self._weight * self._purity
            new_weight = quantize_quantity(pure / target)
            old_weight, old_purity = self._weight, self._purity
            self._weight, self._purity = new_weight, target
            self._touch()
        logger.info(
            f"Refined {self._metal.metal_id} {self.asset_id}: {old_weight}g @ {old_purity} -> {new_weight}g @ {target}"
        )
        return new_weight
