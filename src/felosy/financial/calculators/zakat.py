"""
Zakat Calculator: annual obligatory charity on a portfolio snapshot.

Implements:
- Nisab threshold checking (fixed amount, or gold standard from a spot price)
- Flat-rate zakat (default 2.5%) on net worth at or above the nisab
- Per-asset-kind breakdown of the obligation
- Assessment over a user-selected subset of holdings

The engine reads only ``PortfolioSnapshot`` values, so a result is a pure
function of the snapshot and the config. All arithmetic is Decimal, rounded
half-up to cents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import StrEnum

from loguru import logger

from felosy.core.exceptions import ValidationError
from felosy.financial.models import AssetKind, MetalType, PortfolioSnapshot
from felosy.financial.money import ZERO, quantize_money, require_positive, to_decimal

BASE_ZAKAT_RATE = Decimal("0.025")  # 2.5% of zakatable wealth
DEFAULT_NISAB_THRESHOLD = Decimal("5000")


class ZakatStatus(StrEnum):
    BELOW_THRESHOLD = "below_threshold"
    LIABLE = "liable"


@dataclass
class ZakatConfig:
    """Configuration for zakat calculations."""

    nisab_threshold: Decimal = DEFAULT_NISAB_THRESHOLD
    zakat_rate: Decimal = BASE_ZAKAT_RATE

    def __post_init__(self):
        self.nisab_threshold = require_positive(self.nisab_threshold, "nisab_threshold")
        rate = to_decimal(self.zakat_rate, "zakat_rate")
        if rate <= ZERO or rate > 1:
            raise ValidationError(f"zakat_rate must be in (0, 1], got {rate}")
        self.zakat_rate = rate

    @classmethod
    def gold_standard(
        cls,
        price_per_gram,
        grams: Decimal | None = None,
        zakat_rate: Decimal = BASE_ZAKAT_RATE,
    ) -> ZakatConfig:
        """Nisab as the value of ``grams`` of gold (traditionally 85 g)."""
        weight = require_positive(grams if grams is not None else MetalType.GOLD.nisab_grams, "grams")
        threshold = quantize_money(require_positive(price_per_gram, "price_per_gram") * weight)
        logger.debug(f"Gold-standard nisab: {weight}g @ {price_per_gram}/g = {threshold}")
        return cls(nisab_threshold=threshold, zakat_rate=zakat_rate)

    @classmethod
    def from_settings(cls, settings) -> ZakatConfig:
        """Build from a validated ``ZakatSettings`` section."""
        return cls(nisab_threshold=settings.nisab_threshold, zakat_rate=settings.rate)


@dataclass
class ZakatResult:
    """Complete result of a zakat assessment."""

    portfolio_id: str
    owner_id: str
    status: ZakatStatus
    nisab_threshold: Decimal
    zakatable_wealth: Decimal
    zakat_rate: Decimal
    zakat_due: Decimal
    by_kind: dict[AssetKind, Decimal] = field(default_factory=dict)
    asset_ids: tuple[str, ...] = ()
    calculation_date: date = field(default_factory=date.today)

    @property
    def meets_nisab(self) -> bool:
        return self.status is ZakatStatus.LIABLE

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization (amounts as strings)."""
        return {
            "calculation_date": self.calculation_date.isoformat(),
            "portfolio_id": self.portfolio_id,
            "owner_id": self.owner_id,
            "nisab": {
                "threshold": str(self.nisab_threshold),
                "status": self.status.value,
                "meets_nisab": self.meets_nisab,
            },
            "zakat": {
                "zakatable_wealth": str(self.zakatable_wealth),
                "rate": str(self.zakat_rate),
                "due": str(self.zakat_due),
            },
            "by_kind": {kind.value: str(amount) for kind, amount in self.by_kind.items()},
            "asset_ids": list(self.asset_ids),
        }


def check_nisab(zakatable_wealth: Decimal, config: ZakatConfig) -> tuple[bool, Decimal]:
    """Check if zakatable wealth meets the nisab threshold.

    Returns:
        Tuple of (meets_nisab, nisab_threshold)
    """
    threshold = config.nisab_threshold
    meets = zakatable_wealth >= threshold
    logger.debug(f"Nisab check: {zakatable_wealth} vs threshold {threshold}")
    return (meets, threshold)


def calculate_zakat(zakatable_wealth: Decimal, config: ZakatConfig) -> Decimal:
    """Zakat due on ``zakatable_wealth``: 0 below the nisab, else wealth * rate."""
    meets, _ = check_nisab(zakatable_wealth, config)
    if not meets:
        return quantize_money(ZERO)
    return quantize_money(zakatable_wealth * config.zakat_rate)


class ZakatEngine:
    """Zakat obligation for a portfolio snapshot."""

    def __init__(self, config: ZakatConfig | None = None):
        self.config = config or ZakatConfig()

    def check_threshold(self, snapshot: PortfolioSnapshot, config: ZakatConfig | None = None) -> ZakatStatus:
        meets, _ = check_nisab(snapshot.net_worth, config or self.config)
        return ZakatStatus.LIABLE if meets else ZakatStatus.BELOW_THRESHOLD

    def calculate_zakat(self, snapshot: PortfolioSnapshot, config: ZakatConfig | None = None) -> Decimal:
        return calculate_zakat(snapshot.net_worth, config or self.config)

    def get_zakat_by_asset_type(
        self,
        snapshot: PortfolioSnapshot,
        config: ZakatConfig | None = None,
    ) -> dict[AssetKind, Decimal]:
        """Rate applied to each kind's total value.

        Emitted for every kind with a positive value, whether or not the
        portfolio as a whole meets the nisab.
        """
        rate = (config or self.config).zakat_rate
        return {
            kind: quantize_money(value * rate) for kind, value in snapshot.value_by_kind().items() if value > ZERO
        }

    def assess(
        self,
        snapshot: PortfolioSnapshot,
        asset_ids: list[str] | set[str] | tuple[str, ...] | None = None,
        config: ZakatConfig | None = None,
    ) -> ZakatResult:
        """Full assessment, optionally over a user-selected subset of holdings."""
        calc_config = config or self.config
        subject = snapshot if asset_ids is None else snapshot.select(asset_ids)
        wealth = subject.net_worth
        meets, threshold = check_nisab(wealth, calc_config)
        zakat_due = calculate_zakat(wealth, calc_config)
        if not meets:
            logger.info(f"Wealth {wealth} below nisab {threshold}, no zakat due")

        return ZakatResult(
            portfolio_id=snapshot.portfolio_id,
            owner_id=snapshot.owner_id,
            status=ZakatStatus.LIABLE if meets else ZakatStatus.BELOW_THRESHOLD,
            nisab_threshold=threshold,
            zakatable_wealth=quantize_money(wealth),
            zakat_rate=calc_config.zakat_rate,
            zakat_due=zakat_due,
            by_kind=self.get_zakat_by_asset_type(subject, calc_config),
            asset_ids=tuple(h.asset_id for h in subject.holdings),
        )
