"""Core financial data models.

Small immutable value types shared by the asset variants, the portfolio and
the calculators: asset kinds and categories, ledger transactions, the
screening facts an asset carries, and the frozen snapshots handed to
reporting collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum, StrEnum

from felosy.core.exceptions import ValidationError

from .money import ZERO, money_at_scale, quantize_money, quantize_ratio, require_fraction, require_positive


class AssetKind(StrEnum):
    """The closed set of asset variants a portfolio can hold."""

    EQUITY = "equity"
    PRECIOUS_METAL = "precious_metal"
    PROPERTY = "property"
    COIN = "coin"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class TransactionType(StrEnum):
    BUY = "buy"
    SELL = "sell"


class MetalType(Enum):
    """Precious metals with their spot-price symbol and traditional nisab weight."""

    GOLD = ("gold", "XAU", Decimal("85"))
    SILVER = ("silver", "XAG", Decimal("595"))
    PLATINUM = ("platinum", "XPT", None)  # No traditional nisab
    PALLADIUM = ("palladium", "XPD", None)

    def __init__(self, metal_id: str, symbol: str, nisab_grams: Decimal | None):
        self.metal_id = metal_id
        self.symbol = symbol
        self.nisab_grams = nisab_grams

    @classmethod
    def from_id(cls, metal_id: str) -> MetalType:
        for metal in cls:
            if metal.metal_id == metal_id.lower():
                return metal
        raise ValidationError(f"Unknown metal: {metal_id}. Available: {[m.metal_id for m in cls]}")


class CoinType(StrEnum):
    BTC = "BTC"
    ETH = "ETH"
    XRP = "XRP"
    LTC = "LTC"
    ADA = "ADA"
    DOT = "DOT"
    DOGE = "DOGE"
    OTHER = "OTHER"


class PropertyType(StrEnum):
    SINGLE_FAMILY_RESIDENTIAL = "single_family_residential"
    MULTI_FAMILY_RESIDENTIAL = "multi_family_residential"
    OFFICE = "office"
    INDUSTRIAL = "industrial"
    RETAIL = "retail"
    SELF_STORAGE = "self_storage"
    LAND = "land"
    HOTELS_HOSPITALS = "hotels_hospitals"
    MIXED_USE = "mixed_use"
    OTHER = "other"


@dataclass(frozen=True)
class Transaction:
    """One entry in an equity's append-only trade log.

    Attributes:
        trade_date: When the trade happened.
        quantity: Number of shares (always positive; direction is in ``kind``).
        price_per_share: Execution price.
        kind: BUY or SELL.
    """

    trade_date: datetime
    quantity: Decimal
    price_per_share: Decimal
    kind: TransactionType

    @property
    def signed_quantity(self) -> Decimal:
        return self.quantity if self.kind is TransactionType.BUY else -self.quantity

    @property
    def gross_amount(self) -> Decimal:
        return quantize_money(self.quantity * self.price_per_share)


@dataclass(frozen=True)
class ScreeningProfile:
    """Facts about an asset's underlying business that compliance rules read.

    Attributes:
        interest_bearing: The instrument pays or is structured around interest.
        business_activities: Lower-case activity tags, e.g. {"technology"}.
        debt_ratio: Total debt over market capitalisation (0-1).
        non_permissible_income_ratio: Share of revenue from impermissible sources (0-1).
    """

    interest_bearing: bool = False
    business_activities: frozenset[str] = field(default_factory=frozenset)
    debt_ratio: Decimal = ZERO
    non_permissible_income_ratio: Decimal = ZERO

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "debt_ratio", require_fraction(self.debt_ratio, "debt_ratio"))
        object.__setattr__(
            self,
            "non_permissible_income_ratio",
            require_fraction(self.non_permissible_income_ratio, "non_permissible_income_ratio"),
        )
        object.__setattr__(
            self,
            "business_activities",
            frozenset(activity.strip().lower() for activity in self.business_activities),
        )


@dataclass(frozen=True)
class AssetSnapshot:
    """Read-only copy of one asset, taken at a single point in time."""

    asset_id: str
    name: str
    kind: AssetKind
    purchase_date: date
    purchase_price: Decimal
    current_value: Decimal
    action_date: datetime
    screening: ScreeningProfile = ScreeningProfile()

    @property
    def gain_loss(self) -> Decimal:
        """Unrealized gain/loss against the purchase price."""
        return self.current_value - self.purchase_price


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Consistent, immutable view of a portfolio for calculators and reports."""

    portfolio_id: str
    owner_id: str
    taken_at: datetime
    holdings: tuple[AssetSnapshot, ...] = ()

    @property
    def net_worth(self) -> Decimal:
        return sum((h.current_value for h in self.holdings), ZERO)

    @property
    def total_invested(self) -> Decimal:
        return sum((h.purchase_price for h in self.holdings), ZERO)

    def value_by_kind(self) -> dict[AssetKind, Decimal]:
        """Sum current values per asset kind, in first-seen order."""
        totals: dict[AssetKind, Decimal] = {}
        for holding in self.holdings:
            totals[holding.kind] = totals.get(holding.kind, ZERO) + holding.current_value
        return totals

    def distribution(self) -> dict[AssetKind, Decimal]:
        """Share of net worth per asset kind (4 places).

        Empty snapshot: ``{}``. Zero net worth: every present kind maps to 0.
        """
        groups = self.value_by_kind()
        net_worth = self.net_worth
        if net_worth == ZERO:
            return {kind: quantize_ratio(ZERO) for kind in groups}
        return {kind: quantize_ratio(value / net_worth) for kind, value in groups.items()}

    def select(self, asset_ids: list[str] | set[str] | tuple[str, ...]) -> PortfolioSnapshot:
        """Return a snapshot restricted to ``asset_ids`` (unknown ids are ignored)."""
        wanted = set(asset_ids)
        return PortfolioSnapshot(
            portfolio_id=self.portfolio_id,
            owner_id=self.owner_id,
            taken_at=self.taken_at,
            holdings=tuple(h for h in self.holdings if h.asset_id in wanted),
        )

    def get(self, asset_id: str) -> AssetSnapshot | None:
        for holding in self.holdings:
            if holding.asset_id == asset_id:
                return holding
        return None

    def __len__(self) -> int:
        return len(self.holdings)


def positive_money(value, field_name: str) -> Decimal:
    """Validate a money field: strictly positive, at least 2 decimal places."""
    return money_at_scale(require_positive(value, field_name))
