"""
Portfolio: one owner's collection of assets.

The collection is guarded by a lock. Read paths copy the collection under the
lock and then value each asset outside it, so a slow price lookup never
blocks writers. Net worth is recomputed on every read; nothing is cached.

Collaborators (zakat, screening, reports) receive a ``PortfolioSnapshot``
rather than live assets.
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime
from decimal import Decimal

from loguru import logger

from felosy.core.exceptions import AssetNotFoundError, DuplicateAssetError, StateError, ValidationError

from .assets import Asset, Equity, PreciousMetal, Property
from .models import AssetKind, AssetSnapshot, PortfolioSnapshot, Transaction
from .money import ZERO, quantize_money


def owner_key(owner_id) -> str:
    """Normalized owner id: stripped text, never empty."""
    if owner_id is None or not str(owner_id).strip():
        raise ValidationError("owner_id cannot be empty")
    return str(owner_id).strip()


class Portfolio:
    """Owner-scoped set of assets keyed by ``asset_id``."""

    def __init__(self, owner_id: str, portfolio_id: str | None = None):
        self.owner_id = owner_key(owner_id)
        self.portfolio_id = portfolio_id or str(uuid.uuid4())
        self._assets: dict[str, Asset] = {}
        self._lock = threading.Lock()

    # --- collection ---------------------------------------------------------

    def add_asset(self, asset: Asset) -> None:
        if not isinstance(asset, Asset):
            raise ValidationError(f"Expected an Asset, got {type(asset).__name__}")
        with self._lock:
            if asset.asset_id in self._assets:
                logger.warning(f"Portfolio {self.portfolio_id}: duplicate asset id {asset.asset_id}")
                raise DuplicateAssetError(f"Asset {asset.asset_id} is already in portfolio {self.portfolio_id}")
            self._assets[asset.asset_id] = asset
        logger.info(f"Portfolio {self.portfolio_id}: added {asset.kind} {asset.asset_id} ({asset.name})")

    def remove_asset(self, asset_id: str) -> bool:
        """Remove an asset. Returns False if it was not present."""
        with self._lock:
            removed = self._assets.pop(asset_id, None)
        if removed is None:
            logger.debug(f"Portfolio {self.portfolio_id}: nothing to remove for {asset_id}")
            return False
        logger.info(f"Portfolio {self.portfolio_id}: removed {asset_id}")
        return True

    def get_asset(self, asset_id: str) -> Asset:
        """Live asset for owner-initiated commands."""
        with self._lock:
            asset = self._assets.get(asset_id)
        if asset is None:
            raise AssetNotFoundError(f"Asset {asset_id} not found in portfolio {self.portfolio_id}")
        return asset

    def _holdings(self) -> list[Asset]:
        with self._lock:
            return list(self._assets.values())

    def get_assets(self) -> tuple[AssetSnapshot, ...]:
        return tuple(asset.snapshot() for asset in self._holdings())

    def snapshot(self) -> PortfolioSnapshot:
        return PortfolioSnapshot(
            portfolio_id=self.portfolio_id,
            owner_id=self.owner_id,
            taken_at=datetime.now(),
            holdings=self.get_assets(),
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._assets)

    def __contains__(self, asset_id: object) -> bool:
        with self._lock:
            return asset_id in self._assets

    # --- valuation ----------------------------------------------------------

    def get_net_worth(self) -> Decimal:
        total = sum((asset.get_current_value() for asset in self._holdings()), ZERO)
        logger.debug(f"Portfolio {self.portfolio_id}: net worth {total}")
        return quantize_money(total)

    def total_invested(self) -> Decimal:
        return quantize_money(sum((asset.purchase_price for asset in self._holdings()), ZERO))

    def unrealized_gain(self) -> Decimal:
        """Net worth less total purchase price, from one consistent snapshot."""
        snap = self.snapshot()
        return quantize_money(snap.net_worth - snap.total_invested)

    def value_by_kind(self) -> dict[AssetKind, Decimal]:
        return {kind: quantize_money(value) for kind, value in self.snapshot().value_by_kind().items()}

    def get_asset_distribution(self) -> dict[AssetKind, Decimal]:
        """Share of net worth per asset kind (4 places).

        Empty portfolio: ``{}``. Zero net worth: every present kind maps to 0.
        """
        return self.snapshot().distribution()

    # --- owner commands -----------------------------------------------------

    def _require(self, asset_id: str, expected: type[Asset]):
        asset = self.get_asset(asset_id)
        if not isinstance(asset, expected):
            raise StateError(f"Asset {asset_id} is {asset.kind.label}, expected {expected.kind.label}")
        return asset

    def buy_shares(self, asset_id: str, quantity, price_per_share, trade_date: datetime | None = None) -> Transaction:
        equity = self._require(asset_id, Equity)
        return equity.buy_shares(quantity, price_per_share, trade_date)

    def sell_shares(self, asset_id: str, quantity, price_per_share, trade_date: datetime | None = None) -> Decimal:
        equity = self._require(asset_id, Equity)
        return equity.sell_shares(quantity, price_per_share, trade_date)

    def refine(self, asset_id: str, new_purity) -> Decimal:
        metal = self._require(asset_id, PreciousMetal)
        return metal.refine(new_purity)

    def apply_appreciation(self, asset_id: str, rate, years) -> Decimal:
        prop = self._require(asset_id, Property)
        return prop.apply_appreciation(rate, years)

    def __repr__(self) -> str:
        return f"Portfolio(portfolio_id={self.portfolio_id!r}, owner_id={self.owner_id!r}, assets={len(self)})"
