"""Listed equities with weighted-average cost accounting."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

from loguru import logger

from felosy.core.exceptions import FelosyError, ValidationError
from felosy.financial.models import AssetKind, ScreeningProfile, Transaction
from felosy.financial.money import (
    ZERO,
    quantize_money,
    quantize_ratio,
    require_non_negative,
    to_decimal,
)
from felosy.financial.pricing import PriceOracle, normalize_symbol

from .base import MarketPricedAsset, require_text
from .ledger import LotLedger


class Equity(MarketPricedAsset):
    """A position in a listed stock.

    ``purchase_price`` is the total paid for the opening position. When
    ``shares`` is non-zero the opening position is recorded as the first BUY
    in the ledger at ``purchase_price / shares`` per share.
    """

    kind = AssetKind.EQUITY

    def __init__(
        self,
        asset_id: str,
        name: str,
        purchase_date: date,
        purchase_price: Decimal,
        ticker: str,
        exchange: str = "",
        shares: Decimal | int = 0,
        dividend_yield: Decimal = ZERO,
        eps: Decimal = ZERO,
        *,
        oracle: PriceOracle | None = None,
        screening: ScreeningProfile | None = None,
    ):
        super().__init__(asset_id, name, purchase_date, purchase_price, oracle=oracle, screening=screening)
        self._ticker = normalize_symbol(require_text(ticker, "ticker"))
        self._exchange = (exchange or "").strip()
        self._dividend_yield = require_non_negative(dividend_yield, "dividend_yield")
        self._eps = to_decimal(eps, "eps")
        opening_shares = require_non_negative(shares, "shares")
        self._ledger = LotLedger.opening(
            opening_shares,
            self.purchase_price,
            datetime.combine(self.purchase_date, time()),
        )

    @property
    def price_symbol(self) -> str:
        return self._ticker

    @property
    def ticker(self) -> str:
        return self._ticker

    @property
    def exchange(self) -> str:
        return self._exchange

    @property
    def dividend_yield(self) -> Decimal:
        return self._dividend_yield

    @property
    def eps(self) -> Decimal:
        return self._eps

    @property
    def shares_owned(self) -> Decimal:
        return self._ledger.shares

    @property
    def average_cost(self) -> Decimal:
        return self._ledger.average_cost

    @property
    def total_cost_basis(self) -> Decimal:
        return self._ledger.total_cost

    @property
    def realized_pl(self) -> Decimal:
        return self._ledger.realized_pl

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._ledger.transactions

    @property
    def ledger(self) -> LotLedger:
        return self._ledger

    def get_current_value(self) -> Decimal:
        with self._lock:
            shares = self._ledger.shares
            if shares == ZERO:
                return quantize_money(ZERO)
            return quantize_money(self.fetch_price() * shares)

    def buy_shares(self, quantity, price_per_share, trade_date: datetime | None = None) -> Transaction:
        """Buy ``quantity`` shares at ``price_per_share`` and return the recorded BUY."""
        with self._lock:
            try:
                ledger = self._ledger.buy(quantity, price_per_share, trade_date)
            except FelosyError as e:
                logger.warning(f"Rejected buy of {quantity} {self._ticker} @ {price_per_share}: {e}")
                raise
            self._ledger = ledger
            self._touch()
        logger.info(
            f"Bought {ledger.transactions[-1].quantity} {self._ticker} @ {ledger.transactions[-1].price_per_share}; "
            f"now {ledger.shares} shares, avg cost {ledger.average_cost}"
        )
        return ledger.transactions[-1]

    def sell_shares(self, quantity, price_per_share, trade_date: datetime | None = None) -> Decimal:
        """Sell ``quantity`` shares at ``price_per_share``; returns the realized P/L of the sale."""
        with self._lock:
            try:
                ledger, realized = self._ledger.sell(quantity, price_per_share, trade_date, ticker=self._ticker)
            except FelosyError as e:
                logger.warning(f"Rejected sale of {quantity} {self._ticker} @ {price_per_share}: {e}")
                raise
            self._ledger = ledger
            self._touch()
        logger.info(f"Sold {quantity} {self._ticker} @ {price_per_share}; realized {realized}, {ledger.shares} left")
        return realized

    def unrealized_pl(self) -> Decimal:
        """Current value less the remaining cost basis."""
        with self._lock:
            return quantize_money(self.get_current_value() - self._ledger.total_cost)

    def annual_dividend_income(self) -> Decimal:
        with self._lock:
            return quantize_money(self.get_current_value() * self._dividend_yield)

    def pe_ratio(self) -> Decimal:
        if self._eps <= ZERO:
            raise ValidationError(f"P/E is undefined for {self._ticker} with EPS {self._eps}")
        return quantize_ratio(self.fetch_price() / self._eps)

    def update_details(
        self,
        name: str | None = None,
        ticker: str | None = None,
        exchange: str | None = None,
        dividend_yield: Decimal | None = None,
        eps: Decimal | None = None,
    ) -> None:
        """Edit descriptive fields. All values are validated before any is applied."""
        new_name = require_text(name, "name") if name is not None else None
        new_ticker = normalize_symbol(require_text(ticker, "ticker")) if ticker is not None else None
        new_yield = require_non_negative(dividend_yield, "dividend_yield") if dividend_yield is not None else None
        new_eps = to_decimal(eps, "eps") if eps is not None else None

        with self._lock:
            if new_name is not None:
                self._name = new_name
            if new_ticker is not None:
                self._ticker = new_ticker
            if exchange is not None:
                self._exchange = exchange.strip()
            if new_yield is not None:
                self._dividend_yield = new_yield
            if new_eps is not None:
                self._eps = new_eps
            self._touch()
