"""
Weighted-average lot ledger for tradable holdings.

The ledger is an immutable value: ``buy`` and ``sell`` validate their inputs
against the current state and return a *new* ledger, so a failed trade can
never leave a half-applied position behind. The owning asset swaps the new
ledger in under its lock.

Arithmetic:
    buy:   total' = total + qty * price
           shares' = shares + qty
    sell:  realized = (price - average_cost) * qty          (2 places)
           total'   = total * (shares - qty) / shares      (0 when flat)
           shares'  = shares - qty
    average_cost = total / shares                           (6 places)

Invariants:
    - shares >= 0 and equals the signed sum of transaction quantities
    - total_cost == shares * average_cost within rounding tolerance
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from felosy.core.exceptions import (
    InvalidPriceError,
    InvalidQuantityError,
    SellExceedsHoldingsError,
    ValidationError,
)
from felosy.financial.models import Transaction, TransactionType
from felosy.financial.money import ZERO, quantize_cost, quantize_money, to_decimal


def trade_quantity(value) -> Decimal:
    try:
        quantity = to_decimal(value, "quantity")
    except ValidationError as e:
        raise InvalidQuantityError(str(e)) from e
    if quantity <= ZERO:
        raise InvalidQuantityError(f"Quantity must be positive, got {quantity}")
    return quantity


def trade_price(value) -> Decimal:
    try:
        price = to_decimal(value, "price_per_share")
    except ValidationError as e:
        raise InvalidPriceError(str(e)) from e
    if price <= ZERO:
        raise InvalidPriceError(f"Price per share must be positive, got {price}")
    return price


@dataclass(frozen=True)
class LotLedger:
    """Position, cost basis and trade history for one holding.

    Attributes:
        shares: Units currently held.
        total_cost: Remaining cost basis of the units held (6 places).
        realized_pl: Profit/loss accumulated by all sales (2 places).
        transactions: Append-only trade log, oldest first.
    """

    shares: Decimal = ZERO
    total_cost: Decimal = ZERO
    realized_pl: Decimal = ZERO
    transactions: tuple[Transaction, ...] = ()

    @classmethod
    def opening(cls, shares: Decimal, total_cost: Decimal, when: datetime) -> LotLedger:
        """Ledger for an initial position bought for ``total_cost`` in one lot."""
        if shares == ZERO:
            return cls()
        opening_buy = Transaction(
            trade_date=when,
            quantity=shares,
            price_per_share=quantize_cost(total_cost / shares),
            kind=TransactionType.BUY,
        )
        return cls(shares=shares, total_cost=quantize_cost(total_cost), transactions=(opening_buy,))

    @property
    def average_cost(self) -> Decimal:
        if self.shares == ZERO:
            return ZERO
        return quantize_cost(self.total_cost / self.shares)

    def buy(self, quantity, price_per_share, when: datetime | None = None) -> LotLedger:
        qty = trade_quantity(quantity)
        price = trade_price(price_per_share)
        record = Transaction(
            trade_date=when or datetime.now(),
            quantity=qty,
            price_per_share=price,
            kind=TransactionType.BUY,
        )
        return replace(
            self,
            shares=self.shares + qty,
            total_cost=quantize_cost(self.total_cost + qty * price),
            transactions=(*self.transactions, record),
        )

    def sell(self, quantity, price_per_share, when: datetime | None = None, ticker: str = "") -> tuple[LotLedger, Decimal]:
        """Return the ledger after the sale and the realized P/L of this sale."""
        qty = trade_quantity(quantity)
        price = trade_price(price_per_share)
        if qty > self.shares:
            raise SellExceedsHoldingsError(ticker or "holding", qty, self.shares)

        realized = quantize_money((price - self.average_cost) * qty)
        remaining_shares = self.shares - qty
        if remaining_shares == ZERO:
            remaining_cost = ZERO
        else:
            remaining_cost = quantize_cost(self.total_cost * remaining_shares / self.shares)

        record = Transaction(
            trade_date=when or datetime.now(),
            quantity=qty,
            price_per_share=price,
            kind=TransactionType.SELL,
        )
        ledger = replace(
            self,
            shares=remaining_shares,
            total_cost=remaining_cost,
            realized_pl=self.realized_pl + realized,
            transactions=(*self.transactions, record),
        )
        return ledger, realized

    def net_quantity(self) -> Decimal:
        """Signed sum of all recorded trades; always equal to ``shares``."""
        return sum((t.signed_quantity for t in self.transactions), ZERO)
