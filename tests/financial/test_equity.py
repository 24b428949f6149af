"""Tests for felosy.financial.assets.equity."""

from datetime import date
from decimal import Decimal

import pytest

from felosy.core.exceptions import (
    InvalidPriceError,
    InvalidQuantityError,
    PriceUnavailableError,
    SellExceedsHoldingsError,
    ValidationError,
)
from felosy.financial.assets import Equity
from felosy.financial.models import AssetKind, TransactionType


@pytest.fixture
def empty_equity(oracle, purchase_date):
    return Equity("eq-1", "Apple", purchase_date, Decimal("1000"), "AAPL", exchange="NASDAQ", oracle=oracle)


@pytest.fixture
def equity(oracle, purchase_date):
    """10 shares bought for 1,000 in total."""
    return Equity(
        "eq-2",
        "Apple",
        purchase_date,
        Decimal("1000"),
        "aapl",
        shares=10,
        dividend_yield=Decimal("0.02"),
        eps=Decimal("6"),
        oracle=oracle,
    )


class TestConstruction:
    def test_opening_position_recorded(self, equity):
        assert equity.kind is AssetKind.EQUITY
        assert equity.ticker == "AAPL"
        assert equity.shares_owned == Decimal("10")
        assert equity.average_cost == Decimal("100")
        assert [t.kind for t in equity.transactions] == [TransactionType.BUY]

    def test_no_opening_shares(self, empty_equity):
        assert empty_equity.shares_owned == Decimal("0")
        assert empty_equity.transactions == ()
        assert empty_equity.get_current_value() == Decimal("0.00")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"asset_id": ""},
            {"name": "  "},
            {"purchase_date": None},
            {"purchase_price": Decimal("0")},
            {"ticker": ""},
            {"shares": -1},
            {"dividend_yield": Decimal("-0.01")},
        ],
    )
    def test_invalid_construction(self, oracle, kwargs):
        args = {
            "asset_id": "eq",
            "name": "Apple",
            "purchase_date": date(2024, 1, 1),
            "purchase_price": Decimal("100"),
            "ticker": "AAPL",
        }
        args.update(kwargs)
        with pytest.raises(ValidationError):
            Equity(oracle=oracle, **args)

    def test_purchase_price_quantized(self, equity):
        assert str(equity.purchase_price) == "1000.00"


class TestLotAccounting:
    def test_weighted_average_scenario(self, empty_equity):
        empty_equity.buy_shares(10, 100)
        empty_equity.buy_shares(10, 120)
        assert empty_equity.average_cost == Decimal("110")

        realized = empty_equity.sell_shares(5, 150)
        assert realized == Decimal("200.00")
        assert empty_equity.shares_owned == Decimal("15")
        assert empty_equity.total_cost_basis == Decimal("1650")
        assert empty_equity.realized_pl == Decimal("200.00")

    def test_buy_returns_transaction(self, empty_equity):
        txn = empty_equity.buy_shares("2.5", "101.10")
        assert txn.kind is TransactionType.BUY
        assert txn.quantity == Decimal("2.5")

    def test_sell_everything(self, equity):
        equity.sell_shares(10, 90)
        assert equity.shares_owned == Decimal("0")
        assert equity.total_cost_basis == Decimal("0")
        assert equity.realized_pl == Decimal("-100.00")

    def test_buy_then_sell_same_leaves_average(self, equity):
        equity.buy_shares(5, 130)
        before = equity.average_cost
        equity.sell_shares(5, 130)
        assert equity.average_cost == before

    def test_action_date_advances(self, equity):
        before = equity.action_date
        equity.buy_shares(1, 100)
        assert equity.action_date >= before


class TestRejectedTrades:
    def _state(self, equity):
        return (equity.shares_owned, equity.total_cost_basis, equity.realized_pl, equity.transactions)

    def test_oversell_leaves_state(self, equity):
        before = self._state(equity)
        with pytest.raises(SellExceedsHoldingsError):
            equity.sell_shares(11, 100)
        assert self._state(equity) == before

    @pytest.mark.parametrize("qty", [0, -3])
    def test_bad_quantity_leaves_state(self, equity, qty):
        before = self._state(equity)
        with pytest.raises(InvalidQuantityError):
            equity.buy_shares(qty, 100)
        with pytest.raises(InvalidQuantityError):
            equity.sell_shares(qty, 100)
        assert self._state(equity) == before

    def test_bad_price_leaves_state(self, equity):
        before = self._state(equity)
        with pytest.raises(InvalidPriceError):
            equity.buy_shares(1, 0)
        with pytest.raises(InvalidPriceError):
            equity.sell_shares(1, "-1")
        assert self._state(equity) == before


class TestValuation:
    def test_current_value(self, equity):
        assert equity.fetch_price() == Decimal("150")
        assert equity.get_current_value() == Decimal("1500.00")

    def test_value_tracks_price(self, equity, oracle):
        oracle.set_price("AAPL", "160.555")
        assert equity.get_current_value() == Decimal("1605.55")

    def test_calculate_return(self, equity):
        assert equity.calculate_return() == Decimal("0.5000")

    def test_unrealized_pl(self, equity):
        assert equity.unrealized_pl() == Decimal("500.00")

    def test_dividend_income(self, equity):
        assert equity.annual_dividend_income() == Decimal("30.00")

    def test_pe_ratio(self, equity):
        assert equity.pe_ratio() == Decimal("25.0000")

    def test_pe_ratio_needs_positive_eps(self, empty_equity):
        with pytest.raises(ValidationError, match="P/E"):
            empty_equity.pe_ratio()

    def test_unknown_ticker(self, oracle, purchase_date):
        equity = Equity("x", "Unknown", purchase_date, 100, "ZZZZ", shares=1, oracle=oracle)
        with pytest.raises(PriceUnavailableError):
            equity.get_current_value()

    def test_snapshot(self, equity):
        snap = equity.snapshot()
        assert snap.asset_id == "eq-2"
        assert snap.kind is AssetKind.EQUITY
        assert snap.current_value == Decimal("1500.00")
        assert snap.gain_loss == Decimal("500.00")


class TestUpdateDetails:
    def test_update(self, equity):
        equity.update_details(name="Apple Inc.", ticker="msft", exchange="NYSE", eps=Decimal("8"))
        assert equity.name == "Apple Inc."
        assert equity.ticker == "MSFT"
        assert equity.exchange == "NYSE"
        assert equity.get_current_value() == Decimal("4000.00")

    def test_invalid_update_is_atomic(self, equity):
        with pytest.raises(ValidationError):
            equity.update_details(name="Renamed", dividend_yield=Decimal("-1"))
        assert equity.name == "Apple"
        assert equity.dividend_yield == Decimal("0.02")
