"""Tests for felosy.financial.pricing."""

from decimal import Decimal

import pytest

from felosy.core.config_schema import PricingSettings
from felosy.core.exceptions import PriceUnavailableError, ValidationError
from felosy.financial.pricing import REFERENCE_PRICES, FixedPriceOracle, ReferencePriceOracle, normalize_symbol


class TestNormalizeSymbol:
    def test_upper_and_strip(self):
        assert normalize_symbol(" aapl ") == "AAPL"

    def test_underscore_class_shares(self):
        assert normalize_symbol("brk_b") == "BRK.B"


class TestFixedPriceOracle:
    def test_get_price(self, oracle):
        assert oracle.get_price("aapl") == Decimal("150")

    def test_missing_symbol_raises(self, oracle):
        with pytest.raises(PriceUnavailableError, match="TSLA"):
            oracle.get_price("TSLA")
        assert not oracle.has_price("TSLA")

    def test_set_and_remove(self, oracle):
        oracle.set_price("TSLA", "210.5")
        assert oracle.get_price("TSLA") == Decimal("210.5")
        oracle.remove_price("TSLA")
        assert "TSLA" not in oracle.symbols()

    def test_rejects_non_positive(self):
        with pytest.raises(ValidationError):
            FixedPriceOracle({"AAPL": 0})
        oracle = FixedPriceOracle()
        with pytest.raises(ValidationError):
            oracle.set_price("AAPL", "-1")

    def test_table_sorted_copy(self, oracle):
        table = oracle.table()
        assert list(table) == sorted(table)
        table["AAPL"] = Decimal("1")
        assert oracle.get_price("AAPL") == Decimal("150")


class TestReferencePriceOracle:
    def test_reference_values(self):
        oracle = ReferencePriceOracle()
        assert oracle.get_price("AAPL") == Decimal("150.75")
        assert oracle.get_price("BRK.B") == Decimal("150.75")
        assert oracle.get_price("BTC") == Decimal("45000.00")
        assert oracle.get_price("ETH") == Decimal("2500.00")
        assert oracle.get_price("DOGE") == Decimal("100.00")
        assert oracle.get_price("XAU") == Decimal("65.00")

    def test_other_coin_has_no_price(self):
        with pytest.raises(PriceUnavailableError):
            ReferencePriceOracle().get_price("OTHER")

    def test_unlisted_ticker_has_no_default(self):
        with pytest.raises(PriceUnavailableError):
            ReferencePriceOracle().get_price("ZZZZ")

    def test_overrides(self):
        oracle = ReferencePriceOracle(overrides={"aapl": "199.99", "NEW": "5"})
        assert oracle.get_price("AAPL") == Decimal("199.99")
        assert oracle.get_price("NEW") == Decimal("5")
        assert REFERENCE_PRICES["AAPL"] == Decimal("150.75")

    def test_from_settings(self):
        oracle = ReferencePriceOracle.from_settings(PricingSettings(overrides={"msft": "420"}))
        assert oracle.get_price("MSFT") == Decimal("420")
