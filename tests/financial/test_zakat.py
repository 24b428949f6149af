"""Tests for felosy.financial.calculators.zakat."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from felosy.core.config_schema import ZakatSettings
from felosy.core.exceptions import ValidationError
from felosy.financial.calculators.zakat import (
    ZakatConfig,
    ZakatEngine,
    ZakatStatus,
    calculate_zakat,
    check_nisab,
)
from felosy.financial.models import AssetKind, AssetSnapshot, PortfolioSnapshot


def _holding(asset_id, kind, value):
    return AssetSnapshot(
        asset_id=asset_id,
        name=asset_id,
        kind=kind,
        purchase_date=date(2024, 1, 1),
        purchase_price=Decimal("1"),
        current_value=Decimal(value),
        action_date=datetime(2024, 6, 1),
    )


def _snapshot(*holdings):
    return PortfolioSnapshot("abcdef1234567890", "owner-1", datetime(2024, 6, 1), tuple(holdings))


@pytest.fixture
def sample_snapshot():
    return _snapshot(
        _holding("eq", AssetKind.EQUITY, "6000"),
        _holding("au", AssetKind.PRECIOUS_METAL, "3000"),
        _holding("btc", AssetKind.COIN, "1000"),
        _holding("empty", AssetKind.PROPERTY, "0"),
    )


class TestZakatConfig:
    def test_defaults(self):
        config = ZakatConfig()
        assert config.zakat_rate == Decimal("0.025")
        assert config.nisab_threshold == Decimal("5000")

    def test_converts_inputs(self):
        config = ZakatConfig(nisab_threshold=6000, zakat_rate=0.03)
        assert config.nisab_threshold == Decimal("6000")
        assert config.zakat_rate == Decimal("0.03")

    @pytest.mark.parametrize("kwargs", [{"nisab_threshold": 0}, {"zakat_rate": 0}, {"zakat_rate": "1.5"}])
    def test_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            ZakatConfig(**kwargs)

    def test_gold_standard(self):
        config = ZakatConfig.gold_standard(Decimal("65"))
        # 85 g * 65 / g
        assert config.nisab_threshold == Decimal("5525.00")

    def test_gold_standard_custom_grams(self):
        config = ZakatConfig.gold_standard(100, grams=Decimal("87.48"))
        assert config.nisab_threshold == Decimal("8748.00")

    def test_from_settings(self):
        config = ZakatConfig.from_settings(ZakatSettings(rate="0.03", nisab_threshold="7000"))
        assert config.zakat_rate == Decimal("0.03")
        assert config.nisab_threshold == Decimal("7000")


class TestCheckNisab:
    def test_meets_nisab(self):
        meets, threshold = check_nisab(Decimal("10000"), ZakatConfig())
        assert meets is True
        assert threshold == Decimal("5000")

    def test_exactly_at_nisab(self):
        meets, _ = check_nisab(Decimal("5000"), ZakatConfig())
        assert meets is True

    def test_below_nisab(self):
        meets, _ = check_nisab(Decimal("4999.99"), ZakatConfig())
        assert meets is False


class TestCalculateZakat:
    def test_standard_rate(self):
        assert calculate_zakat(Decimal("10000"), ZakatConfig()) == Decimal("250.00")

    def test_rounds_half_up(self):
        # 5000.20 * 0.025 = 125.005
        assert calculate_zakat(Decimal("5000.20"), ZakatConfig()) == Decimal("125.01")

    def test_below_nisab_is_zero(self):
        assert calculate_zakat(Decimal("4000"), ZakatConfig()) == Decimal("0.00")


class TestZakatEngine:
    def test_scenario(self, sample_snapshot):
        engine = ZakatEngine(ZakatConfig(nisab_threshold=Decimal("5000")))
        assert engine.check_threshold(sample_snapshot) is ZakatStatus.LIABLE
        assert engine.calculate_zakat(sample_snapshot) == Decimal("250.00")

    def test_below_threshold(self):
        engine = ZakatEngine()
        snap = _snapshot(_holding("eq", AssetKind.EQUITY, "4999.99"))
        assert engine.check_threshold(snap) is ZakatStatus.BELOW_THRESHOLD
        assert engine.calculate_zakat(snap) == Decimal("0.00")

    def test_empty_portfolio(self):
        engine = ZakatEngine()
        assert engine.check_threshold(_snapshot()) is ZakatStatus.BELOW_THRESHOLD
        assert engine.calculate_zakat(_snapshot()) == Decimal("0")

    def test_config_override(self, sample_snapshot):
        engine = ZakatEngine()
        assert engine.calculate_zakat(sample_snapshot, ZakatConfig(nisab_threshold=Decimal("20000"))) == 0

    def test_by_asset_type_skips_empty_groups(self, sample_snapshot):
        by_kind = ZakatEngine().get_zakat_by_asset_type(sample_snapshot)
        assert by_kind == {
            AssetKind.EQUITY: Decimal("150.00"),
            AssetKind.PRECIOUS_METAL: Decimal("75.00"),
            AssetKind.COIN: Decimal("25.00"),
        }

    def test_by_asset_type_below_threshold(self):
        snap = _snapshot(_holding("btc", AssetKind.COIN, "100"))
        assert ZakatEngine().get_zakat_by_asset_type(snap) == {AssetKind.COIN: Decimal("2.50")}

    def test_pure_function_of_snapshot(self, sample_snapshot):
        engine = ZakatEngine()
        assert engine.calculate_zakat(sample_snapshot) == engine.calculate_zakat(sample_snapshot)


class TestAssess:
    def test_full_assessment(self, sample_snapshot):
        result = ZakatEngine().assess(sample_snapshot)
        assert result.meets_nisab is True
        assert result.zakatable_wealth == Decimal("10000.00")
        assert result.zakat_due == Decimal("250.00")
        assert result.asset_ids == ("eq", "au", "btc", "empty")

    def test_selected_assets(self, sample_snapshot):
        result = ZakatEngine().assess(sample_snapshot, asset_ids=["au", "btc"])
        assert result.status is ZakatStatus.BELOW_THRESHOLD
        assert result.zakatable_wealth == Decimal("4000.00")
        assert result.zakat_due == Decimal("0.00")
        assert set(result.by_kind) == {AssetKind.PRECIOUS_METAL, AssetKind.COIN}

    def test_to_dict(self, sample_snapshot):
        d = ZakatEngine().assess(sample_snapshot).to_dict()
        assert d["portfolio_id"] == "abcdef1234567890"
        assert d["nisab"]["meets_nisab"] is True
        assert d["nisab"]["status"] == "liable"
        assert d["zakat"]["due"] == "250.00"
        assert d["by_kind"]["equity"] == "150.00"
        assert d["calculation_date"] == date.today().isoformat()
