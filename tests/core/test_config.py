"""Tests for felosy.core.config."""

import json
import os
from decimal import Decimal

import pytest
import yaml

from felosy.core.config import Config, get_config, reset_config
from felosy.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.get("paths.data_dir").endswith(".felosy-data")
        assert config.get("zakat.rate") == "0.025"
        assert config.get("zakat.nisab_threshold") == "5000"
        assert config.get("screening.max_debt_ratio") == "0.33"
        assert config.get("logging.level") == "WARNING"

    def test_custom_data_dir(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("paths.data_dir") == tmp_dir
        assert config.get("paths.log_dir") == os.path.join(tmp_dir, "logs")

    def test_custom_env_prefix(self, monkeypatch, tmp_dir):
        monkeypatch.setenv("MYAPP_ZAKAT__RATE", "0.03")
        config = Config(env_prefix="MYAPP_", data_dir=tmp_dir)
        assert config.get("zakat.rate") == "0.03"

    def test_yaml_config_file(self, tmp_config_file, tmp_dir):
        config = Config(config_file=tmp_config_file, data_dir=tmp_dir)
        assert config.get("zakat.nisab_threshold") == "6000"
        assert config.get("pricing.overrides") == {"AAPL": "190.50"}
        # untouched defaults survive the merge
        assert config.get("zakat.nisab_gold_grams") == "85"

    def test_json_config_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.json")
        with open(config_path, "w") as f:
            json.dump({"logging": {"level": "DEBUG"}}, f)

        config = Config(config_file=config_path, data_dir=tmp_dir)
        assert config.get("logging.level") == "DEBUG"

    def test_env_overrides_file(self, tmp_config_file, tmp_dir, monkeypatch):
        monkeypatch.setenv("FELOSY_ZAKAT__NISAB_THRESHOLD", "7000")
        config = Config(config_file=tmp_config_file, data_dir=tmp_dir)
        assert config.get("zakat.nisab_threshold") == "7000"

    def test_missing_config_file(self, tmp_dir):
        with pytest.raises(ConfigurationError, match="not found"):
            Config(config_file=os.path.join(tmp_dir, "nope.yaml"))

    def test_unsupported_extension(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.ini")
        with open(config_path, "w") as f:
            f.write("[zakat]\nrate = 0.025\n")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            Config(config_file=config_path)

    def test_unparseable_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            f.write("zakat: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            Config(config_file=config_path)

    def test_non_mapping_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            yaml.dump(["a", "b"], f)
        with pytest.raises(ConfigurationError, match="mapping"):
            Config(config_file=config_path)

    def test_get_missing_key(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("nonexistent.key") is None
        assert config.get("nonexistent.key", "fallback") == "fallback"

    def test_set(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("custom.nested.value", 42)
        assert config.get("custom.nested.value") == 42

    def test_get_data_dir(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get_data_dir() == tmp_dir

    def test_ensure_directories(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.ensure_directories()
        assert os.path.isdir(os.path.join(tmp_dir, "logs"))

    def test_extra_defaults(self, tmp_dir):
        config = Config(data_dir=tmp_dir, defaults={"custom": {"key": "value"}})
        assert config.get("custom.key") == "value"


class TestValidated:
    def test_defaults_validate(self, tmp_dir):
        settings = Config(data_dir=tmp_dir).validated()
        assert settings.zakat.rate == Decimal("0.025")
        assert settings.zakat.nisab_threshold == Decimal("5000")
        assert settings.screening.max_non_permissible_income == Decimal("0.05")

    def test_file_values_become_decimal(self, tmp_config_file, tmp_dir):
        settings = Config(config_file=tmp_config_file, data_dir=tmp_dir).validated()
        assert settings.zakat.nisab_threshold == Decimal("6000")
        assert settings.pricing.overrides == {"AAPL": Decimal("190.50")}

    def test_invalid_rate(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("FELOSY_ZAKAT__RATE", "1.5")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            Config(data_dir=tmp_dir).validated()


class TestGetConfig:
    def test_singleton(self, tmp_dir):
        c1 = get_config(data_dir=tmp_dir)
        c2 = get_config()
        assert c1 is c2

    def test_reset(self, tmp_dir):
        c1 = get_config(data_dir=tmp_dir)
        reset_config()
        c2 = get_config(data_dir=tmp_dir)
        assert c1 is not c2
