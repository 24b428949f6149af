"""Shared test fixtures for felosy."""

import os
import tempfile
from datetime import date

import pytest

from felosy.financial.pricing import FixedPriceOracle


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
        },
        "zakat": {
            "rate": "0.025",
            "nisab_threshold": "6000",
        },
        "pricing": {
            "overrides": {"AAPL": "190.50"},
        },
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def oracle():
    """Deterministic prices for every asset kind."""
    return FixedPriceOracle(
        {
            "AAPL": "150",
            "MSFT": "400",
            "BTC": "45000",
            "ETH": "2500",
            "XAU": "65",
            "XAG": "0.80",
        }
    )


@pytest.fixture
def purchase_date():
    return date(2024, 1, 15)
