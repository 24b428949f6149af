"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``FelosyConfig``
instance.  Existing dict-based access continues to work unchanged.

Money and ratio settings are parsed straight into ``Decimal`` so that no
binary float ever reaches the valuation code.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    log_dir: Path | None = None

    @field_validator("data_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class LoggingConfig(BaseModel):
    """Log level and optional log file."""

    level: str = "WARNING"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}; expected one of {sorted(_LOG_LEVELS)}")
        return level


class ZakatSettings(BaseModel):
    """Nisab threshold and levy rate."""

    rate: Decimal = Field(default=Decimal("0.025"), gt=0, le=1)
    nisab_threshold: Decimal = Field(default=Decimal("5000"), gt=0)
    nisab_gold_grams: Decimal = Field(default=Decimal("85"), gt=0)


class ScreeningSettings(BaseModel):
    """Thresholds for the compliance screen's ratio rules."""

    max_debt_ratio: Decimal = Field(default=Decimal("0.33"), ge=0, le=1)
    max_non_permissible_income: Decimal = Field(default=Decimal("0.05"), ge=0, le=1)


class PricingSettings(BaseModel):
    """Per-symbol price overrides layered over the reference table."""

    overrides: dict[str, Decimal] = {}

    @field_validator("overrides")
    @classmethod
    def _positive_prices(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        bad = sorted(symbol for symbol, price in v.items() if price <= 0)
        if bad:
            raise ValueError(f"price overrides must be positive: {bad}")
        return {symbol.upper(): price for symbol, price in v.items()}


class FelosyConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.felosy-data"))
    logging: LoggingConfig = LoggingConfig()
    zakat: ZakatSettings = ZakatSettings()
    screening: ScreeningSettings = ScreeningSettings()
    pricing: PricingSettings = PricingSettings()
