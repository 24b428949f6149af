"""Shared setup logic for CLI commands."""

from __future__ import annotations

from decimal import Decimal

import click

from felosy.core.exceptions import ConfigurationError, ValidationError


def load_config(config_file: str | None = None):
    """Load and validate config, configuring logging from it.

    Returns:
        Tuple of (Config, FelosyConfig).
    """
    from felosy.core.config import Config
    from felosy.core.utils.logging import setup_logging_from_config

    try:
        config = Config(config_file=config_file)
        settings = config.validated()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    setup_logging_from_config(config)
    return config, settings


def parse_amount(value: str, name: str) -> Decimal:
    """Parse a command-line amount into a Decimal, as a click usage error on failure."""
    from felosy.financial.money import to_decimal

    try:
        return to_decimal(value, name)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint=f"--{name.replace('_', '-')}") from e
