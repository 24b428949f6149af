"""felosy prices: show the reference price table."""

from __future__ import annotations

import click


@click.command()
@click.option("--config", "config_file", default=None, type=click.Path(), help="YAML or JSON config file.")
def prices(config_file: str | None) -> None:
    """List every symbol the reference price oracle can quote."""
    from felosy.core.cli.common import load_config
    from felosy.financial.pricing import ReferencePriceOracle

    _, settings = load_config(config_file)
    oracle = ReferencePriceOracle.from_settings(settings.pricing)

    click.echo(f"{'Symbol':<10} {'Price':>12}")
    click.echo("-" * 23)
    for symbol, price in oracle.table().items():
        click.echo(f"{symbol:<10} {price:>12,.2f}")
