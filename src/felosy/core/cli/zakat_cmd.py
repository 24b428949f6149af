"""felosy zakat / felosy nisab: obligation and threshold from the command line."""

from __future__ import annotations

import click

from felosy.core.cli.common import load_config, parse_amount


@click.command()
@click.option("--net-worth", required=True, help="Total zakatable wealth.")
@click.option("--nisab", default=None, help="Nisab threshold (defaults to zakat.nisab_threshold).")
@click.option("--rate", default=None, help="Zakat rate (defaults to zakat.rate).")
@click.option("--config", "config_file", default=None, type=click.Path(), help="YAML or JSON config file.")
def zakat(net_worth: str, nisab: str | None, rate: str | None, config_file: str | None) -> None:
    """Check the nisab and compute the zakat due on NET_WORTH."""
    from felosy.core.exceptions import ValidationError
    from felosy.financial.calculators.zakat import ZakatConfig, calculate_zakat, check_nisab

    _, settings = load_config(config_file)
    wealth = parse_amount(net_worth, "net_worth")

    try:
        zakat_config = ZakatConfig(
            nisab_threshold=parse_amount(nisab, "nisab") if nisab else settings.zakat.nisab_threshold,
            zakat_rate=parse_amount(rate, "rate") if rate else settings.zakat.rate,
        )
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e

    meets, threshold = check_nisab(wealth, zakat_config)
    due = calculate_zakat(wealth, zakat_config)

    click.echo(f"Net worth:  {wealth:,.2f}")
    click.echo(f"Nisab:      {threshold:,.2f}")
    click.echo(f"Status:     {'liable' if meets else 'below threshold'}")
    click.echo(f"Rate:       {zakat_config.zakat_rate}")
    click.echo(f"Zakat due:  {due:,.2f}")


@click.command()
@click.option("--gold-price", required=True, help="Gold price per gram.")
@click.option("--grams", default=None, help="Nisab weight in grams (defaults to zakat.nisab_gold_grams).")
@click.option("--config", "config_file", default=None, type=click.Path(), help="YAML or JSON config file.")
def nisab(gold_price: str, grams: str | None, config_file: str | None) -> None:
    """Gold-standard nisab threshold for a given gold price."""
    from felosy.core.exceptions import ValidationError
    from felosy.financial.calculators.zakat import ZakatConfig

    _, settings = load_config(config_file)
    price = parse_amount(gold_price, "gold_price")
    weight = parse_amount(grams, "grams") if grams else settings.zakat.nisab_gold_grams
    try:
        zakat_config = ZakatConfig.gold_standard(price, grams=weight, zakat_rate=settings.zakat.rate)
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e

    click.echo(f"Nisab: {zakat_config.nisab_threshold:,.2f}")
