"""Felosy CLI: zakat, nisab, price and config commands."""

import click

from felosy import __version__


@click.group()
@click.version_option(version=__version__, package_name="felosy")
def main() -> None:
    """Felosy: personal asset valuation, zakat and compliance."""


# Register subcommands
from .config_cmd import config
from .prices_cmd import prices
from .zakat_cmd import nisab, zakat

main.add_command(zakat)
main.add_command(nisab)
main.add_command(prices)
main.add_command(config)
