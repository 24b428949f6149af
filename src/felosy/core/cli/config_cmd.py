"""felosy config: print the validated effective configuration."""

from __future__ import annotations

import click
import yaml


@click.command()
@click.option("--config", "config_file", default=None, type=click.Path(), help="YAML or JSON config file.")
def config(config_file: str | None) -> None:
    """Show the effective configuration after defaults, file and env overrides."""
    from felosy.core.cli.common import load_config

    _, settings = load_config(config_file)
    click.echo(yaml.safe_dump(settings.model_dump(mode="json"), sort_keys=False, default_flow_style=False))
