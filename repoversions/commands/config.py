"""
Handles the 'config' command group.
"""

import json

import click

from ..config import get_config_path, get_default_config, load_config, save_config


@click.group("config")
def config_cmd():
    """Inspect or create the repoversions configuration file."""


@config_cmd.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
def init_config(force):
    """Write the default configuration.

    The file goes to $REPOVERSIONS_CONFIG or ~/.repoversions/config.json.
    """
    target = get_config_path()
    if target.exists() and not force:
        click.echo(f"Configuration already exists at {target} (use --force to overwrite)", err=True)
        return
    written = save_config(get_default_config(), target)
    click.echo(json.dumps({"config_path": str(written)}))


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Indented JSON instead of a single line")
@click.option("--path", "path_only", is_flag=True, help="Only print which config file is in use")
def show_config(pretty, path_only):
    """Print the effective configuration.

    Defaults, the config file and REPOVERSIONS_* environment overrides are
    all applied.
    """
    if path_only:
        click.echo(json.dumps({"config_path": str(get_config_path())}))
        return

    click.echo(json.dumps(load_config(), indent=2 if pretty else None, ensure_ascii=False))
