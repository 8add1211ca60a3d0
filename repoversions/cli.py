#!/usr/bin/env python3

import click

from repoversions.commands.show import show_handler
from repoversions.commands.validate import validate_handler, verify_handler
from repoversions.commands.order import order_handler, cycles_handler, dependents_handler
from repoversions.commands.config import config_cmd


@click.group()
@click.version_option(package_name="repoversions")
def cli():
    """repoversions - Version and dependency manifest for multi-repository projects.

    Reads a versions manifest (TOML, JSON or YAML), checks that it is
    well-formed and computes the order in which repositories must be built.
    """
    pass


cli.add_command(show_handler, name='show')
cli.add_command(validate_handler, name='validate')
cli.add_command(verify_handler, name='verify')
cli.add_command(order_handler, name='order')
cli.add_command(cycles_handler, name='cycles')
cli.add_command(dependents_handler, name='dependents')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
