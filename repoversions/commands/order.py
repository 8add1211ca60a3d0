"""
Handles the build-order commands: 'order', 'cycles' and 'dependents'.
"""

import click

from ..cli_utils import standard_command, add_common_options, manifest_from_options, want_table
from ..exit_codes import RepoNotFoundError, ValidationFailedError
from ..graph import build_order, build_levels, dependents_of, find_cycle
from ..render import render_build_order, render_levels
from ..validator import validate


@click.command(name='order')
@click.option('--levels', is_flag=True, help='Group repositories into parallel build levels')
@click.option('--strict', is_flag=True, help='Validate the manifest first and refuse to order an invalid one')
@add_common_options('manifest', 'table', 'format', 'fields', 'verbose', 'quiet', 'debug')
@standard_command(streaming=True)
def order_handler(levels, strict, manifest_path, table, format, progress, config, **kwargs):
    """Print the order in which repositories must be built.

    Dependencies always come before the repositories that require them.
    Repositories without a dependency relationship may appear in any
    relative order; use --levels to see which can build in parallel.

    A circular dependency aborts the command without printing an order.

    \b
    Examples:
        repoversions order
        repoversions order --levels
        repoversions order --strict -m versions.toml
    """
    manifest = manifest_from_options(manifest_path, config)

    if strict:
        result = validate(manifest)
        if not result.is_valid:
            raise ValidationFailedError(result.error_messages())

    if levels:
        groups = build_levels(manifest)
        progress(f"{len(manifest)} repositories in {len(groups)} levels")
        if want_table(table, format):
            render_levels(groups)
            return None
        return ({'level': index, 'repos': names} for index, names in enumerate(groups))

    order = build_order(manifest)
    progress(f"Build order computed for {len(order)} repositories")
    if want_table(table, format):
        render_build_order(order, manifest)
        return None

    return (
        {
            'position': position,
            'name': name,
            'version': manifest.versions[name].version,
            'git_tag': manifest.versions[name].git_tag,
        }
        for position, name in enumerate(order, 1)
    )


@click.command(name='cycles')
@add_common_options('manifest', 'format', 'verbose', 'quiet', 'debug')
@standard_command()
def cycles_handler(manifest_path, progress, config, **kwargs):
    """Report one circular dependency, if any exists."""
    manifest = manifest_from_options(manifest_path, config)
    cycle = find_cycle(manifest)
    if cycle is None:
        progress.success("No circular dependencies")
        return []
    return [{'cycle': " -> ".join(cycle), 'path': cycle}]


@click.command(name='dependents')
@click.argument('repo')
@click.option('--direct', is_flag=True, help='Only repositories that require REPO directly')
@add_common_options('manifest', 'format', 'fields', 'verbose', 'quiet', 'debug')
@standard_command()
def dependents_handler(repo, direct, manifest_path, progress, config, **kwargs):
    """List repositories that depend on REPO.

    These are the repositories to rebuild when REPO changes.
    """
    manifest = manifest_from_options(manifest_path, config)
    names = dependents_of(manifest, repo, transitive=not direct)
    if repo not in manifest and not names:
        raise RepoNotFoundError(repo)

    progress(f"{len(names)} repositories depend on {repo}")
    return [
        {'name': name, 'version': manifest.versions[name].version}
        for name in names
    ]
