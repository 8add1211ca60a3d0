"""
Handles the 'show' command for listing manifest entries.
"""

import click

from ..cli_utils import standard_command, add_common_options, manifest_from_options, want_table
from ..render import render_manifest_table


@click.command(name='show')
@click.option('--metadata', 'show_metadata', is_flag=True, help='Show the metadata table instead of repositories')
@add_common_options('manifest', 'table', 'format', 'fields', 'verbose', 'quiet', 'debug')
@standard_command(streaming=True)
def show_handler(show_metadata, manifest_path, table, format, progress, config, **kwargs):
    """Show every repository in the manifest.

    \b
    Examples:
        repoversions show                        # JSONL, one record per repository
        repoversions show -m release/versions.json --table
        repoversions show --metadata
    """
    manifest = manifest_from_options(manifest_path, config)
    progress(f"Loaded {len(manifest)} repositories")

    if show_metadata:
        return dict(manifest.metadata or {})

    if want_table(table, format):
        render_manifest_table(manifest)
        return None

    return ({'name': name, **repo.to_dict()} for name, repo in manifest.versions.items())
