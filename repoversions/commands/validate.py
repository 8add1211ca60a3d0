"""
Handles the 'validate' and 'verify' commands.

Validation never stops at the first problem: every error is printed and
the command exits with VALIDATION_FAILED if there was any.
"""

import click

from ..cli_utils import (
    standard_command, add_common_options, manifest_from_options, want_table, emit_records
)
from ..exit_codes import RepoNotFoundError, ValidationFailedError
from ..render import render_validation
from ..validator import validate, verify_repo


def _report(result, table, format, fields, quiet):
    if want_table(table, format):
        render_validation(result)
    elif not quiet:
        emit_records([result.to_dict()], format, fields)

    if not result.is_valid:
        raise ValidationFailedError(result.error_messages())


@click.command(name='validate')
@add_common_options('manifest', 'table', 'format', 'fields', 'verbose', 'quiet', 'debug')
@standard_command()
def validate_handler(manifest_path, table, format, fields, quiet, progress, config, **kwargs):
    """Validate version formats, dependencies and cycles.

    \b
    Checks, all of which always run:
      - every version is X.Y.Z
      - every required repository exists in the manifest
      - the dependency graph has no cycle

    \b
    Examples:
        repoversions validate
        repoversions validate -m versions.json --table
    """
    manifest = manifest_from_options(manifest_path, config)
    progress(f"Validating {len(manifest)} repositories...")

    result = validate(manifest)
    if result.is_valid:
        progress.success("Manifest is valid")
    _report(result, table, format, fields, quiet)


@click.command(name='verify')
@click.argument('repo')
@add_common_options('manifest', 'table', 'format', 'fields', 'verbose', 'quiet', 'debug')
@standard_command()
def verify_handler(repo, manifest_path, table, format, fields, quiet, progress, config, **kwargs):
    """Check a single repository's version and dependencies.

    REPO: Repository name as it appears in the manifest
    """
    manifest = manifest_from_options(manifest_path, config)
    if repo not in manifest:
        raise RepoNotFoundError(repo)

    progress(f"Verifying {repo}...")
    _report(verify_repo(manifest, repo), table, format, fields, quiet)
