"""
Shared behaviour for repoversions commands.

Every data command prints records to stdout (JSONL unless another format
is chosen) and status lines to stderr, and ends with an exit code from
exit_codes.
"""

import json
import sys
from functools import wraps
from typing import Any, Generator, Iterable, List, Optional

import click

from .config import configure_logging, load_config
from .domain import VersionsManifest
from .exit_codes import (
    INTERRUPTED, SUCCESS, CommandError, ConfigError, ValidationFailedError,
    get_exit_code_for_exception,
)
from .format_utils import OUTPUT_FORMATS, format_output, get_format_from_env
from .loader import FORMATS as MANIFEST_FORMATS, load_manifest
from .progress import get_progress


def _print_lines(lines: Iterable[str]) -> None:
    for line in lines:
        print(line, flush=True)


def _write_result(result: Any, output_format: str, fields: Optional[List[str]],
                  streaming: bool, quiet: bool) -> None:
    if result is None:
        return
    if quiet:
        # Generators still run so that their errors surface
        if isinstance(result, Generator):
            for _ in result:
                pass
        return

    if isinstance(result, Generator) and streaming and output_format == 'jsonl':
        _print_lines(json.dumps(item, ensure_ascii=False) for item in result)
    elif isinstance(result, (Generator, list, tuple)):
        _print_lines(format_output(list(result), output_format, fields))
    elif isinstance(result, dict):
        _print_lines(format_output([result], output_format, fields))
    else:
        print(result, flush=True)


def _print_error_record(error: Exception, exit_code: int) -> None:
    print(json.dumps({
        "error": str(error),
        "type": type(error).__name__,
        "exit_code": exit_code,
    }, ensure_ascii=False), flush=True)


def standard_command(streaming: bool = False):
    """
    Give a click command the standard repoversions behaviour.

    The wrapped function receives ``progress`` and ``config`` keyword
    arguments and returns records (a generator, list or dict) or None if
    it printed its own output.

    Args:
        streaming: Print generator records as they are produced when the
            output format is jsonl.
    """
    def decorator(func):

        @wraps(func)
        def wrapper(*args, **kwargs):
            quiet = kwargs.get('quiet', False)
            fields = kwargs['fields'].split(',') if kwargs.get('fields') else None

            config = load_config()
            configure_logging(config, level='DEBUG' if kwargs.get('debug') else None)
            output_format = kwargs.get('format') or get_format_from_env(
                config.get('output', {}).get('format', 'jsonl'))

            progress = get_progress(enabled=kwargs.get('verbose') or None)
            kwargs['progress'] = progress
            kwargs['config'] = config

            try:
                result = func(*args, **kwargs)
                _write_result(result, output_format, fields, streaming, quiet)
            except KeyboardInterrupt:
                progress.error("Interrupted by user")
                sys.exit(INTERRUPTED)
            except click.ClickException:
                raise
            except ValidationFailedError as e:
                for message in e.errors:
                    progress.error(message)
                sys.exit(e.exit_code)
            except Exception as e:
                exit_code = e.exit_code if isinstance(e, CommandError) else get_exit_code_for_exception(e)
                progress.error(str(e))
                if not quiet:
                    _print_error_record(e, exit_code)
                sys.exit(exit_code)

            sys.exit(SUCCESS)

        return wrapper
    return decorator


def emit_records(records, output_format: Optional[str], fields: Optional[List[str]] = None) -> None:
    """Print records now, for commands that may still fail afterwards."""
    if isinstance(fields, str):
        fields = fields.split(',')
    _print_lines(format_output(list(records), output_format or get_format_from_env(), fields))


def manifest_from_options(manifest_path: Optional[str], config: dict) -> VersionsManifest:
    """
    Load the manifest given with -m, else the configured ``manifest.path``.

    Raises:
        ConfigError: ``manifest.format`` names an unsupported format
        LoadError, ParseError: Propagated from the loader
    """
    settings = config.get('manifest', {})
    path = manifest_path or settings.get('path') or 'versions.toml'
    fmt = settings.get('format') or None
    if fmt is not None and fmt not in MANIFEST_FORMATS:
        raise ConfigError(f"manifest.format must be one of {', '.join(MANIFEST_FORMATS)}, got '{fmt}'")
    return load_manifest(path, fmt=fmt)


def want_table(table: Optional[bool], output_format: Optional[str]) -> bool:
    """Tables on an interactive terminal unless --no-table or a format was given."""
    if table is not None:
        return table
    return output_format is None and sys.stdout.isatty()


common_options = {
    'manifest': click.option('-m', '--manifest', 'manifest_path', default=None,
                             type=click.Path(dir_okay=False),
                             help='Manifest file (default: manifest.path from config, or versions.toml)'),
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Show status messages even when stderr is not a terminal'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                          help='Suppress record output; the exit code still reports the result'),
    'debug': click.option('--debug', is_flag=True,
                          help='Enable debug logging'),
    'table': click.option('--table/--no-table', default=None,
                          help='Render a rich table (default: only on a terminal)'),
    'format': click.option('-f', '--format',
                           type=click.Choice(OUTPUT_FORMATS),
                           help='Output format (default: jsonl, REPOVERSIONS_FORMAT or output.format)'),
    'fields': click.option('--fields',
                           help='Comma-separated fields to include in csv/tsv output'),
}


def add_common_options(*option_names):
    """
    Attach shared options by name.

    Example:
        @add_common_options('manifest', 'format', 'quiet')
        def handler(manifest_path, format, quiet, **kwargs):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            func = common_options[name](func)
        return func
    return decorator
