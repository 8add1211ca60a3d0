"""
Load and save versions manifests.

Supported formats share one schema:
- TOML (default): versions.toml
- JSON: versions.json
- YAML: versions.yaml / versions.yml

The format is picked from the file suffix. Anything that is not JSON or
YAML is read as TOML.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml
import yaml

from .domain import VersionsManifest
from .errors import LoadError, ParseError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

FORMATS = ('toml', 'json', 'yaml')


def detect_format(path: PathLike) -> str:
    """Pick the manifest format from the file suffix."""
    suffix = Path(path).suffix.lower()
    if suffix == '.json':
        return 'json'
    if suffix in ('.yaml', '.yml'):
        return 'yaml'
    return 'toml'


def load_manifest(path: PathLike, fmt: Optional[str] = None) -> VersionsManifest:
    """
    Load a manifest from a file.

    Args:
        path: Manifest file
        fmt: Force a format ('toml', 'json', 'yaml'). Auto-detected if None.

    Returns:
        Fully populated VersionsManifest

    Raises:
        LoadError: If the file cannot be read
        ParseError: If the content is malformed or does not match the schema
    """
    fmt = fmt or detect_format(path)
    if fmt not in FORMATS:
        raise ValueError(f"Unknown manifest format: {fmt}")

    content = _read_text(path)
    logger.debug(f"Parsing {path} as {fmt}")
    return parse_manifest(_decode(content, fmt, str(path)), path=str(path))


def load_manifest_toml(path: PathLike) -> VersionsManifest:
    return load_manifest(path, fmt='toml')


def load_manifest_json(path: PathLike) -> VersionsManifest:
    return load_manifest(path, fmt='json')


def load_manifest_yaml(path: PathLike) -> VersionsManifest:
    return load_manifest(path, fmt='yaml')


def loads_manifest(content: str, fmt: str = 'toml') -> VersionsManifest:
    """Parse a manifest from a string."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown manifest format: {fmt}")
    return parse_manifest(_decode(content, fmt, None))


def parse_manifest(data: Any, path: Optional[str] = None) -> VersionsManifest:
    """
    Build a manifest from already decoded data.

    Raises:
        ParseError: If the data does not match the manifest schema
    """
    try:
        manifest = VersionsManifest.from_dict(data)
    except ParseError as e:
        if path is None:
            raise
        raise ParseError(f"Failed to parse manifest {path}: {e}", path=path, field=e.field) from e

    logger.debug(f"Loaded {len(manifest)} repositories")
    return manifest


def dumps_manifest(manifest: VersionsManifest, fmt: str = 'toml') -> str:
    """Serialize a manifest to text in the given format."""
    data = manifest.to_dict()
    if fmt == 'toml':
        return toml.dumps(data)
    if fmt == 'json':
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt == 'yaml':
        return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    raise ValueError(f"Unknown manifest format: {fmt}")


def save_manifest(manifest: VersionsManifest, path: PathLike, fmt: Optional[str] = None) -> Path:
    """
    Write a manifest to a file, creating parent directories.

    Returns:
        Path that was written
    """
    path = Path(path)
    fmt = fmt or detect_format(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_manifest(manifest, fmt), encoding='utf-8')
    logger.debug(f"Manifest saved to {path}")
    return path


def _read_text(path: PathLike) -> str:
    try:
        return Path(path).read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise ParseError(f"Failed to parse manifest {path}: not valid UTF-8 ({e})",
                         path=str(path)) from e
    except OSError as e:
        raise LoadError(f"Failed to read manifest {path}: {e}", path=str(path)) from e


def _decode(content: str, fmt: str, path: Optional[str]) -> Dict[str, Any]:
    source = path or "<string>"
    try:
        if fmt == 'json':
            return json.loads(content)
        if fmt == 'yaml':
            return yaml.safe_load(content)
        return tomllib.loads(content)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ParseError(f"Failed to parse manifest {source}: {e}", path=path) from e
