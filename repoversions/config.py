"""
Layered configuration for the repoversions CLI.

Values are resolved as defaults, then the config file, then
``REPOVERSIONS_<SECTION>_<KEY>`` environment variables. The config file is
``$REPOVERSIONS_CONFIG`` when set, otherwise the first non-empty
``~/.repoversions/config.{json,toml,yaml,yml}``.
"""

import copy
import json
import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml
import yaml

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger("repoversions")

ENV_PREFIX = "REPOVERSIONS_"
CONFIG_ENV_VAR = "REPOVERSIONS_CONFIG"
CONFIG_FILENAMES = ('config.json', 'config.toml', 'config.yaml', 'config.yml')

DEFAULT_CONFIG: Dict[str, Any] = {
    "manifest": {
        "path": "versions.toml",
        "format": "",  # empty: detect from the file suffix
    },
    "output": {
        "format": "jsonl",
    },
    "logging": {
        "level": "WARNING",
        "format": "%(levelname)s: %(message)s",
    },
}


def get_config_dir() -> Path:
    return Path.home() / '.repoversions'


def get_config_path() -> Path:
    """
    Locate the config file.

    Falls back to ``~/.repoversions/config.json`` when nothing exists yet,
    which is where ``config init`` writes.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit and Path(explicit).exists():
        return Path(explicit)

    config_dir = get_config_dir()
    for filename in CONFIG_FILENAMES:
        candidate = config_dir / filename
        if candidate.is_file() and candidate.stat().st_size > 0:
            return candidate

    return config_dir / CONFIG_FILENAMES[0]


def get_default_config() -> Dict[str, Any]:
    """Return a fresh copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config() -> Dict[str, Any]:
    """
    Build the effective configuration.

    A config file that cannot be read or parsed is logged and ignored so
    that commands still run with defaults.
    """
    config = get_default_config()
    config_path = get_config_path()

    if config_path.exists():
        try:
            from_file = _read_config_file(config_path)
        except (OSError, tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")
        else:
            if isinstance(from_file, dict):
                config = merge_configs(config, from_file)
            elif from_file is not None:
                logger.error(f"Ignoring config {config_path}: top level must be a table")

    return apply_env_overrides(config)


def _read_config_file(config_path: Path) -> Any:
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ('.yaml', '.yml'):
            return yaml.safe_load(f)
        return json.load(f)


def save_config(config: Dict[str, Any], config_path: Optional[Path] = None) -> Path:
    """Write ``config`` in the format its suffix names. Returns the path."""
    config_path = Path(config_path) if config_path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix == '.toml':
            toml.dump(config, f)
        elif suffix in ('.yaml', '.yml'):
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(config, f, indent=2)
            f.write('\n')

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override_config`` into a copy of ``base_config``."""
    merged = dict(base_config)
    for key, value in override_config.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered in ('true', 'yes', 'on'):
        return True
    if lowered in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def _resolve_key(section: Dict[str, Any], parts: List[str]) -> Optional[tuple]:
    """
    Find the existing key path that ``parts`` spells out.

    Keys may themselves contain underscores (``strict_order``), so the
    longest key matching the leading parts wins at each level.
    """
    candidates = sorted(section, key=lambda k: len(k.split('_')), reverse=True)
    for key in candidates:
        key_parts = key.split('_')
        if parts[:len(key_parts)] != key_parts:
            continue
        rest = parts[len(key_parts):]
        if not rest:
            return (section, key)
        if isinstance(section[key], dict):
            found = _resolve_key(section[key], rest)
            if found:
                return found
    return None


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Override existing keys from the environment.

    ``REPOVERSIONS_MANIFEST_PATH=release/versions.toml`` sets
    ``manifest.path``. Variables that name no existing key are ignored;
    "true"/"false" style values and digit strings are converted.
    """
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX) or env_key == CONFIG_ENV_VAR:
            continue
        parts = env_key[len(ENV_PREFIX):].lower().split('_')
        found = _resolve_key(config, parts)
        if found:
            section, key = found
            section[key] = _coerce(value)
    return config


def configure_logging(config: Optional[Dict[str, Any]] = None, level: Optional[str] = None) -> None:
    """Apply the ``logging`` section to the repoversions logger."""
    logging_config = (config or DEFAULT_CONFIG).get("logging", {})
    level_name = str(level or logging_config.get("level", "WARNING")).upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))

    log_format = logging_config.get("format")
    if log_format:
        formatter = logging.Formatter(log_format)
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)
