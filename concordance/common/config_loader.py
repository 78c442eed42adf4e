"""
Configuration Loader

Loads reader options from YAML configuration files and
CONCORDANCE_* environment variables.
"""

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..models.options import DatFileOptions, EmptyField

logger = logging.getLogger(__name__)

OPTIONS_FILENAME = 'dat_options.yaml'

# Environment variable -> DatFileOptions field
ENV_OVERRIDES = {
    'CONCORDANCE_READER_BUFFER_CHARS': 'reader_buffer_chars',
    'CONCORDANCE_PARSE_CHUNK_CHARS': 'parse_chunk_chars',
    'CONCORDANCE_EMPTY_FIELD': 'empty_field',
    'CONCORDANCE_FILE_BUFFER_BYTES': 'file_buffer_bytes',
}

_INT_FIELDS = ('reader_buffer_chars', 'parse_chunk_chars', 'file_buffer_bytes')


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file from the config directory.

    Args:
        filename: Name of the config file (e.g., 'dat_options.yaml')

    Returns:
        Parsed YAML content as dictionary (empty for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return _read_yaml(config_path)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
    return data


def parse_empty_field(value: Any) -> EmptyField:
    """
    Convert a config value to an EmptyField policy.

    Accepts an EmptyField member or its name/value in any case
    ('null', 'KEEP', 'Omit').
    """
    if isinstance(value, EmptyField):
        return value
    if value is None:
        # YAML reads a bare null as None
        return EmptyField.NULL
    text = str(value).strip().lower()
    for member in EmptyField:
        if text == member.value:
            return member
    choices = ', '.join(m.value for m in EmptyField)
    raise ValueError(f"Invalid empty_field '{value}'. Expected one of: {choices}")


def options_from_mapping(values: Mapping[str, Any], base: Optional[DatFileOptions] = None) -> DatFileOptions:
    """
    Build DatFileOptions from a plain mapping, on top of base.

    Raises:
        ValueError: On unknown keys or values that are not integers
    """
    base = base or DatFileOptions()
    known = set(_INT_FIELDS) | {'empty_field'}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown option(s): {', '.join(unknown)}")

    fields: Dict[str, Any] = {}
    for key, value in values.items():
        if key == 'empty_field':
            fields[key] = parse_empty_field(value)
            continue
        try:
            fields[key] = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Option '{key}' must be an integer, got {value!r}") from None

    return replace(base, **fields)


def load_options(path: Optional[str | Path] = None, env: Optional[Mapping[str, str]] = None) -> DatFileOptions:
    """
    Load reader options.

    Precedence (lowest to highest): built-in defaults, YAML file,
    CONCORDANCE_* environment variables.

    Args:
        path: YAML file to load. If None, config/dat_options.yaml is used
              when it exists.
        env: Environment mapping (default: os.environ)

    Returns:
        DatFileOptions (not clamped; readers clamp before use)
    """
    options = DatFileOptions()

    if path is not None:
        options = options_from_mapping(_read_yaml(Path(path)), options)
        logger.debug("Loaded options from %s", path)
    else:
        try:
            options = options_from_mapping(load_config(OPTIONS_FILENAME), options)
        except FileNotFoundError:
            logger.debug("No %s found, using defaults", OPTIONS_FILENAME)

    env = os.environ if env is None else env
    overrides = {
        field: env[name]
        for name, field in ENV_OVERRIDES.items()
        if env.get(name, '').strip()
    }
    if overrides:
        options = options_from_mapping(overrides, options)
        logger.debug("Applied environment overrides: %s", ', '.join(sorted(overrides)))

    return options
