# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader. Reads a YAML file (or a plain mapping) and produces a
validated Config.

The pipeline is linear:
  1. Read the file and parse it with yaml.safe_load
  2. Pick the base: the preset named under ``preset:``, or the defaults
  3. Turn YAML lists into the tuple types Config expects
  4. Merge the remaining keys onto the base through the validated path

A file looks like:

    preset: xkcd
    num_words: 6
    word_length: [4, 7]
    padding:
      char: "!?"
      before: 1

Nothing is registered as a preset here; a file only ever yields a Config.
The base preset's ``meta`` (its name and description) is not carried over:
a derived config has only the ``meta`` its file gives it.
Any problem stops the load with a clear error. There are no fallbacks.
"""

from pathlib import Path
from typing import Any, Mapping

import yaml

from xkpass.config.exceptions import ConfigLoadError, ConfigValidationError
from xkpass.config.model import Config, LengthRange
from xkpass.logging.logger import get_logger

logger = get_logger(__name__)

_RANGE_FIELDS = ("word_length", "word_length_bounds")


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed mapping.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, isn't valid
            YAML, or doesn't hold a mapping at the top level.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def _to_range(value: Any) -> Any:
    """[4, 8] and {min: 4, max: 8} become LengthRange(4, 8); anything else is left for the schema."""
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return LengthRange(*value)
    if isinstance(value, Mapping) and set(value) == {"min", "max"}:
        return LengthRange(value["min"], value["max"])
    return value


def _coerce_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    fields = dict(data)

    for name in _RANGE_FIELDS:
        if name in fields:
            fields[name] = _to_range(fields[name])

    if isinstance(fields.get("digits"), list):
        fields["digits"] = tuple(fields["digits"])

    return fields


def config_from_mapping(data: Mapping[str, Any]) -> Config:
    """
    Build a validated Config from a plain mapping, as parsed from YAML or JSON.

    The optional ``preset`` key names a base preset; the other keys override it.
    The base's ``meta`` is replaced by the mapping's own ``meta``, or emptied.

    Raises:
        ConfigValidationError: Unknown base preset, unknown field, or schema violation.
    """
    # Imported here so loading a file doesn't require building the preset table up front.
    from xkpass.config.presets import get_preset

    fields = _coerce_fields(data)
    preset_name = fields.pop("preset", None)

    if preset_name is None:
        return Config.new(**fields)

    base = get_preset(preset_name)
    if base is None:
        raise ConfigValidationError(f"Unknown base preset {preset_name!r}", field="preset")

    fields.setdefault("meta", {})
    return base.merge(**fields)


def load_config(config_path: Path) -> Config:
    """
    Load and validate a Config from a YAML file.

    An empty file yields the default Config.

    Args:
        config_path: Path to a YAML config file.

    Returns:
        A validated, frozen Config.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations, unknown fields, unknown base preset.
    """
    raw_data = _read_yaml_file(config_path)

    try:
        config = config_from_mapping(raw_data)
    except ConfigValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}: {err.message}", field=err.field
        ) from err

    logger.debug(
        "config_loaded",
        extra={"path": str(config_path), "preset": raw_data.get("preset")},
    )
    return config
