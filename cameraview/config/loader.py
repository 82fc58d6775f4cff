"""
Configuration loader: TOML file merged over the defaults, then validated.
"""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import Any

from cameraview.config.defaults import DEFAULTS

FACING_VALUES = {"back", "front"}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
    section = config.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table, got {section!r}")
    return section


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Check the values the app bootstrap reads; raise ValueError naming the bad key."""
    workers = _section(config, "workers")
    if not _is_int(workers.get("max")) or workers["max"] < 1:
        raise ValueError(f"workers.max must be a positive integer, got {workers.get('max')!r}")

    cameras = _section(config, "cameras")
    if not _is_int(cameras.get("max_index")) or cameras["max_index"] < 0:
        raise ValueError(f"cameras.max_index must be an integer >= 0, got {cameras.get('max_index')!r}")

    facing = cameras.get("facing", {})
    if not isinstance(facing, dict):
        raise ValueError("cameras.facing must be a table of camera index -> facing")
    for index, value in facing.items():
        if not str(index).isdigit():
            raise ValueError(f"cameras.facing key {index!r} is not a camera index")
        if not isinstance(value, str) or value not in FACING_VALUES:
            raise ValueError(f"cameras.facing.{index} must be 'back' or 'front', got {value!r}")

    level = _section(config, "logging").get("level")
    if not isinstance(level, str) or not level:
        raise ValueError(f"logging.level must be a level name, got {level!r}")
    return config


def load_config(path: Path) -> dict[str, Any]:
    """
    Load a TOML config file, merge it over defaults and validate the result.
    Missing files return defaults; malformed or invalid files raise ValueError.
    """
    if path.is_dir():
        raise IsADirectoryError(f"Config path points to a directory: {path}")

    user_config: dict[str, Any] = {}
    if path.exists():
        try:
            with path.open("rb") as fh:
                user_config = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid config file {path}: {exc}") from exc

    try:
        return validate_config(_deep_merge(DEFAULTS, user_config))
    except ValueError as exc:
        raise ValueError(f"Invalid config file {path}: {exc}") from exc
