"""Runtime settings: built-in defaults overlaid with an optional YAML file."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from hypr_scale import utility
from hypr_scale.ladder import DEFAULT_SCALE_STEPS

SETTINGS_ENV = "HYPR_SCALE_SETTINGS"
SETTINGS_FILENAME = "adjust_scale.yaml"


class SettingsError(ValueError):
    """Raised when a settings value has the wrong type or range."""


@dataclass(frozen=True)
class Settings:
    config_dir: Path = Path.home() / ".config/hypr/edit_here/source"
    # Priority order; the last name is created when none exist
    config_files: tuple[str, ...] = ("monitors.conf", "monitor.conf")
    min_logical_width: int = 640
    min_logical_height: int = 360
    scale_steps: tuple[float, ...] = DEFAULT_SCALE_STEPS
    notify_tag: str = utility.NOTIFY_TAG
    notify_timeout: int = utility.NOTIFY_TIMEOUT
    settle_delay: float = 0.15


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(os.path.expanduser(override))
    xdg_config_home = os.environ.get(
        "XDG_CONFIG_HOME", os.path.join(os.path.expanduser("~"), ".config")
    )
    return Path(xdg_config_home) / "dusky" / SETTINGS_FILENAME


def _positive_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise SettingsError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def _non_negative_float(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise SettingsError(f"'{key}' must be a non-negative number, got {value!r}")
    return float(value)


def _string_list(key: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not value or not all(
        isinstance(v, str) and v.strip() for v in value
    ):
        raise SettingsError(f"'{key}' must be a non-empty list of names")
    return tuple(v.strip() for v in value)


def _scale_steps(key: str, value: Any) -> tuple[float, ...]:
    if not isinstance(value, list) or not value:
        raise SettingsError(f"'{key}' must be a non-empty list of numbers")
    steps: list[float] = []
    for v in value:
        if isinstance(v, bool) or not isinstance(v, (int, float)) or v <= 0:
            raise SettingsError(f"'{key}' entries must be positive numbers, got {v!r}")
        steps.append(float(v))
    return tuple(sorted(set(steps)))


_PARSERS = {
    "config_dir": lambda k, v: Path(os.path.expanduser(str(v))),
    "config_files": _string_list,
    "min_logical_width": _positive_int,
    "min_logical_height": _positive_int,
    "scale_steps": _scale_steps,
    "notify_tag": lambda k, v: str(v),
    "notify_timeout": _positive_int,
    "settle_delay": _non_negative_float,
}


def settings_from_mapping(data: dict[str, Any], base: Optional[Settings] = None) -> Settings:
    """Overlay ``data`` on ``base`` (or the defaults), validating each key."""
    base = base if base is not None else Settings()
    known = {f.name for f in fields(Settings)}
    changes: dict[str, Any] = {}

    for key, value in data.items():
        if key not in known:
            utility.log_warn(f"Ignoring unknown setting: {key}")
            continue
        changes[key] = _PARSERS[key](key, value)

    return replace(base, **changes)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from YAML; a missing or unreadable file means defaults."""
    path = path if path is not None else default_settings_path()
    data = utility.load_config(path)
    if data:
        utility.log_debug(f"Loaded settings overrides from {path}")
    return settings_from_mapping(data)
