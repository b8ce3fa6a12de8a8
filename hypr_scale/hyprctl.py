"""Thin wrapper around the ``hyprctl`` IPC client."""
from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from typing import Any, Optional


class HyprctlError(RuntimeError):
    """Hyprland is unreachable, returned garbage, or rejected a request."""


@dataclass(frozen=True)
class MonitorState:
    name: str
    physical_width: int
    physical_height: int
    current_scale: float
    refresh_rate: float
    pos_x: int
    pos_y: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> MonitorState:
        try:
            return cls(
                name=str(data["name"]),
                physical_width=int(data["width"]),
                physical_height=int(data["height"]),
                current_scale=float(data["scale"]),
                refresh_rate=float(data.get("refreshRate", 60.0)),
                pos_x=int(data.get("x", 0)),
                pos_y=int(data.get("y", 0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise HyprctlError(f"Malformed monitor entry from Hyprland: {e}") from e


def query_monitors() -> list[dict[str, Any]]:
    """Return the raw ``hyprctl -j monitors`` payload."""
    try:
        res = subprocess.run(
            ["hyprctl", "-j", "monitors"], capture_output=True, text=True, check=True
        )
        monitors = json.loads(res.stdout)
    except subprocess.CalledProcessError as e:
        raise HyprctlError("Cannot communicate with Hyprland IPC.") from e
    except FileNotFoundError as e:
        raise HyprctlError("'hyprctl' binary not found in PATH.") from e
    except json.JSONDecodeError as e:
        raise HyprctlError("Invalid JSON returned by Hyprland.") from e

    if not isinstance(monitors, list):
        raise HyprctlError("Invalid JSON returned by Hyprland.")
    return monitors


def get_monitor(target_override: Optional[str] = None) -> MonitorState:
    """Retrieves monitor state, respecting an explicit target or window focus."""
    monitors = query_monitors()
    if not monitors:
        raise HyprctlError("No active monitors found.")

    if target_override:
        target = next((m for m in monitors if m.get("name") == target_override), None)
        if target is None:
            raise HyprctlError(f"Monitor '{target_override}' details not found.")
    else:
        target = next((m for m in monitors if m.get("focused")), monitors[0])

    return MonitorState.from_json(target)


def format_refresh(rate: float) -> str:
    """60.00 -> 60, 143.86 -> 143.86"""
    text = f"{rate:.2f}"
    return text[:-3] if text.endswith(".00") else text


def format_rule(state: MonitorState, scale: str) -> str:
    return (
        f"{state.name},{state.physical_width}x{state.physical_height}"
        f"@{format_refresh(state.refresh_rate)},{state.pos_x}x{state.pos_y},{scale}"
    )


def apply_rule(rule: str) -> None:
    """Apply a monitor rule live via ``hyprctl keyword monitor``."""
    try:
        res = subprocess.run(
            ["hyprctl", "keyword", "monitor", rule],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except FileNotFoundError as e:
        raise HyprctlError("'hyprctl' binary not found in PATH.") from e

    if res.returncode != 0:
        raise HyprctlError(f"Hyprland rejected rule: {rule}")
