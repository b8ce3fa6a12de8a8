#!/usr/bin/env python3
"""
Universal Hyprland monitor scaler.

Usage: hypr-adjust-scale [+|-]
Env:   HYPR_SCALE_MONITOR="DP-1"  (Optional: Target specific monitor)
       HYPR_SCALE_SETTINGS=path   (Optional: YAML settings override)
       DEBUG=1                    (Optional: Enable verbose logging)
"""
from __future__ import annotations

import os
import sys
import time
from typing import Optional

from hypr_scale import hyprctl, utility
from hypr_scale.config_store import ConfigStore, resolve_config_file
from hypr_scale.ladder import Direction, ScaleLadder, format_scale, scales_equal
from hypr_scale.settings import Settings, SettingsError, load_settings

TARGET_ENV = "HYPR_SCALE_MONITOR"


def parse_direction(argv: list[str]) -> Optional[Direction]:
    if len(argv) != 1 or argv[0] not in ("+", "-"):
        return None
    return Direction(argv[0])


def notify_user(settings: Settings, scale: str, monitor: str, extra: str = "") -> None:
    utility.log_info(f"Monitor: {monitor} | Scale: {scale}" + (f" | {extra}" if extra else ""))
    body = f"Monitor: {monitor}" + (f"\n{extra}" if extra else "")
    utility.notify(
        f"Display Scale: {scale}",
        body,
        tag=settings.notify_tag,
        timeout=settings.notify_timeout,
    )


def run(direction: Direction, settings: Settings, target_override: Optional[str] = None) -> None:
    """One full adjust cycle. Raises HyprctlError/OSError on fatal conditions."""
    config_file = resolve_config_file(settings.config_dir, settings.config_files)
    store = ConfigStore(config_file)

    # 1. Get monitor state
    state = hyprctl.get_monitor(target_override)
    utility.log_info(f"Target: {state.name}")
    utility.log_debug(
        f"State: {state.physical_width}x{state.physical_height} @ {state.current_scale:g}"
    )

    # 2. Compute new scale
    ladder = ScaleLadder(settings.scale_steps)
    result = ladder.next(
        state.current_scale,
        direction,
        state.physical_width,
        state.physical_height,
        settings.min_logical_width,
        settings.min_logical_height,
    )
    new_scale = result.scale_text

    # 3. Check limits
    if not result.changed:
        utility.log_warn(f"Limit reached: {new_scale}")
        notify_user(settings, new_scale, state.name, "(Limit Reached)")
        return

    # 4. Persist config
    store.update(state.name, new_scale)

    # 5. Apply runtime
    rule = hyprctl.format_rule(state, new_scale)
    utility.log_info(f"Applying: {rule}")
    hyprctl.apply_rule(rule)

    # Single observation after IPC propagation, not a polling loop
    time.sleep(settings.settle_delay)
    actual = hyprctl.get_monitor(state.name).current_scale

    # Hyprland may clamp the request; it is authoritative once applied
    if not scales_equal(actual, result.scale):
        actual_text = format_scale(actual)
        utility.log_warn(f"Hyprland auto-adjusted: {new_scale} -> {actual_text}")
        notify_user(settings, "Adjusted", state.name, f"Requested {new_scale}, got {actual_text}")
        store.update(state.name, actual_text)
    else:
        notify_user(
            settings,
            new_scale,
            state.name,
            f"Logical: {result.logical_width}x{result.logical_height}",
        )


def main(argv: Optional[list[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    direction = parse_direction(args)
    if direction is None:
        sys.stderr.write(f"Usage: {os.path.basename(sys.argv[0])} [+|-]\n")
        sys.exit(1)

    utility.preflight_check()

    try:
        settings = load_settings()
    except SettingsError as e:
        utility.die(f"Invalid settings: {e}")

    try:
        run(direction, settings, os.environ.get(TARGET_ENV) or None)
    except hyprctl.HyprctlError as e:
        utility.die(str(e), settings.notify_tag)
    except OSError as e:
        utility.die(f"Config update failed: {e}", settings.notify_tag)


if __name__ == "__main__":
    main()
