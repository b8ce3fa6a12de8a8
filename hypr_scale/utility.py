"""Utility functions shared by the hypr-scale tools."""
from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any, NoReturn

import yaml

# =============================================================================
# CONSTANTS
# =============================================================================
NOTIFY_TAG = "hypr_scale_adjust"
NOTIFY_TIMEOUT = 2000

REQUIRED_BINARIES = ("hyprctl",)
OPTIONAL_BINARIES = ("notify-send",)


# =============================================================================
# LOGGING (ALL TO STDERR)
# =============================================================================
def debug_enabled() -> bool:
    return os.environ.get("DEBUG") == "1"


def log_err(msg: str) -> None: sys.stderr.write(f"\033[0;31m[ERROR]\033[0m {msg}\n")
def log_warn(msg: str) -> None: sys.stderr.write(f"\033[0;33m[WARN]\033[0m {msg}\n")
def log_info(msg: str) -> None: sys.stderr.write(f"\033[0;32m[INFO]\033[0m {msg}\n")
def log_debug(msg: str) -> None:
    if debug_enabled(): sys.stderr.write(f"\033[0;34m[DEBUG]\033[0m {msg}\n")


# =============================================================================
# NOTIFICATIONS
# =============================================================================
def notify(
    title: str,
    body: str,
    urgency: str = "low",
    tag: str = NOTIFY_TAG,
    timeout: int = NOTIFY_TIMEOUT,
) -> None:
    """Dispatches a notification safely, ignoring if the daemon is missing."""
    try:
        subprocess.run([
            "notify-send",
            "-h", f"string:x-canonical-private-synchronous:{tag}",
            "-u", urgency,
            "-t", str(timeout),
            title,
            body
        ], stderr=subprocess.DEVNULL)
    except FileNotFoundError:
        pass


def die(msg: str, tag: str = NOTIFY_TAG) -> NoReturn:
    """Log, raise a critical popup and exit non-zero."""
    log_err(msg)
    notify("Monitor Scale Failed", msg, "critical", tag=tag)
    sys.exit(1)


# =============================================================================
# CONFIGURATION LOADER
# =============================================================================
def load_config(config_path: Path) -> dict[str, Any]:
    """Read a YAML mapping of overrides; anything unusable yields an empty dict."""
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log_debug(f"No overrides at {config_path}")
        return {}
    except (OSError, UnicodeDecodeError) as e:
        log_err(f"Cannot read {config_path}: {e}")
        return {}

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        log_err(f"YAML parse error in {config_path}: {e}")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        log_warn(f"Ignoring {config_path}: top level must be a mapping, got {type(data).__name__}")
        return {}
    return data


# =============================================================================
# PRE-FLIGHT DEPENDENCY CHECK
# =============================================================================
def preflight_check() -> None:
    """Verify all required binaries are installed before touching anything."""
    missing = [cmd for cmd in REQUIRED_BINARIES if shutil.which(cmd) is None]
    if missing:
        die(f"Missing dependencies: {' '.join(missing)}")

    for cmd in OPTIONAL_BINARIES:
        if shutil.which(cmd) is None:
            log_warn(f"'{cmd}' not found in PATH, notifications disabled.")
