"""
Line-oriented editor for Hyprland ``monitor = ...`` rules.
Rewrites the scale of a single rule, passes every other line through untouched
and replaces the file atomically.
"""
from __future__ import annotations

import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from hypr_scale import utility

RECORD_INTRODUCER = "monitor"
DEFAULT_RESOLUTION = "preferred"
DEFAULT_POSITION = "auto"
COMMENT_CHAR = "#"
FILE_ERRORS = "surrogateescape"

_RECORD_RE = re.compile(rf"^\s*{RECORD_INTRODUCER}\s*=")


@dataclass(frozen=True)
class ConfigRecord:
    monitor_name: str
    resolution: str = DEFAULT_RESOLUTION
    position: str = DEFAULT_POSITION
    scale: str = ""
    # mirror, bitdepth, vrr, ... carried through verbatim
    extra_fields: tuple[str, ...] = ()

    def with_scale(self, scale: str) -> ConfigRecord:
        return ConfigRecord(
            self.monitor_name, self.resolution, self.position, scale, self.extra_fields
        )

    def render(self) -> str:
        fields = [self.monitor_name, self.resolution, self.position, self.scale]
        fields.extend(self.extra_fields)
        return f"{RECORD_INTRODUCER} = {', '.join(fields)}"


def is_record_line(line: str) -> bool:
    return _RECORD_RE.match(line) is not None


def split_fields(line: str) -> list[str]:
    """Split a rule into trimmed fields, ignoring any inline comment."""
    content = line.split("=", 1)[1]
    content = content.split(COMMENT_CHAR, 1)[0].strip()
    fields = [f.strip() for f in content.split(",")]
    while fields and not fields[-1]:
        fields.pop()
    return fields


def parse_record(line: str) -> Optional[ConfigRecord]:
    """Parse a ``monitor =`` line, or return None for anything else."""
    if not is_record_line(line):
        return None
    fields = split_fields(line)
    if not fields:
        return None

    def _field(index: int, default: str) -> str:
        return fields[index] if len(fields) > index and fields[index] else default

    return ConfigRecord(
        monitor_name=fields[0],
        resolution=_field(1, DEFAULT_RESOLUTION),
        position=_field(2, DEFAULT_POSITION),
        scale=_field(3, ""),
        extra_fields=tuple(fields[4:]),
    )


def _line_ending(line: str) -> str:
    stripped = line.rstrip("\r\n")
    return line[len(stripped):] or "\n"


def rewrite_lines(
    lines: Iterable[str], monitor_name: str, new_scale: str
) -> tuple[list[str], bool]:
    """Return the updated lines and whether an existing rule was rewritten.

    Only the first rule for ``monitor_name`` is touched. When none exists a
    canonical rule is appended.
    """
    output: list[str] = []
    found = False

    for line in lines:
        record = parse_record(line)
        if record is None or record.monitor_name != monitor_name:
            output.append(line)
            continue
        if found:
            utility.log_debug(f"Leaving duplicate entry for {monitor_name} untouched")
            output.append(line)
            continue

        utility.log_debug(f"Found existing entry for: {monitor_name}")
        found = True
        output.append(record.with_scale(new_scale).render() + _line_ending(line))

    if not found:
        utility.log_info(f"Appending new entry for: {monitor_name}")
        if output and not output[-1].endswith(("\n", "\r")):
            output[-1] += "\n"
        output.append(ConfigRecord(monitor_name, scale=new_scale).render() + "\n")

    return output, found


class ConfigStore:
    """Owns one monitor configuration file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read_lines(self) -> list[str]:
        # Undecodable bytes round-trip untouched; only \n, \r\n and \r end a line
        try:
            with open(self.path, "r", encoding="utf-8", errors=FILE_ERRORS, newline="") as f:
                return f.readlines()
        except FileNotFoundError:
            return []

    def update(self, monitor_name: str, new_scale: str) -> None:
        """Persist ``new_scale`` for ``monitor_name``. Raises OSError on failure."""
        utility.log_debug(f"Updating config: {monitor_name} -> {new_scale}")
        lines, _ = rewrite_lines(self.read_lines(), monitor_name, new_scale)
        self._write_atomically("".join(lines))

    def _write_atomically(self, text: str) -> None:
        # Follow symlinks so dotfile-managed configs keep their link
        real_path = self.path.resolve()
        fd, temp_path = tempfile.mkstemp(
            dir=real_path.parent, prefix=f".{real_path.name}.tmp."
        )
        try:
            with os.fdopen(
                fd, "w", encoding="utf-8", errors=FILE_ERRORS, newline=""
            ) as temp_file:
                temp_file.write(text)

            if real_path.exists():
                os.chmod(temp_path, real_path.stat().st_mode)
            os.replace(temp_path, real_path)
        except BaseException:
            try:
                os.remove(temp_path)
            except FileNotFoundError:
                pass
            raise


def update(path: Path, monitor_name: str, new_scale: str) -> None:
    ConfigStore(path).update(monitor_name, new_scale)


def resolve_config_file(config_dir: Path, candidates: Iterable[str]) -> Path:
    """Pick the first existing candidate, or create the last one."""
    names = list(candidates)
    for name in names:
        path = config_dir / name
        if path.is_file():
            utility.log_debug(f"Selected config: {name}")
            return path

    path = config_dir / names[-1]
    utility.log_debug(f"Creating new config: {names[-1]}")
    config_dir.mkdir(parents=True, exist_ok=True)
    path.touch()
    return path
