"""
Scale negotiation for Hyprland monitors.
Walks a fixed ladder of fractional/integer scales, skipping any step that would
leave a tiny or non-integer logical workarea.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

# Standard Wayland fractional/integer scaling steps
DEFAULT_SCALE_STEPS: tuple[float, ...] = (
    0.5, 0.6, 0.75, 0.8, 0.9, 1.0, 1.0625, 1.1, 1.125, 1.15, 1.2, 1.25,
    1.33, 1.4, 1.5, 1.6, 1.67, 1.75, 1.8, 1.88, 2.0, 2.25, 2.4, 2.5,
    2.67, 2.8, 3.0,
)
FALLBACK_SCALE = 1.0

# Max distance of the logical width from a whole pixel
ALIGNMENT_TOLERANCE = 0.05
# Compared against the squared difference
SCALE_EPSILON = 0.000001


class Direction(str, Enum):
    UP = "+"
    DOWN = "-"


@dataclass(frozen=True)
class NegotiationResult:
    scale: float
    logical_width: int
    logical_height: int
    changed: bool

    @property
    def scale_text(self) -> str:
        return format_scale(self.scale)


# =============================================================================
# SHARED HELPERS
# =============================================================================
def scales_equal(a: float, b: float) -> bool:
    """Float-safe scale comparison."""
    return (a - b) ** 2 <= SCALE_EPSILON


def format_scale(value: float) -> str:
    """Render a scale without trailing zeros (1.50 -> 1.5, 2.00 -> 2)."""
    text = f"{value:.6f}".rstrip("0")
    return text.rstrip(".")


def logical_size(physical: int, scale: float) -> int:
    # Round half up, matching how the compositor sizes the workarea
    return int(math.floor(physical / scale + 0.5))


# =============================================================================
# LADDER
# =============================================================================
class ScaleLadder:
    """Ascending set of admissible scales."""

    def __init__(self, steps: Iterable[float] = DEFAULT_SCALE_STEPS) -> None:
        values = sorted({float(s) for s in steps})
        if not values:
            raise ValueError("Scale ladder cannot be empty")
        if values[0] <= 0:
            raise ValueError(f"Scale steps must be positive, got {values[0]:g}")
        self.steps: tuple[float, ...] = tuple(values)

    def filter(
        self,
        physical_width: int,
        physical_height: int,
        min_logical_width: int,
        min_logical_height: int,
    ) -> tuple[float, ...]:
        """Return the steps usable on a monitor of the given physical size."""
        valid: list[float] = []
        for s in self.steps:
            lw, lh = physical_width / s, physical_height / s
            if lw < min_logical_width or lh < min_logical_height:
                continue
            if abs(lw - round(lw)) > ALIGNMENT_TOLERANCE:
                continue
            valid.append(s)

        if not valid:
            return (FALLBACK_SCALE,)
        return tuple(valid)

    def next(
        self,
        current: float,
        direction: Direction,
        physical_width: int,
        physical_height: int,
        min_logical_width: int,
        min_logical_height: int,
    ) -> NegotiationResult:
        """Step one rung from the rung nearest ``current``, holding at either end."""
        valid = self.filter(
            physical_width, physical_height, min_logical_width, min_logical_height
        )

        best, min_diff = 0, math.inf
        for i, s in enumerate(valid):
            diff = abs(current - s)
            if diff < min_diff:
                best, min_diff = i, diff

        target = best + 1 if Direction(direction) is Direction.UP else best - 1
        target = max(0, min(target, len(valid) - 1))
        new_scale = valid[target]

        return NegotiationResult(
            scale=new_scale,
            logical_width=logical_size(physical_width, new_scale),
            logical_height=logical_size(physical_height, new_scale),
            changed=not scales_equal(new_scale, current),
        )
