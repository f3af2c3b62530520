from __future__ import annotations

from dataclasses import dataclass


START_PROGRESS = 0
GOAL_PROGRESS = 120


@dataclass(frozen=True)
class Location:
    index: int
    name: str
    description: str = ""


def coerce_int(value, default: int = 0) -> int:
    """Parse arbiter input leniently; anything unusable becomes ``default``."""

    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return default


def clamp_progress(progress) -> int:
    # Huge ints overflow float(); bound them exactly first.
    if isinstance(progress, int) and not isinstance(progress, bool):
        return int(max(START_PROGRESS, min(GOAL_PROGRESS, progress)))
    try:
        numeric = float(progress)
    except (TypeError, ValueError, OverflowError):
        numeric = float(START_PROGRESS)
    if numeric != numeric:  # NaN
        numeric = float(START_PROGRESS)
    bounded = max(float(START_PROGRESS), min(float(GOAL_PROGRESS), numeric))
    return int(bounded // 1)


def is_terminus(progress: int) -> bool:
    return progress <= START_PROGRESS or progress >= GOAL_PROGRESS
