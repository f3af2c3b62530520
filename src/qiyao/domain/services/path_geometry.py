from __future__ import annotations

import math
from typing import Sequence

from qiyao.domain.models.location import GOAL_PROGRESS
from qiyao.domain.models.path import Point


def segment_length(start: Point, end: Point) -> float:
    return math.hypot(start.x - end.x, start.y - end.y)


def path_length(path: Sequence[Point] | None) -> float:
    if not path or len(path) < 2:
        return 0.0
    return sum(segment_length(path[i], path[i + 1]) for i in range(len(path) - 1))


def progress_percentage(progress) -> float:
    try:
        numeric = float(progress)
    except (TypeError, ValueError):
        numeric = 0.0
    if numeric != numeric:
        numeric = 0.0
    return min(1.0, max(0.0, numeric / GOAL_PROGRESS)) * 100.0


def project_progress(progress, path: Sequence[Point] | None) -> Point:
    """Map a progress value onto the drawn route by arc length.

    Without a usable path the token slides along the horizontal midline.
    Segment boundaries resolve to the end of the earlier segment, which is the
    same coordinate as ratio 0 of the next one.
    """

    percentage = progress_percentage(progress)
    if not path or len(path) < 2:
        return Point(x=percentage, y=50.0)

    total = path_length(path)
    if total == 0:
        return Point(x=path[0].x, y=path[0].y)

    target = (percentage / 100.0) * total
    travelled = 0.0
    for i in range(len(path) - 1):
        start, end = path[i], path[i + 1]
        length = segment_length(start, end)
        if length == 0:
            continue
        if travelled + length >= target:
            ratio = (target - travelled) / length
            return Point(
                x=start.x + (end.x - start.x) * ratio,
                y=start.y + (end.y - start.y) * ratio,
            )
        travelled += length

    last = path[-1]
    return Point(x=last.x, y=last.y)

