from __future__ import annotations

from typing import Sequence

from qiyao.domain.models.location import GOAL_PROGRESS, Location, clamp_progress


def location_for_progress(progress, table: Sequence[Location]) -> Location:
    """Return the waypoint for ``progress``; never raises for out-of-range input."""

    if not table:
        raise ValueError("Location table is empty")
    index = clamp_progress(progress)
    if index < len(table):
        return table[index]
    return table[0]


def validate_route_table(table: Sequence[Location]) -> None:
    expected = GOAL_PROGRESS + 1
    if len(table) != expected:
        raise ValueError(f"Route table must hold {expected} waypoints, found {len(table)}")
    for position, location in enumerate(table):
        if int(location.index) != position:
            raise ValueError(f"Waypoint {location.name!r} is stored at {position} but indexed {location.index}")
