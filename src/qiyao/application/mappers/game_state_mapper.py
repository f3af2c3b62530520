from __future__ import annotations

import json
import math
from typing import Any, Callable, Dict, List, Mapping, Optional

from qiyao.domain.errors import GameFormatError
from qiyao.domain.models.faction import STAT_NAMES, FactionId, FactionState, FactionStats
from qiyao.domain.models.game_state import GameState, LogCategory, LogEntry
from qiyao.domain.models.location import Location, clamp_progress
from qiyao.domain.models.path import Point


REQUIRED_FIELDS = ("faction_states", "global_log")


def _faction_to_row(state: FactionState) -> Dict[str, Any]:
    return {
        "id": state.id.value,
        "progress": int(state.progress),
        "stats": state.stats.as_dict(),
        "visited_locations": list(state.visited_locations),
        "last_move_descriptor": state.last_move_descriptor,
        "skip_next_turn": bool(state.skip_next_turn),
        "history": list(state.history),
    }


def game_state_to_document(state: GameState) -> Dict[str, Any]:
    return {
        "day": int(state.day),
        "weather": state.weather,
        "turn_queue": [faction_id.value for faction_id in state.turn_queue],
        "active_index": int(state.active_index),
        "is_day_complete": bool(state.is_day_complete),
        "faction_states": {faction_id.value: _faction_to_row(row) for faction_id, row in state.factions.items()},
        "global_log": [
            {"day": int(entry.day), "category": entry.category.value, "text": entry.text} for entry in state.global_log
        ],
        "path": [point.to_dict() for point in state.path] if state.path else None,
    }


def dumps_document(state: GameState) -> str:
    return json.dumps(game_state_to_document(state), ensure_ascii=False, indent=2)


def _require_int(row: Mapping[str, Any], key: str, context: str, default: Optional[int] = None) -> int:
    raw = row.get(key, default)
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise GameFormatError(f"{context}.{key} must be a number")
    if isinstance(raw, float) and not math.isfinite(raw):
        raise GameFormatError(f"{context}.{key} must be a finite number")
    return int(raw)


def _require_str_list(row: Mapping[str, Any], key: str, context: str) -> List[str]:
    raw = row.get(key, [])
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise GameFormatError(f"{context}.{key} must be a list of strings")
    return list(raw)


def _faction_from_row(faction_id: FactionId, row: Any, locate: Callable[[int], Location]) -> FactionState:
    context = f"faction_states.{faction_id.value}"
    if not isinstance(row, Mapping):
        raise GameFormatError(f"{context} must be an object")
    stats_row = row.get("stats", {})
    if not isinstance(stats_row, Mapping):
        raise GameFormatError(f"{context}.stats must be an object")
    stats = FactionStats(**{name: _require_int(stats_row, name, f"{context}.stats", 0) for name in STAT_NAMES})

    progress = clamp_progress(_require_int(row, "progress", context, 0))
    location = locate(progress)
    visited: List[str] = []
    for name in _require_str_list(row, "visited_locations", context):
        if name not in visited:
            visited.append(name)
    start_name = locate(0).name
    if start_name not in visited:
        visited.insert(0, start_name)
    if location.name not in visited:
        visited.append(location.name)

    return FactionState(
        id=faction_id,
        progress=progress,
        current_location_name=location.name,
        stats=stats,
        visited_locations=visited,
        last_move_descriptor=str(row.get("last_move_descriptor", "") or ""),
        skip_next_turn=bool(row.get("skip_next_turn", False)),
        history=_require_str_list(row, "history", context),
    )


def _log_from_rows(rows: Any) -> List[LogEntry]:
    if not isinstance(rows, list):
        raise GameFormatError("global_log must be a list")
    entries: List[LogEntry] = []
    for position, row in enumerate(rows):
        context = f"global_log[{position}]"
        if not isinstance(row, Mapping):
            raise GameFormatError(f"{context} must be an object")
        try:
            category = LogCategory(str(row.get("category", LogCategory.SYSTEM.value)))
        except ValueError as exc:
            raise GameFormatError(f"{context}.category is not a known log category") from exc
        entries.append(LogEntry(day=_require_int(row, "day", context), category=category, text=str(row.get("text", ""))))
    return entries


def _turn_queue_from(raw: Any) -> List[FactionId]:
    if raw is None:
        return list(FactionId.ordered())
    if not isinstance(raw, list):
        raise GameFormatError("turn_queue must be a list")
    try:
        queue = [FactionId.parse(item) for item in raw]
    except ValueError as exc:
        raise GameFormatError(f"turn_queue holds an unknown faction: {exc}") from exc
    if sorted(queue, key=lambda item: item.value) != sorted(FactionId.ordered(), key=lambda item: item.value):
        raise GameFormatError("turn_queue must list every faction exactly once")
    return queue


def _path_from(raw: Any) -> Optional[List[Point]]:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise GameFormatError("path must be a list of points")
    try:
        points = [Point.from_mapping(row) for row in raw]
    except (KeyError, TypeError, ValueError) as exc:
        raise GameFormatError(f"path holds a malformed point: {exc}") from exc
    return points if len(points) > 1 else None


def game_state_from_document(payload: Any, locate: Callable[[int], Location]) -> GameState:
    if not isinstance(payload, Mapping):
        raise GameFormatError("Save document must be a JSON object")
    missing = [key for key in REQUIRED_FIELDS if key not in payload]
    if missing:
        raise GameFormatError(f"Save document is missing: {', '.join(missing)}")

    raw_factions = payload["faction_states"]
    if not isinstance(raw_factions, Mapping):
        raise GameFormatError("faction_states must be an object keyed by faction id")
    factions: Dict[FactionId, FactionState] = {}
    for faction_id in FactionId.ordered():
        if faction_id.value not in raw_factions:
            raise GameFormatError(f"faction_states is missing {faction_id.value}")
        factions[faction_id] = _faction_from_row(faction_id, raw_factions[faction_id.value], locate)

    turn_queue = _turn_queue_from(payload.get("turn_queue"))
    active_index = _require_int(payload, "active_index", "document", 0)
    if not 0 <= active_index < len(turn_queue):
        raise GameFormatError("active_index is outside the turn queue")
    day = _require_int(payload, "day", "document", 1)
    if day < 1:
        raise GameFormatError("day must be at least 1")

    return GameState(
        day=day,
        weather=str(payload.get("weather", "") or ""),
        turn_queue=turn_queue,
        active_index=active_index,
        factions=factions,
        global_log=_log_from_rows(payload["global_log"]),
        is_day_complete=bool(payload.get("is_day_complete", False)),
        path=_path_from(payload.get("path")),
    )


def loads_document(document: str, locate: Callable[[int], Location]) -> GameState:
    try:
        payload = json.loads(document)
    except (TypeError, ValueError) as exc:
        raise GameFormatError(f"Save document is not valid JSON: {exc}") from exc
    return game_state_from_document(payload, locate)
