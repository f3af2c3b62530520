from __future__ import annotations

import copy
from typing import Dict, Iterable, List, Mapping, Optional

from qiyao.domain.errors import InvalidStatError
from qiyao.domain.models.faction import (
    STAT_NAMES,
    FactionId,
    FactionState,
    FactionStats,
)
from qiyao.domain.models.location import Location, coerce_int
from qiyao.domain.services.interaction_resolver import Retreat


DEFAULT_STARTING_STATS = FactionStats(martial=20, strategy=20, wealth=20, prestige=0)


def _stats_for(faction_id: FactionId, starting_stats) -> FactionStats:
    if starting_stats is None:
        return copy.copy(DEFAULT_STARTING_STATS)
    if isinstance(starting_stats, FactionStats):
        return copy.copy(starting_stats)
    if isinstance(starting_stats, Mapping):
        per_faction = None
        for key in (faction_id, faction_id.value):
            if key in starting_stats:
                per_faction = starting_stats[key]
                break
        if per_faction is not None:
            if isinstance(per_faction, FactionStats):
                return copy.copy(per_faction)
            return FactionStats.from_mapping(per_faction, default=0)
        if any(name in starting_stats for name in STAT_NAMES):
            return FactionStats.from_mapping(starting_stats, default=0)
    return copy.copy(DEFAULT_STARTING_STATS)


class FactionStateStore:
    """Owner of the per-faction records held by a game state."""

    def __init__(self, states: Dict[FactionId, FactionState]) -> None:
        missing = [faction_id.value for faction_id in FactionId.ordered() if faction_id not in states]
        if missing:
            raise ValueError(f"Faction store is missing: {', '.join(missing)}")
        self._states = states

    @staticmethod
    def build_initial(start_location: Location, starting_stats=None) -> Dict[FactionId, FactionState]:
        return {
            faction_id: FactionState(
                id=faction_id,
                progress=start_location.index,
                current_location_name=start_location.name,
                stats=_stats_for(faction_id, starting_stats),
                visited_locations=[start_location.name],
            )
            for faction_id in FactionId.ordered()
        }

    def get(self, faction_id: FactionId | str) -> FactionState:
        return self._states[FactionId.parse(faction_id)]

    def list_all(self) -> List[FactionState]:
        return [self._states[faction_id] for faction_id in FactionId.ordered()]

    def read(self, faction_id: FactionId | str) -> FactionState:
        return copy.deepcopy(self.get(faction_id))

    def read_all(self) -> List[FactionState]:
        return [copy.deepcopy(state) for state in self.list_all()]

    def edit_stat(self, faction_id: FactionId | str, stat_name: str, value) -> FactionState:
        """Manual correction: overwrite one stat without touching history."""

        normalized = str(stat_name or "").strip().lower()
        if normalized not in STAT_NAMES:
            raise InvalidStatError(f"Unknown stat {stat_name!r}; expected one of {', '.join(STAT_NAMES)}")
        state = self.get(faction_id)
        setattr(state.stats, normalized, coerce_int(value))
        return state

    def apply_stat_deltas(self, faction_id: FactionId, deltas: Optional[FactionStats]) -> None:
        if deltas is None:
            return
        state = self.get(faction_id)
        state.stats = state.stats.plus(deltas)

    def flag_skip(self, faction_id: FactionId) -> None:
        self.get(faction_id).skip_next_turn = True

    def apply_retreat(self, retreat: Retreat, day: int) -> FactionState:
        state = self.get(retreat.faction_id)
        state.progress = int(retreat.progress)
        state.current_location_name = retreat.location_name
        state.record_visit(retreat.location_name)
        state.last_move_descriptor = retreat.descriptor
        state.history.append(f"[Day {int(day)}] {retreat.history_text}")
        return state

    def positions(self) -> Iterable[tuple[FactionId, int]]:
        return ((state.id, state.progress) for state in self.list_all())
