from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

from qiyao.application.services.faction_store import FactionStateStore
from qiyao.domain.models.faction import FactionId
from qiyao.domain.models.game_state import GameState, LogCategory
from qiyao.domain.models.location import clamp_progress
from qiyao.domain.models.weather import WEATHERS


logger = logging.getLogger(__name__)

SKIPPED_DESCRIPTOR = "stalled"
UNCHANGED_DESCRIPTOR = "holding"
EXTRA_ACTION_SUFFIX = " (extra action)"


@dataclass(frozen=True)
class CommitOutcome:
    faction_id: FactionId
    descriptor: str
    progress_after: int
    location_name: str
    day_rolled: bool
    completed_day: int


def describe_move(delta: int, *, was_skipped: bool, action_again: bool) -> str:
    if was_skipped:
        descriptor = SKIPPED_DESCRIPTOR
    elif delta > 0:
        descriptor = f"+{delta} li"
    elif delta < 0:
        descriptor = f"{delta} li"
    else:
        descriptor = UNCHANGED_DESCRIPTOR
    if action_again:
        descriptor += EXTRA_ACTION_SUFFIX
    return descriptor


class TurnScheduler:
    """Applies a finished turn to the game state and moves the turn order on."""

    def __init__(self, rng: random.Random, weathers: Sequence[str] = WEATHERS) -> None:
        if not weathers:
            raise ValueError("At least one weather label is required")
        self.rng = rng
        self.weathers = tuple(weathers)

    def sample_weather(self) -> str:
        return self.rng.choice(self.weathers)

    def commit(
        self,
        state: GameState,
        faction_id: FactionId,
        final_progress: int,
        final_location_name: str,
        log_text: str,
        *,
        was_skipped: bool = False,
        action_again: bool = False,
        category: LogCategory = LogCategory.MOVE,
    ) -> CommitOutcome:
        store = FactionStateStore(state.factions)
        faction = store.get(faction_id)
        progress_after = clamp_progress(final_progress)
        descriptor = describe_move(
            progress_after - faction.progress,
            was_skipped=was_skipped,
            action_again=action_again,
        )

        faction.progress = progress_after
        faction.current_location_name = final_location_name
        faction.record_visit(final_location_name)
        faction.last_move_descriptor = descriptor
        if was_skipped:
            faction.skip_next_turn = False
        faction.history.append(f"[Day {state.day}] {log_text}")
        state.append_log(category, log_text)

        completed_day = state.day
        day_rolled = self.advance(state, action_again=action_again)
        return CommitOutcome(
            faction_id=faction.id,
            descriptor=descriptor,
            progress_after=progress_after,
            location_name=final_location_name,
            day_rolled=day_rolled,
            completed_day=completed_day,
        )

    def advance(self, state: GameState, *, action_again: bool) -> bool:
        state.is_day_complete = False
        if action_again:
            return False
        state.active_index += 1
        if state.active_index < len(state.turn_queue):
            return False
        state.active_index = 0
        state.day += 1
        state.is_day_complete = True
        state.weather = self.sample_weather()
        logger.info("Day %s begins under %s", state.day, state.weather)
        return True
