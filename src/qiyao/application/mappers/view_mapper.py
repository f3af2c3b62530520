from __future__ import annotations

from typing import Optional, Sequence

from qiyao.application.dtos import (
    FactionView,
    InteractionView,
    LogEntryView,
    StandingView,
    TokenPositionView,
)
from qiyao.application.services.narrative_service import OpportunityNarrative
from qiyao.domain.models.faction import FactionProfile, FactionState
from qiyao.domain.models.game_state import Interaction, InteractionType, LogEntry
from qiyao.domain.models.location import GOAL_PROGRESS, Location
from qiyao.domain.models.path import Point
from qiyao.domain.services.path_geometry import project_progress


def to_faction_view(
    *,
    state: FactionState,
    profile: FactionProfile,
    location: Location,
    is_active: bool,
    path: Optional[Sequence[Point]],
) -> FactionView:
    coordinate = project_progress(state.progress, path)
    return FactionView(
        id=state.id.value,
        name=profile.name,
        title=profile.title,
        colour=profile.colour,
        progress=int(state.progress),
        location_name=state.current_location_name,
        location_description=location.description,
        stats=state.stats.as_dict(),
        last_move_descriptor=state.last_move_descriptor,
        skip_next_turn=bool(state.skip_next_turn),
        visited_locations=list(state.visited_locations),
        history=list(state.history),
        is_active=is_active,
        x=coordinate.x,
        y=coordinate.y,
    )


def to_interaction_view(interaction: Interaction, *, acting_name: str, target_name: str = "") -> InteractionView:
    narrative = interaction.narrative
    notes = ""
    if interaction.type == InteractionType.OPPORTUNITY:
        unpacked = OpportunityNarrative.unpack(interaction.title, interaction.narrative)
        narrative = unpacked.description
        notes = unpacked.arbiter_notes
    return InteractionView(
        type=interaction.type.value,
        acting_faction_id=interaction.acting_faction.value,
        acting_faction_name=acting_name,
        location_name=interaction.location_name,
        pending_progress=int(interaction.pending_progress),
        narrative=narrative,
        target_faction_id=interaction.target_faction.value if interaction.target_faction else None,
        target_faction_name=target_name,
        title=interaction.title,
        arbiter_notes=notes,
    )


def to_log_entry_view(entry: LogEntry) -> LogEntryView:
    return LogEntryView(day=int(entry.day), category=entry.category.value, text=entry.text)


def to_standing_views(states: Sequence[FactionState], names: dict) -> list[StandingView]:
    # Stable sort keeps the fixed faction order for ties.
    ordered = sorted(states, key=lambda state: -int(state.progress))
    return [
        StandingView(
            rank=position,
            faction_id=state.id.value,
            name=str(names.get(state.id, state.id.value)),
            progress=int(state.progress),
            location_name=state.current_location_name,
            last_move_descriptor=state.last_move_descriptor,
            reached_goal=int(state.progress) >= GOAL_PROGRESS,
        )
        for position, state in enumerate(ordered, start=1)
    ]


def to_token_position_view(state: FactionState, path: Optional[Sequence[Point]]) -> TokenPositionView:
    coordinate = project_progress(state.progress, path)
    return TokenPositionView(faction_id=state.id.value, x=coordinate.x, y=coordinate.y)
