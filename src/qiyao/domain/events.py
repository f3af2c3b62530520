from dataclasses import dataclass


@dataclass
class TurnCommitted:
    faction_id: str
    day: int
    progress_after: int
    location_name: str
    descriptor: str
    was_skipped: bool
    extra_action: bool


@dataclass
class DayCompleted:
    completed_day: int
    next_day: int
    weather: str


@dataclass
class InteractionOpened:
    interaction_type: str
    acting_faction_id: str
    target_faction_id: str | None
    location_name: str
    pending_progress: int


@dataclass
class InteractionResolved:
    interaction_type: str
    acting_faction_id: str
    outcome: str
    final_progress: int
