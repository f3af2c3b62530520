from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ActionResult:
    messages: List[str] = field(default_factory=list)
    interaction_opened: bool = False
    turn_committed: bool = False
    day_complete: bool = False


@dataclass
class FactionView:
    id: str
    name: str
    title: str
    colour: str
    progress: int
    location_name: str
    location_description: str
    stats: Dict[str, int]
    last_move_descriptor: str
    skip_next_turn: bool
    visited_locations: List[str]
    history: List[str]
    is_active: bool
    x: float
    y: float


@dataclass
class InteractionView:
    type: str
    acting_faction_id: str
    acting_faction_name: str
    location_name: str
    pending_progress: int
    narrative: str
    target_faction_id: Optional[str] = None
    target_faction_name: str = ""
    title: str = ""
    arbiter_notes: str = ""


@dataclass
class LogEntryView:
    day: int
    category: str
    text: str


@dataclass
class StandingView:
    rank: int
    faction_id: str
    name: str
    progress: int
    location_name: str
    last_move_descriptor: str
    reached_goal: bool


@dataclass
class TokenPositionView:
    faction_id: str
    x: float
    y: float


@dataclass
class GameSnapshotView:
    day: int
    weather: str
    active_faction_id: str
    active_faction_name: str
    is_day_complete: bool
    turn_in_flight: bool
    factions: List[FactionView] = field(default_factory=list)
    interaction: Optional[InteractionView] = None
    recent_log: List[LogEntryView] = field(default_factory=list)
