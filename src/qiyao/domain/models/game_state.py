from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from qiyao.domain.models.faction import FactionId, FactionState
from qiyao.domain.models.path import Point


class LogCategory(str, Enum):
    MOVE = "move"
    CONFLICT = "conflict"
    EVENT = "event"
    SYSTEM = "system"


class InteractionType(str, Enum):
    PVP = "PVP"
    OPPORTUNITY = "OPPORTUNITY"


@dataclass(frozen=True)
class LogEntry:
    day: int
    category: LogCategory
    text: str


@dataclass(frozen=True)
class Interaction:
    type: InteractionType
    acting_faction: FactionId
    location_name: str
    narrative: str
    pending_progress: int
    target_faction: Optional[FactionId] = None
    title: str = ""


@dataclass
class GameState:
    day: int = 1
    weather: str = ""
    turn_queue: List[FactionId] = field(default_factory=lambda: list(FactionId.ordered()))
    active_index: int = 0
    factions: Dict[FactionId, FactionState] = field(default_factory=dict)
    global_log: List[LogEntry] = field(default_factory=list)
    is_day_complete: bool = False
    path: Optional[List[Point]] = None

    @property
    def active_faction_id(self) -> FactionId:
        return self.turn_queue[self.active_index]

    def faction(self, faction_id: FactionId) -> FactionState:
        return self.factions[faction_id]

    def append_log(self, category: LogCategory, text: str) -> LogEntry:
        entry = LogEntry(day=int(self.day), category=LogCategory(category), text=str(text))
        self.global_log.append(entry)
        return entry
