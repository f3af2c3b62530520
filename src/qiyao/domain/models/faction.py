from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping

from qiyao.domain.models.location import coerce_int


class FactionId(str, Enum):
    TIANHE = "TIANHE"
    BEIGE = "BEIGE"
    WANGSHENG = "WANGSHENG"
    FULONG = "FULONG"
    NANTUO = "NANTUO"
    XUEYI = "XUEYI"
    DARI = "DARI"

    @classmethod
    def ordered(cls) -> tuple["FactionId", ...]:
        return tuple(cls)

    @classmethod
    def parse(cls, value: "FactionId | str") -> "FactionId":
        if isinstance(value, FactionId):
            return value
        return cls(str(value or "").strip().upper())


STAT_NAMES = ("martial", "strategy", "wealth", "prestige")

INITIAL_MOVE_DESCRIPTOR = "poised"


@dataclass
class FactionStats:
    martial: int = 20
    strategy: int = 20
    wealth: int = 20
    prestige: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {name: int(getattr(self, name)) for name in STAT_NAMES}

    def plus(self, deltas: "FactionStats") -> "FactionStats":
        return FactionStats(**{name: getattr(self, name) + getattr(deltas, name) for name in STAT_NAMES})

    @classmethod
    def from_mapping(cls, values: Mapping[str, object] | None, *, default: int = 0) -> "FactionStats":
        values = values or {}
        return cls(**{name: coerce_int(values.get(name, default), default) for name in STAT_NAMES})


@dataclass(frozen=True)
class FactionProfile:
    id: FactionId
    name: str
    title: str
    description: str = ""
    bonus: str = ""
    weapon: str = ""
    colour: str = "white"


@dataclass
class FactionState:
    id: FactionId
    progress: int = 0
    current_location_name: str = ""
    stats: FactionStats = field(default_factory=FactionStats)
    visited_locations: List[str] = field(default_factory=list)
    last_move_descriptor: str = INITIAL_MOVE_DESCRIPTOR
    skip_next_turn: bool = False
    history: List[str] = field(default_factory=list)

    def record_visit(self, location_name: str) -> bool:
        """Append ``location_name`` to the discovery list unless already known."""

        if location_name in self.visited_locations:
            return False
        self.visited_locations.append(location_name)
        return True
