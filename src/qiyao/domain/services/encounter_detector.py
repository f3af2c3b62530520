from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from qiyao.domain.models.faction import FactionId, FactionState
from qiyao.domain.models.location import Location, is_terminus


DEFAULT_OPPORTUNITY_CHANCE = 0.70


class EncounterKind(str, Enum):
    NONE = "none"
    COLLISION = "collision"
    OPPORTUNITY = "opportunity"


@dataclass(frozen=True)
class EncounterResult:
    kind: EncounterKind
    other_faction: Optional[FactionId] = None

    @classmethod
    def none(cls) -> "EncounterResult":
        return cls(kind=EncounterKind.NONE)


class EncounterDetector:
    """Classify a pending move. Collocation outranks chance; termini never collide."""

    def __init__(self, rng: random.Random, opportunity_chance: float = DEFAULT_OPPORTUNITY_CHANCE) -> None:
        self.rng = rng
        self.opportunity_chance = max(0.0, min(1.0, float(opportunity_chance)))

    def find_collision(
        self,
        acting: FactionId,
        new_progress: int,
        destination: Location,
        factions: Mapping[FactionId, FactionState],
    ) -> Optional[FactionId]:
        if is_terminus(int(new_progress)):
            return None
        for faction_id in FactionId.ordered():
            if faction_id == acting:
                continue
            state = factions.get(faction_id)
            if state is None:
                continue
            if state.current_location_name == destination.name:
                return faction_id
        return None

    def roll_opportunity(self) -> bool:
        return self.rng.random() < self.opportunity_chance

    def classify(
        self,
        acting: FactionId,
        new_progress: int,
        destination: Location,
        factions: Mapping[FactionId, FactionState],
    ) -> EncounterResult:
        other = self.find_collision(acting, new_progress, destination, factions)
        if other is not None:
            return EncounterResult(kind=EncounterKind.COLLISION, other_faction=other)
        if self.roll_opportunity():
            return EncounterResult(kind=EncounterKind.OPPORTUNITY)
        return EncounterResult.none()
