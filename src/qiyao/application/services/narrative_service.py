from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol

from qiyao.application.services.narrative_content import (
    FALLBACK_CONFLICT_TEXT,
    FALLBACK_MOVE_SUMMARY,
    FALLBACK_OPPORTUNITY_NOTES,
    FALLBACK_OPPORTUNITY_TITLE,
    OPPORTUNITY_DELIMITER,
    OPPORTUNITY_SCENARIOS,
)
from qiyao.application.services.seed_policy import pick_index
from qiyao.domain.models.faction import FactionId
from qiyao.domain.models.location import Location


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FactionContext:
    faction_id: FactionId
    name: str
    title: str
    progress: int
    stats: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class MoveNarrative:
    text: str
    summary: str = FALLBACK_MOVE_SUMMARY


@dataclass(frozen=True)
class OpportunityNarrative:
    title: str
    description: str
    arbiter_notes: str = FALLBACK_OPPORTUNITY_NOTES

    @property
    def packed(self) -> str:
        return f"{self.description}{OPPORTUNITY_DELIMITER}{self.arbiter_notes}"

    @classmethod
    def unpack(cls, title: str, packed: str) -> "OpportunityNarrative":
        description, _, notes = str(packed or "").partition(OPPORTUNITY_DELIMITER)
        return cls(
            title=str(title or "").strip() or FALLBACK_OPPORTUNITY_TITLE,
            description=description.strip(),
            arbiter_notes=notes.strip() or FALLBACK_OPPORTUNITY_NOTES,
        )


class NarrativeGenerator(Protocol):
    def move_text(self, context: FactionContext, location: Location, day: int, weather: str, distance: int) -> MoveNarrative:
        ...

    def conflict_text(self, first: FactionContext, second: FactionContext, location_name: str, weather: str) -> str:
        ...

    def opportunity(self, context: FactionContext, location: Location, weather: str) -> OpportunityNarrative:
        ...


class OfflineNarrativeGenerator:
    """Deterministic text used when no generator is configured or the real one fails."""

    def move_text(self, context: FactionContext, location: Location, day: int, weather: str, distance: int) -> MoveNarrative:
        if int(distance) <= 0:
            text = f"Under {weather.lower()}, {context.name} holds position at {location.name}. {location.description}"
            return MoveNarrative(text=text.strip(), summary="Holding ground")
        text = f"Through {weather.lower()}, {context.name} covers {int(distance)} li and reaches {location.name}. {location.description}"
        return MoveNarrative(text=text.strip(), summary=FALLBACK_MOVE_SUMMARY)

    def conflict_text(self, first: FactionContext, second: FactionContext, location_name: str, weather: str) -> str:
        return f"{FALLBACK_CONFLICT_TEXT} {first.name} and {second.name} face each other at {location_name} under {weather.lower()}."

    def opportunity(self, context: FactionContext, location: Location, weather: str) -> OpportunityNarrative:
        index = pick_index(
            "narrative.opportunity",
            {"faction": context.faction_id, "location": location.index, "weather": weather},
            len(OPPORTUNITY_SCENARIOS),
        )
        scenario = OPPORTUNITY_SCENARIOS[index]
        title, _, rest = scenario.partition(" (")
        return OpportunityNarrative(
            title=title,
            description=f"Amid {weather.lower()} at {location.name}, {context.name} stumbles upon {title.lower()}. {location.description}",
            arbiter_notes=f"({rest}" if rest else FALLBACK_OPPORTUNITY_NOTES,
        )


class NarrativeService:
    """Awaitable front for a narrative generator.

    The generator is called off the event loop with a deadline. Any failure is
    logged and answered from the offline generator, so a turn never stalls on
    flavour text.
    """

    def __init__(
        self,
        generator: Optional[NarrativeGenerator] = None,
        *,
        fallback: Optional[OfflineNarrativeGenerator] = None,
        timeout_seconds: float = 20.0,
    ) -> None:
        self.generator = generator
        self.fallback = fallback or OfflineNarrativeGenerator()
        self.timeout_seconds = max(0.0, float(timeout_seconds))
        self.fallback_count = 0
        self.calls_made = 0

    async def _call(self, kind: str, primary: Optional[Callable[..., Any]], backup: Callable[..., Any], *args) -> Any:
        self.calls_made += 1
        if primary is None:
            return backup(*args)
        try:
            timeout = self.timeout_seconds if self.timeout_seconds > 0 else None
            result = await asyncio.wait_for(asyncio.to_thread(primary, *args), timeout=timeout)
        except Exception as exc:
            self.fallback_count += 1
            logger.warning("Narrative generator unavailable for %s text; using offline text: %s", kind, exc)
            return backup(*args)
        if result is None or (isinstance(result, str) and not result.strip()):
            self.fallback_count += 1
            logger.warning("Narrative generator returned empty %s text; using offline text", kind)
            return backup(*args)
        return result

    async def move_text(self, context: FactionContext, location: Location, day: int, weather: str, distance: int) -> MoveNarrative:
        primary = self.generator.move_text if self.generator is not None else None
        return await self._call("move", primary, self.fallback.move_text, context, location, day, weather, distance)

    async def conflict_text(self, first: FactionContext, second: FactionContext, location_name: str, weather: str) -> str:
        primary = self.generator.conflict_text if self.generator is not None else None
        return await self._call("conflict", primary, self.fallback.conflict_text, first, second, location_name, weather)

    async def opportunity(self, context: FactionContext, location: Location, weather: str) -> OpportunityNarrative:
        primary = self.generator.opportunity if self.generator is not None else None
        return await self._call("opportunity", primary, self.fallback.opportunity, context, location, weather)
