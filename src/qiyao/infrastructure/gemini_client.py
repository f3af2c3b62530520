import logging
from typing import Any

import httpx

from qiyao.application.services.narrative_content import (
    FALLBACK_CONFLICT_TEXT,
    FALLBACK_MOVE_SUMMARY,
    FALLBACK_OPPORTUNITY_NOTES,
    FALLBACK_OPPORTUNITY_TITLE,
    OPPORTUNITY_DELIMITER,
    OPPORTUNITY_SCENARIOS,
)
from qiyao.application.services.narrative_service import FactionContext, MoveNarrative, OpportunityNarrative
from qiyao.application.services.seed_policy import pick_index
from qiyao.domain.models.location import Location
from qiyao.infrastructure.resilient_http import post_json_with_retry


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are the Dungeon Master of "Qiyao: War for the Nilin Blade", a multiplayer wuxia text game.
Seven great sects race to Yunmeng Marsh to claim the legendary blade Nilin.
Style: classic wuxia in the manner of Gu Long and Jin Yong. Vivid, terse, carefully chosen words.

Rules:
1. Every description MUST name the hour of the day (midnight, dawn, dusk and so on).
2. Every description MUST show how the day's weather shapes the action.
3. Match the atmosphere to the character of the sect involved.
4. NEVER invent items, tokens, keepsakes or follow-up plot hooks. Every event settles on the spot as a change of stats or a change of distance.
"""


def _extract_text(payload: dict[str, Any]) -> str:
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(str(part.get("text", "")) for part in parts if isinstance(part, dict)).strip()


def _block_reason(payload: dict[str, Any]) -> str:
    feedback = payload.get("promptFeedback")
    if isinstance(feedback, dict):
        return str(feedback.get("blockReason") or "").strip()
    return ""


def _part(parts: list[str], index: int) -> str:
    if index < len(parts):
        return parts[index].strip()
    return ""


class GeminiNarrativeClient:
    BASE_URL = "https://generativelanguage.googleapis.com"
    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = BASE_URL,
        timeout: float = 20.0,
        retries: int = 1,
        backoff_seconds: float = 0.2,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self._retries = retries
        self._backoff_seconds = backoff_seconds
        self.client = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def generate(self, prompt: str) -> str:
        payload = post_json_with_retry(
            self.client,
            f"/v1beta/models/{self.model}:generateContent",
            {
                "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
                "contents": [{"parts": [{"text": prompt}]}],
            },
            params={"key": self._api_key},
            headers={"Content-Type": "application/json"},
            retries=self._retries,
            backoff_seconds=self._backoff_seconds,
        )
        text = _extract_text(payload)
        if not text:
            reason = _block_reason(payload)
            if reason:
                raise ValueError(f"Gemini declined the prompt: {reason}")
        return text

    def move_text(self, context: FactionContext, location: Location, day: int, weather: str, distance: int) -> MoveNarrative:
        prompt = (
            f"Day: {day}\n"
            f"Weather: {weather}\n"
            f"Sect: {context.name} ({context.title})\n"
            f"Location: {location.name}\n"
            f"Scene: {location.description}\n"
            f"Action: riding hard ({distance} li)\n\n"
            f"Task:\n"
            f"1. Describe a short encounter on the road (under 100 words) that takes place at {location.name}.\n"
            f"2. Draw on the scene description: \"{location.description}\".\n"
            f"3. Show how the {weather.lower()} hampers or helps the journey.\n\n"
            f"Output format (separated by \"{OPPORTUNITY_DELIMITER}\"):\n"
            f"(leave empty) {OPPORTUNITY_DELIMITER} story text {OPPORTUNITY_DELIMITER} summary in four words or fewer"
        )
        parts = self.generate(prompt).split(OPPORTUNITY_DELIMITER)
        return MoveNarrative(
            text=_part(parts, 1) or f"Braving the {weather.lower()}, {context.name} presses on.",
            summary=_part(parts, 2) or FALLBACK_MOVE_SUMMARY,
        )

    def conflict_text(self, first: FactionContext, second: FactionContext, location_name: str, weather: str) -> str:
        prompt = (
            f"Location: {location_name}\n"
            f"Weather: {weather}\n"
            f"Sides: {first.name} versus {second.name}\n\n"
            f"Task:\n"
            f"1. Describe the two sects meeting on a narrow road here (about 60 words).\n"
            f"2. Weave in the atmosphere of the {weather.lower()}.\n"
            f"3. Offer one way they might face an outside danger together."
        )
        return self.generate(prompt) or FALLBACK_CONFLICT_TEXT

    def opportunity(self, context: FactionContext, location: Location, weather: str) -> OpportunityNarrative:
        scenario = OPPORTUNITY_SCENARIOS[
            pick_index(
                "gemini.opportunity",
                {"faction": context.faction_id, "location": location.index, "weather": weather},
                len(OPPORTUNITY_SCENARIOS),
            )
        ]
        stats = context.stats
        prompt = (
            f"Role: you are a veteran wuxia novelist.\n"
            f"Sect: {context.name}\n"
            f"Attributes: martial {stats.get('martial', 0)}, strategy {stats.get('strategy', 0)}, "
            f"wealth {stats.get('wealth', 0)}, prestige {stats.get('prestige', 0)}\n"
            f"Location: {location.name}\n"
            f"Scene details: {location.description}\n"
            f"Weather: {weather}\n"
            f"Inspiration: {scenario}\n\n"
            f"Task: write an immersive chance encounter with detailed branches for the DM to rule on.\n\n"
            f"Output three parts separated by \"{OPPORTUNITY_DELIMITER}\":\n"
            f"Part one: event title (four words, classical tone)\n"
            f"Part two: story (about 150 words, using the location \"{location.description}\" and the weather)\n"
            f"Part three: DM ruling guide (detailed branches)\n\n"
            f"Note: outcomes may only change attributes or distance. No items."
        )
        parts = self.generate(prompt).split(OPPORTUNITY_DELIMITER)
        return OpportunityNarrative(
            title=_part(parts, 0) or FALLBACK_OPPORTUNITY_TITLE,
            description=_part(parts, 1) or f"In the {weather.lower()}, the winds of fortune shift.",
            arbiter_notes=_part(parts, 2) or FALLBACK_OPPORTUNITY_NOTES,
        )

    def close(self) -> None:
        self.client.close()
