import logging
import os
import random

from qiyao.application.services.autosave import register_autosave_handlers
from qiyao.application.services.event_bus import EventBus
from qiyao.application.services.game_service import GameService
from qiyao.application.services.narrative_service import NarrativeService
from qiyao.domain.repositories import SaveSlotRepository
from qiyao.domain.services.encounter_detector import DEFAULT_OPPORTUNITY_CHANCE
from qiyao.infrastructure.gemini_client import GeminiNarrativeClient
from qiyao.infrastructure.inmemory.inmemory_faction_profile_repo import InMemoryFactionProfileRepository
from qiyao.infrastructure.inmemory.inmemory_location_repo import InMemoryLocationRepository
from qiyao.infrastructure.inmemory.inmemory_save_slot_repo import InMemorySaveSlotRepository


logger = logging.getLogger(__name__)


def _is_enabled(name: str, default: str = "1") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _gemini_api_key() -> str:
    for name in ("QIYAO_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY"):
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


def _build_narrative_service() -> NarrativeService:
    timeout = float(os.getenv("QIYAO_NARRATIVE_TIMEOUT_S", "20"))
    api_key = _gemini_api_key()
    if not api_key:
        return NarrativeService(timeout_seconds=timeout)

    retries = int(os.getenv("QIYAO_NARRATIVE_RETRIES", "1"))
    backoff_seconds = float(os.getenv("QIYAO_NARRATIVE_BACKOFF_S", "0.2"))
    model = os.getenv("QIYAO_GEMINI_MODEL", GeminiNarrativeClient.DEFAULT_MODEL).strip()
    client = GeminiNarrativeClient(
        api_key,
        model=model,
        timeout=timeout,
        retries=retries,
        backoff_seconds=backoff_seconds,
    )
    return NarrativeService(client, timeout_seconds=timeout)


def _build_save_slot_repo() -> SaveSlotRepository:
    database_url = os.getenv("QIYAO_DATABASE_URL", "").strip()
    if not database_url:
        return InMemorySaveSlotRepository()

    from qiyao.infrastructure.db.sql.connection import create_session_factory
    from qiyao.infrastructure.db.sql.save_slot_repo import SqlSaveSlotRepository

    try:
        return SqlSaveSlotRepository(create_session_factory(database_url))
    except Exception as exc:
        raise RuntimeError(f"Save slot database bootstrap failed: {exc}") from exc


def _build_rng() -> random.Random:
    raw_seed = os.getenv("QIYAO_SEED", "").strip()
    if not raw_seed:
        return random.Random()
    try:
        return random.Random(int(raw_seed))
    except ValueError:
        logger.warning("Ignoring non-integer QIYAO_SEED=%r", raw_seed)
        return random.Random()


def create_game_service() -> GameService:
    event_bus = EventBus()
    opportunity_chance = float(os.getenv("QIYAO_OPPORTUNITY_CHANCE", str(DEFAULT_OPPORTUNITY_CHANCE)))
    service = GameService(
        InMemoryLocationRepository(),
        InMemoryFactionProfileRepository(),
        narrative_service=_build_narrative_service(),
        event_bus=event_bus,
        save_slot_repo=_build_save_slot_repo(),
        rng=_build_rng(),
        opportunity_chance=opportunity_chance,
    )
    if _is_enabled("QIYAO_AUTOSAVE"):
        register_autosave_handlers(event_bus, service)
    service.initialize()
    return service
