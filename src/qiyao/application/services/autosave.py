import logging

from qiyao.application.services.event_bus import EventBus
from qiyao.domain.events import DayCompleted


logger = logging.getLogger(__name__)

AUTOSAVE_SLOT = "autosave"


def register_autosave_handlers(event_bus: EventBus, service, *, slot_name: str = AUTOSAVE_SLOT) -> None:
    """Write the whole game to ``slot_name`` each time a day wraps."""

    def _on_day_completed(event: DayCompleted) -> None:
        if service.save_slot_repo is None:
            return
        service.save_to_slot(slot_name)
        logger.info("Autosaved day %s to slot %s", event.next_day, slot_name)

    event_bus.subscribe(DayCompleted, _on_day_completed, priority=200)
