from typing import Dict, List, Optional, Tuple

from qiyao.domain.repositories import SaveSlotRepository


class InMemorySaveSlotRepository(SaveSlotRepository):
    def __init__(self) -> None:
        self._slots: Dict[str, Tuple[int, str]] = {}

    def save(self, slot_name: str, document: str, day: int) -> None:
        self._slots[str(slot_name)] = (int(day), str(document))

    def load(self, slot_name: str) -> Optional[str]:
        row = self._slots.get(str(slot_name))
        return row[1] if row is not None else None

    def list_slots(self) -> List[str]:
        return sorted(self._slots.keys())
