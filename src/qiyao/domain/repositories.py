from abc import ABC, abstractmethod
from typing import List, Optional

from qiyao.domain.models.faction import FactionId, FactionProfile
from qiyao.domain.models.location import GOAL_PROGRESS, START_PROGRESS, Location


class LocationRepository(ABC):
    @abstractmethod
    def get(self, index: int) -> Optional[Location]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Location]:
        raise NotImplementedError

    @abstractmethod
    def for_progress(self, progress) -> Location:
        raise NotImplementedError

    def get_starting_location(self) -> Location:
        return self.for_progress(START_PROGRESS)

    def get_goal_location(self) -> Location:
        return self.for_progress(GOAL_PROGRESS)


class FactionProfileRepository(ABC):
    @abstractmethod
    def get(self, faction_id: FactionId) -> FactionProfile:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[FactionProfile]:
        raise NotImplementedError

    def display_name(self, faction_id: FactionId) -> str:
        """Convenience for log lines; falls back to the raw id."""
        try:
            return self.get(faction_id).name
        except KeyError:
            return str(getattr(faction_id, "value", faction_id))


class SaveSlotRepository(ABC):
    @abstractmethod
    def save(self, slot_name: str, document: str, day: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def load(self, slot_name: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def list_slots(self) -> List[str]:
        raise NotImplementedError
