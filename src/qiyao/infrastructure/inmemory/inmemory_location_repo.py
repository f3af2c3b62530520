from typing import List, Optional, Sequence

from qiyao.domain.models.location import Location
from qiyao.domain.repositories import LocationRepository
from qiyao.domain.services.route import location_for_progress, validate_route_table
from qiyao.infrastructure.inmemory.generated_route_locations import ROUTE_LOCATIONS


class InMemoryLocationRepository(LocationRepository):
    def __init__(self, locations: Optional[Sequence[Location]] = None):
        table = tuple(locations) if locations is not None else ROUTE_LOCATIONS
        validate_route_table(table)
        self._locations = table

    def get(self, index: int) -> Optional[Location]:
        if 0 <= int(index) < len(self._locations):
            return self._locations[int(index)]
        return None

    def list_all(self) -> List[Location]:
        return list(self._locations)

    def for_progress(self, progress) -> Location:
        return location_for_progress(progress, self._locations)
