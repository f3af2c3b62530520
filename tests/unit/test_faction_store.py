import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from qiyao.application.services.faction_store import FactionStateStore
from qiyao.domain.errors import InvalidStatError
from qiyao.domain.models.faction import FactionId, FactionStats
from qiyao.domain.services.interaction_resolver import Retreat
from qiyao.infrastructure.inmemory.inmemory_location_repo import InMemoryLocationRepository


class FactionStateStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.locations = InMemoryLocationRepository()
        self.states = FactionStateStore.build_initial(self.locations.get_starting_location())
        self.store = FactionStateStore(self.states)

    def test_initial_records(self) -> None:
        self.assertEqual(list(FactionId.ordered()), [state.id for state in self.store.list_all()])
        for state in self.store.list_all():
            self.assertEqual(0, state.progress)
            self.assertEqual(["Qiyao Palace"], state.visited_locations)
            self.assertEqual("poised", state.last_move_descriptor)
            self.assertEqual({"martial": 20, "strategy": 20, "wealth": 20, "prestige": 0}, state.stats.as_dict())

    def test_starting_stats_overrides(self) -> None:
        states = FactionStateStore.build_initial(
            self.locations.get_starting_location(),
            {"DARI": {"wealth": 60}, FactionId.TIANHE: FactionStats(martial=40, strategy=10, wealth=5, prestige=2)},
        )
        self.assertEqual(60, states[FactionId.DARI].stats.wealth)
        self.assertEqual(0, states[FactionId.DARI].stats.martial)
        self.assertEqual(40, states[FactionId.TIANHE].stats.martial)
        self.assertEqual(20, states[FactionId.BEIGE].stats.martial)

        flat = FactionStateStore.build_initial(self.locations.get_starting_location(), {"martial": 1})
        self.assertEqual(1, flat[FactionId.NANTUO].stats.martial)

    def test_store_requires_every_faction(self) -> None:
        partial = dict(self.states)
        partial.pop(FactionId.XUEYI)
        with self.assertRaises(ValueError):
            FactionStateStore(partial)

    def test_edit_stat_coerces_and_skips_history(self) -> None:
        self.store.edit_stat("fulong", "Martial", "33")
        self.store.edit_stat(FactionId.FULONG, "wealth", "plenty")
        state = self.store.get(FactionId.FULONG)
        self.assertEqual(33, state.stats.martial)
        self.assertEqual(0, state.stats.wealth)
        self.assertEqual([], state.history)

    def test_edit_stat_rejects_unknown_names(self) -> None:
        with self.assertRaises(InvalidStatError):
            self.store.edit_stat(FactionId.FULONG, "luck", 3)

    def test_read_returns_copies(self) -> None:
        copy = self.store.read(FactionId.BEIGE)
        copy.stats.martial = 999
        self.assertEqual(20, self.store.get(FactionId.BEIGE).stats.martial)

    def test_apply_retreat(self) -> None:
        location = self.locations.for_progress(30)
        self.store.apply_retreat(
            Retreat(FactionId.BEIGE, 30, location.name, "-10 li (defeated)", "[Battle] lost"),
            day=3,
        )
        state = self.store.get(FactionId.BEIGE)
        self.assertEqual(30, state.progress)
        self.assertEqual(location.name, state.current_location_name)
        self.assertEqual("-10 li (defeated)", state.last_move_descriptor)
        self.assertEqual(["[Day 3] [Battle] lost"], state.history)
        self.assertIn(location.name, state.visited_locations)

    def test_stat_deltas_and_skip(self) -> None:
        self.store.apply_stat_deltas(FactionId.DARI, FactionStats(martial=-25, strategy=0, wealth=5, prestige=1))
        self.store.flag_skip(FactionId.DARI)
        state = self.store.get(FactionId.DARI)
        self.assertEqual(-5, state.stats.martial)
        self.assertEqual(25, state.stats.wealth)
        self.assertTrue(state.skip_next_turn)


if __name__ == "__main__":
    unittest.main()
