import asyncio
import json
import random
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from qiyao.application.mappers.game_state_mapper import dumps_document, game_state_to_document, loads_document
from qiyao.application.services.game_service import GameService
from qiyao.domain.errors import GameFormatError
from qiyao.domain.models.faction import FactionId
from qiyao.infrastructure.inmemory.inmemory_faction_profile_repo import InMemoryFactionProfileRepository
from qiyao.infrastructure.inmemory.inmemory_location_repo import InMemoryLocationRepository


def _played_service() -> GameService:
    service = GameService(
        InMemoryLocationRepository(),
        InMemoryFactionProfileRepository(),
        rng=random.Random(3),
        opportunity_chance=0.0,
    )
    service.initialize()
    for step in range(1, 10):
        asyncio.run(service.advance_turn(step))
    service.edit_stat(FactionId.FULONG, "wealth", 80)
    service.set_path([(5, 5), (50, 40), (95, 90)])
    service.state.factions[FactionId.DARI].skip_next_turn = True
    return service


class GameStateMapperTests(unittest.TestCase):
    def setUp(self) -> None:
        self.locations = InMemoryLocationRepository()

    def test_save_then_load_is_identity(self) -> None:
        service = _played_service()
        document = service.save()
        restored = loads_document(document, self.locations.for_progress)
        self.assertEqual(service.state, restored)
        self.assertEqual(document, dumps_document(restored))

    def test_document_does_not_store_location_names(self) -> None:
        payload = game_state_to_document(_played_service().state)
        self.assertNotIn("current_location_name", payload["faction_states"]["TIANHE"])
        self.assertEqual(
            ["day", "weather", "turn_queue", "active_index", "is_day_complete", "faction_states", "global_log", "path"],
            list(payload.keys()),
        )

    def test_location_is_recomputed_and_progress_clamped(self) -> None:
        payload = game_state_to_document(_played_service().state)
        payload["faction_states"]["BEIGE"]["progress"] = 400
        restored = loads_document(json.dumps(payload), self.locations.for_progress)
        beige = restored.factions[FactionId.BEIGE]
        self.assertEqual(120, beige.progress)
        self.assertEqual("Yunmeng Marsh", beige.current_location_name)
        self.assertIn("Yunmeng Marsh", beige.visited_locations)

    def test_missing_required_fields_raise(self) -> None:
        payload = game_state_to_document(_played_service().state)
        for key in ("faction_states", "global_log"):
            broken = dict(payload)
            broken.pop(key)
            with self.assertRaises(GameFormatError):
                loads_document(json.dumps(broken), self.locations.for_progress)

    def test_malformed_documents_raise(self) -> None:
        payload = game_state_to_document(_played_service().state)
        cases = []
        missing_faction = json.loads(json.dumps(payload))
        missing_faction["faction_states"].pop("NANTUO")
        cases.append(missing_faction)
        bad_stats = json.loads(json.dumps(payload))
        bad_stats["faction_states"]["TIANHE"]["stats"]["martial"] = "strong"
        cases.append(bad_stats)
        bad_queue = json.loads(json.dumps(payload))
        bad_queue["turn_queue"] = ["TIANHE", "TIANHE"]
        cases.append(bad_queue)
        bad_index = json.loads(json.dumps(payload))
        bad_index["active_index"] = 9
        cases.append(bad_index)
        bad_category = json.loads(json.dumps(payload))
        bad_category["global_log"][0]["category"] = "gossip"
        cases.append(bad_category)
        for row, key, value in (
            ("TIANHE", "progress", float("inf")),
            ("BEIGE", "progress", float("-inf")),
            ("FULONG", "progress", float("nan")),
        ):
            non_finite = json.loads(json.dumps(payload))
            non_finite["faction_states"][row][key] = value
            cases.append(non_finite)
        nan_day = json.loads(json.dumps(payload))
        nan_day["day"] = float("nan")
        cases.append(nan_day)
        infinite_stat = json.loads(json.dumps(payload))
        infinite_stat["faction_states"]["DARI"]["stats"]["wealth"] = float("inf")
        cases.append(infinite_stat)
        nan_log_day = json.loads(json.dumps(payload))
        nan_log_day["global_log"][0]["day"] = float("nan")
        cases.append(nan_log_day)
        nan_path = json.loads(json.dumps(payload))
        nan_path["path"] = [{"x": 0, "y": 0}, {"x": float("nan"), "y": 10}]
        cases.append(nan_path)

        for case in cases:
            with self.assertRaises(GameFormatError):
                loads_document(json.dumps(case), self.locations.for_progress)
        for junk in ("not json", "[]", "null"):
            with self.assertRaises(GameFormatError):
                loads_document(junk, self.locations.for_progress)

    def test_failed_load_leaves_service_state_untouched(self) -> None:
        service = _played_service()
        before = service.save()
        with self.assertRaises(GameFormatError):
            service.load('{"faction_states": {}}')
        infinite_day = json.loads(before)
        infinite_day["day"] = float("inf")
        with self.assertRaises(GameFormatError):
            service.load(json.dumps(infinite_day))
        self.assertEqual(before, service.save())

    def test_load_discards_open_interaction(self) -> None:
        service = _played_service()
        document = service.save()
        service.detector.opportunity_chance = 1.0
        asyncio.run(service.advance_turn(1))
        self.assertIsNotNone(service.interaction)
        service.load(document)
        self.assertIsNone(service.interaction)
        self.assertEqual(document, service.save())


if __name__ == "__main__":
    unittest.main()
