import io
import os
import sys
import tempfile
from pathlib import Path
import unittest
from unittest import mock

from rich.console import Console

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from qiyao import bootstrap
from qiyao.domain.models.faction import FactionId
from qiyao.presentation.arbiter_console import ArbiterConsole, parse_fortune_args, parse_path_points


def _scripted_input(commands: list[str]):
    pending = iter(commands)

    def _input(_prompt: str) -> str:
        try:
            return next(pending)
        except StopIteration:
            raise EOFError from None

    return _input


class ArbiterConsoleFlowTests(unittest.TestCase):
    def _run(self, commands: list[str]):
        with mock.patch.dict(os.environ, {"QIYAO_OPPORTUNITY_CHANCE": "0", "QIYAO_AUTOSAVE": "0"}, clear=False):
            service = bootstrap.create_game_service()
        buffer = io.StringIO()
        console = Console(file=buffer, width=200, color_system=None)
        ArbiterConsole(service, console=console, input_fn=_scripted_input(commands)).run()
        return service, buffer.getvalue()

    def test_clash_is_ruled_and_recorded(self) -> None:
        service, transcript = self._run(["next 3", "next 3", "battle beige 2", "standings", "log 1", "quit"])

        factions = service.state.factions
        self.assertEqual(1, factions[FactionId.TIANHE].progress)
        self.assertEqual(3, factions[FactionId.BEIGE].progress)
        self.assertEqual(FactionId.WANGSHENG, service.state.active_faction_id)
        self.assertIn("Clash at", transcript)
        self.assertIn("Standings", transcript)
        self.assertIn("[Battle]", transcript)
        self.assertIn("Farewell", transcript)

    def test_save_export_and_import_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            export_path = Path(tmp_dir) / "nested" / "run.json"
            service, transcript = self._run(
                [
                    "next 4",
                    "stat TIANHE martial 33",
                    "save first",
                    "slots",
                    f"export {export_path}",
                    "next 2",
                    f"import {export_path}",
                ]
            )

            self.assertTrue(export_path.exists())
            self.assertEqual(export_path.read_text(encoding="utf-8"), service.save())

        self.assertEqual(33, service.state.factions[FactionId.TIANHE].stats.martial)
        self.assertEqual(0, service.state.factions[FactionId.BEIGE].progress)
        self.assertIn("Saved to slot first.", transcript)
        self.assertIn("martial is now 33", transcript)
        self.assertEqual(["first"], service.list_save_slots())

    def test_errors_are_reported_without_leaving_the_loop(self) -> None:
        service, transcript = self._run(["battle TIANHE", "fortune maybe", "load nowhere", "bogus", "help", "exit"])

        self.assertIn("No interaction is waiting for a ruling", transcript)
        self.assertIn("fortune needs success or failure", transcript)
        self.assertIn("Save slot 'nowhere' is empty", transcript)
        self.assertIn("Unknown command 'bogus'", transcript)
        self.assertIn("Arbiter commands", transcript)
        self.assertEqual(1, service.state.day)
        self.assertEqual(FactionId.TIANHE, service.state.active_faction_id)

    def test_oversized_distance_keeps_the_session_alive(self) -> None:
        huge = "9" * 400
        service, transcript = self._run([f"next {huge}", "next 1e400", "standings"])

        self.assertEqual(120, service.state.factions[FactionId.TIANHE].progress)
        self.assertEqual(5, service.state.factions[FactionId.BEIGE].progress)
        self.assertEqual(FactionId.WANGSHENG, service.state.active_faction_id)
        self.assertIn("Standings", transcript)
        self.assertIn("Farewell", transcript)

    def test_path_command_sets_and_clears_route(self) -> None:
        service, transcript = self._run(["path 0,0 10,0 10,10", "positions", "path clear"])

        self.assertIsNone(service.state.path)
        self.assertIn("Route set with 3 points.", transcript)
        self.assertIn("Token positions", transcript)
        self.assertIn("Route cleared.", transcript)

    def test_non_finite_path_is_refused(self) -> None:
        service, transcript = self._run(["path 0,0 nan,5", "path inf,0 10,10"])

        self.assertIsNone(service.state.path)
        self.assertIn("must have finite coordinates", transcript)
        self.assertIn("Farewell", transcript)


class CommandParsingTests(unittest.TestCase):
    def test_fortune_arguments(self) -> None:
        options = parse_fortune_args(["failure", "backward", "7", "strategy=-3", "skip", "extra"])

        self.assertFalse(options["success"])
        self.assertEqual("backward", options["reward_direction"])
        self.assertEqual(7, options["distance"])
        self.assertEqual({"strategy": -3}, options["stat_deltas"])
        self.assertTrue(options["skip_flag"])
        self.assertTrue(options["extra_action_flag"])

    def test_fortune_rejects_unknown_stat(self) -> None:
        with self.assertRaises(ValueError):
            parse_fortune_args(["success", "luck=+2"])

    def test_path_points(self) -> None:
        self.assertEqual([(1.0, 2.5), (3.0, 4.0)], parse_path_points(["1,2.5", "3,4"]))
        with self.assertRaises(ValueError):
            parse_path_points(["12"])


if __name__ == "__main__":
    unittest.main()
