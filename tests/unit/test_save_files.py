import sys
import tempfile
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from qiyao.domain.errors import GameFormatError, SaveFailedError
from qiyao.infrastructure.save_files import export_document, import_document


class SaveFileTests(unittest.TestCase):
    def test_export_then_import(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            target = Path(tmp_dir) / "saves" / "day3.json"
            written = export_document(target, '{"day": 3}')
            self.assertEqual(target, written)
            self.assertEqual('{"day": 3}', import_document(target))
            self.assertEqual(["day3.json"], sorted(path.name for path in target.parent.iterdir()))

    def test_import_missing_file_is_a_format_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            with self.assertRaises(GameFormatError):
                import_document(Path(tmp_dir) / "missing.json")

    def test_export_into_a_file_path_fails_cleanly(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            blocker = Path(tmp_dir) / "blocker"
            blocker.write_text("x", encoding="utf-8")
            with self.assertRaises(SaveFailedError):
                export_document(blocker / "save.json", "{}")


if __name__ == "__main__":
    unittest.main()
