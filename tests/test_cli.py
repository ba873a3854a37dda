"""
Tests for CLI entry points.

These tests focus on:
- Basic CLI argument validation (blank school name, unknown office, bad dates)
- Search/export output with the NEIS client replaced by a fake
- Saved search handling using a temporary file
  (to avoid touching real user data during tests)
"""

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from schoolcal.cli import main
from schoolcal.model import SearchState
from schoolcal.storage import load_search_state, save_search_state
from tests.fakes import FakeClient


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.state_file = self.dir / "last_search.json"
        self.client = FakeClient()
        patcher = mock.patch("schoolcal.cli.NeisClient", return_value=self.client)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_cli(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(SystemExit) as ctx:
                main(["--state-file", str(self.state_file), *argv])
        return ctx.exception.code, out.getvalue()

    def test_cli_search_requires_text(self) -> None:
        # blank school name: nonzero exit, no request made
        code, out = self.run_cli("search", "  ")
        self.assertNotEqual(code, 0)
        self.assertIn("학교명을 입력해주세요.", out)
        self.assertEqual(self.client.calls, [])

    def test_search_prints_events_and_saves(self) -> None:
        code, out = self.run_cli("search", "오금중학교", "--office", "b10", "--from", "2024-03-01", "--to", "2024-03-15")
        self.assertEqual(code, 0)
        self.assertIn("  1 | 2024-03-02 | 입학식", out)
        self.assertIn("  2 | 2024-03-01 | 삼일절", out)
        self.assertIn("3 events", out)
        self.assertEqual(
            load_search_state(self.state_file), SearchState("B10", "오금중학교", "2024-03-01", "2024-03-15")
        )

    def test_missing_arguments_come_from_saved_search(self) -> None:
        save_search_state(SearchState("J10", "수원고등학교", "2024-05-01", "2024-05-31"), self.state_file)
        code, _ = self.run_cli("search", "--to", "2024-05-10")
        self.assertEqual(code, 0)
        self.assertEqual(self.client.calls[0], ("school", "J10", "수원고등학교"))
        self.assertEqual(self.client.calls[1][3:], ("2024-05-01", "2024-05-10"))

    def test_not_found_exits_nonzero_and_keeps_saved_search(self) -> None:
        saved = SearchState("J10", "수원고등학교", "2024-05-01", "2024-05-31")
        save_search_state(saved, self.state_file)
        self.client.schools = []
        code, out = self.run_cli("search", "없는학교")
        self.assertEqual(code, 1)
        self.assertIn("해당 학교를 찾을 수 없습니다", out)
        self.assertEqual(load_search_state(self.state_file), saved)

    def test_unwritable_state_file_still_prints_events(self) -> None:
        # the state file path is a directory: saving fails, the events are still shown
        self.state_file = self.dir / "is_a_dir"
        self.state_file.mkdir()
        code, out = self.run_cli("search", "오금중학교")
        self.assertEqual(code, 0)
        self.assertIn("  1 | 2024-03-02 | 입학식", out)

    def test_export_to_unwritable_path_exits_nonzero(self) -> None:
        code, out = self.run_cli("export", str(self.dir), "오금중학교")
        self.assertEqual(code, 1)
        self.assertIn("Export failed", out)

    def test_unknown_office_is_rejected(self) -> None:
        with redirect_stdout(io.StringIO()), mock.patch("sys.stderr", new=io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["search", "오금중학교", "--office", "Z99"])
        self.assertEqual(ctx.exception.code, 2)

    def test_bad_date_is_rejected(self) -> None:
        with mock.patch("sys.stderr", new=io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["search", "오금중학교", "--from", "2024/03/01x"])
        self.assertEqual(ctx.exception.code, 2)

    def test_export_writes_ics(self) -> None:
        out_file = self.dir / "cal.ics"
        code, out = self.run_cli("export", str(out_file), "오금중학교")
        self.assertEqual(code, 0)
        self.assertIn("Exported 3 events", out)
        self.assertIn("BEGIN:VEVENT", out_file.read_text(encoding="utf-8"))

    def test_last_without_saved_search(self) -> None:
        code, out = self.run_cli("last")
        self.assertEqual(code, 0)
        self.assertIn("No saved search.", out)

    def test_last_shows_saved_search(self) -> None:
        save_search_state(SearchState("B10", "오금중학교", "2024-03-01", "2024-03-15"), self.state_file)
        code, out = self.run_cli("last")
        self.assertEqual(code, 0)
        self.assertIn("서울특별시교육청", out)
        self.assertIn("2024-03-01 ~ 2024-03-15", out)

    def test_offices(self) -> None:
        code, out = self.run_cli("offices")
        self.assertEqual(code, 0)
        self.assertIn("B10 | 서울특별시교육청", out)
        self.assertEqual(len(out.strip().splitlines()), 17)


if __name__ == "__main__":
    unittest.main()
