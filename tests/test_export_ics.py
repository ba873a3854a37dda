import tempfile
import unittest
from pathlib import Path

from schoolcal.export_ics import export_events_to_ics
from schoolcal.model import AcademicEvent, SchoolInfo


class TestExportICS(unittest.TestCase):
    def test_export_creates_all_day_events(self) -> None:
        events = [
            AcademicEvent(date="20240304", event_name="입학식, 시업식"),
            AcademicEvent(date="20241231", event_name="겨울방학"),
        ]
        school = SchoolInfo(office_code="B10", school_code="7130165", school_name="오금중학교")

        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            n = export_events_to_ics(events, out, school=school)
            self.assertEqual(n, 2)
            text = out.read_text(encoding="utf-8")
            self.assertIn("BEGIN:VCALENDAR", text)
            self.assertIn("DTSTART;VALUE=DATE:20240304", text)
            self.assertIn("DTEND;VALUE=DATE:20240305", text)
            # exclusive end rolls over the year
            self.assertIn("DTEND;VALUE=DATE:20250101", text)
            self.assertIn("SUMMARY:입학식\\, 시업식", text)
            self.assertIn("UID:7130165-20240304-1@schoolcal", text)
            self.assertTrue(text.endswith("END:VCALENDAR\r\n"))

    def test_invalid_dates_are_skipped(self) -> None:
        events = [
            AcademicEvent(date="2024", event_name="short"),
            AcademicEvent(date="20241340", event_name="bad"),
            AcademicEvent(date="20240301", event_name="삼일절"),
        ]
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            self.assertEqual(export_events_to_ics(events, out), 1)
            self.assertEqual(out.read_text(encoding="utf-8").count("BEGIN:VEVENT"), 1)


if __name__ == "__main__":
    unittest.main()
