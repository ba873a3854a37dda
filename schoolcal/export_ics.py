"""
iCalendar (.ics) export.

We convert academic events into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Academic events have no time of day, so each one becomes an all-day VEVENT.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional

from schoolcal.model import AcademicEvent, SchoolInfo


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _all_day(date_yyyymmdd: str) -> tuple[str, str]:
    """
    Return (DTSTART, DTEND) values for an all-day event. DTEND is exclusive.
    Raises ValueError for invalid dates.
    """
    day = datetime.strptime(date_yyyymmdd, "%Y%m%d").date()
    return day.strftime("%Y%m%d"), (day + timedelta(days=1)).strftime("%Y%m%d")


def export_events_to_ics(
    events: Iterable[AcademicEvent],
    out_path: str | Path,
    school: Optional[SchoolInfo] = None,
) -> int:
    """
    Export events to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//schoolcal//EN")
    lines.append("CALSCALE:GREGORIAN")
    if school is not None:
        lines.append(f"X-WR-CALNAME:{_ics_escape(school.school_name)}")

    uid_prefix = school.school_code if school is not None else "schoolcal"
    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    count = 0
    for i, ev in enumerate(events, start=1):
        date = ev.date.strip()
        if len(date) != 8:
            continue
        try:
            dtstart, dtend = _all_day(date)
        except ValueError:
            continue

        summary = ev.event_name.strip() or "학사일정"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(f'{uid_prefix}-{date}-{i}')}@schoolcal")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART;VALUE=DATE:{dtstart}")
        lines.append(f"DTEND;VALUE=DATE:{dtend}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if school is not None:
            lines.append(f"DESCRIPTION:{_ics_escape(school.school_name)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
