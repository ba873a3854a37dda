"""
Test doubles for the NEIS directory client.
"""

from __future__ import annotations

from typing import Optional, Sequence

from schoolcal.errors import TransportError
from schoolcal.model import AcademicEvent, SchoolInfo

OGEUM = SchoolInfo(office_code="B10", school_code="7130165", school_name="오금중학교")

EVENTS = [
    AcademicEvent(date="20240302", event_name="입학식"),
    AcademicEvent(date="20240301", event_name="삼일절"),
    AcademicEvent(date="20240302", event_name="입학식"),
]


class FakeClient:
    """
    Records calls; returns canned schools/events or raises TransportError.
    """

    def __init__(
        self,
        schools: Optional[Sequence[SchoolInfo]] = None,
        events: Optional[Sequence[AcademicEvent]] = None,
        fail_school: bool = False,
        fail_schedule: bool = False,
    ) -> None:
        self.schools = list(schools) if schools is not None else [OGEUM]
        self.events = list(events) if events is not None else list(EVENTS)
        self.fail_school = fail_school
        self.fail_schedule = fail_schedule
        self.calls: list[tuple] = []

    def fetch_school_info(self, office_code: str, school_name: str) -> list[SchoolInfo]:
        self.calls.append(("school", office_code, school_name))
        if self.fail_school:
            raise TransportError("schoolInfo: boom")
        return list(self.schools)

    def fetch_schedule(self, office_code: str, school_code: str, start_date: str, end_date: str) -> list[AcademicEvent]:
        self.calls.append(("schedule", office_code, school_code, start_date, end_date))
        if self.fail_schedule:
            raise TransportError("SchoolSchedule: boom")
        return list(self.events)

    def close(self) -> None:
        pass
