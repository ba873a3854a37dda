"""
Central data model definitions used across the project.

This module defines the canonical structure of the objects exchanged between
the NEIS client, the lookup workflow, storage and the UI layers so that:
- all modules share the same field names
- raw NEIS field names (ATPT_OFCDC_SC_CODE, SD_SCHUL_CODE, ...) stay inside the client
- values passed between layers are immutable
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from schoolcal.errors import LookupFailure


@dataclass(frozen=True)
class EducationOffice:
    """
    One regional education authority (static list, see schoolcal.offices).
    """

    code: str
    name: str


@dataclass(frozen=True)
class SchoolInfo:
    """
    Identifies exactly one school. school_code is the join key for the event lookup.
    """

    office_code: str
    school_code: str
    school_name: str


@dataclass(frozen=True)
class AcademicEvent:
    """
    One calendar entry of a school.

    date is kept in the compact NEIS format YYYYMMDD; use
    schoolcal.dates.format_display_date() for output.
    """

    date: str
    event_name: str


@dataclass(frozen=True)
class SearchState:
    """
    The four form fields of a search. Dates are in display format (YYYY-MM-DD).

    This is the only record with a lifecycle beyond a single request:
    it is written to disk after a successful search and read back at startup.
    """

    office_code: str
    school_name: str
    start_date: str
    end_date: str


@dataclass(frozen=True)
class LookupResult:
    """
    Outcome of one lookup: either events (success) or a failure.
    """

    state: SearchState
    events: Tuple[AcademicEvent, ...] = ()
    school: Optional[SchoolInfo] = None
    error: Optional[LookupFailure] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None and len(self.events) > 0

    @property
    def should_persist(self) -> bool:
        # only a non-empty, error-free result may overwrite the saved search
        return self.ok
