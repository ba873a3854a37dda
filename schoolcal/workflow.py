"""
Lookup workflow: school name -> school code -> academic events.

lookup() is the core: it takes an immutable SearchState and a directory client
and returns a LookupResult. It never touches the saved search itself.

SearchSession is the thin state holder around it used by the CLI and the
interactive form: it keeps the current form values and the last result, and
persists the search after a successful lookup.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

from schoolcal.errors import EmptyResultError, LookupFailure, NotFoundError, ValidationError
from schoolcal.model import AcademicEvent, LookupResult, SchoolInfo, SearchState
from schoolcal.storage import initial_search_state, save_search_state

logger = logging.getLogger(__name__)


class DirectoryClient(Protocol):
    def fetch_school_info(self, office_code: str, school_name: str) -> Sequence[SchoolInfo]: ...

    def fetch_schedule(
        self, office_code: str, school_code: str, start_date: str, end_date: str
    ) -> Sequence[AcademicEvent]: ...


def lookup(state: SearchState, client: DirectoryClient) -> LookupResult:
    """
    Resolve the school, then fetch its events in the requested range.

    Failure order:
    - blank school name -> ValidationError (no network call)
    - no school matched -> NotFoundError (event lookup is skipped)
    - no events in range -> EmptyResultError
    - any transport problem -> TransportError (raised by the client)
    """
    school_name = state.school_name.strip()
    if not school_name:
        return LookupResult(state=state, error=ValidationError())

    try:
        schools = client.fetch_school_info(state.office_code, school_name)
        if not schools:
            raise NotFoundError(f"{state.office_code}/{school_name}")

        # several schools can share a name within one office: first one wins
        school = schools[0]
        if len(schools) > 1:
            logger.info("%d schools match %r, using %s", len(schools), school_name, school.school_code)

        events = client.fetch_schedule(state.office_code, school.school_code, state.start_date, state.end_date)
        if not events:
            raise EmptyResultError(f"{school.school_code} {state.start_date}..{state.end_date}")
    except LookupFailure as exc:
        logger.info("Lookup failed (%s): %s", type(exc).__name__, exc)
        return LookupResult(state=state, error=exc)

    return LookupResult(state=state, events=tuple(events), school=school)


class SearchSession:
    """
    Holds the form values and the last accepted result.

    Every search gets a request token. Only the result for the most recently
    issued token is accepted; older completions are dropped.
    """

    def __init__(self, client: DirectoryClient, state_path: str | Path | None = None) -> None:
        self.client = client
        self.state_path = state_path
        self.state: SearchState = initial_search_state(state_path)
        self.result: Optional[LookupResult] = None
        self._latest_token = 0

    @property
    def events(self) -> tuple[AcademicEvent, ...]:
        return self.result.events if self.result is not None else ()

    def issue_token(self) -> int:
        self._latest_token += 1
        return self._latest_token

    def accept(self, token: int, result: LookupResult) -> bool:
        """
        Store `result` if `token` is still the latest one. Returns False for stale results.
        """
        if token != self._latest_token:
            logger.debug("Dropping result of superseded search %d (latest is %d)", token, self._latest_token)
            return False

        self.state = result.state
        # a failure replaces (clears) the previous result list
        self.result = result
        if result.should_persist:
            try:
                save_search_state(result.state, self.state_path)
            except OSError as exc:
                # the lookup itself succeeded; only the saved search is stale
                logger.warning("Could not save search to %s: %s", self.state_path or "default location", exc)
        return True

    def search(self, state: SearchState) -> LookupResult:
        token = self.issue_token()
        result = lookup(state, self.client)
        self.accept(token, result)
        return result
