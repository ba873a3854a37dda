"""
Persistent storage for the last successful search.

This module manages a single JSON file (by default):

    ~/.schoolcal/last_search.json

with the schema

    {"officeCode": "B10", "schoolName": "...", "startDate": "YYYY-MM-DD", "endDate": "YYYY-MM-DD"}

The file is read once at startup to pre-fill the search form and overwritten
after every successful, non-empty search. There is no version tag, no merge
and no migration: a file that does not match the schema is simply ignored.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Optional

from schoolcal.dates import default_date_range, parse_display_date
from schoolcal.model import SearchState
from schoolcal.offices import DEFAULT_OFFICE_CODE, find_office

logger = logging.getLogger(__name__)

STATE_FILE_ENV = "SCHOOLCAL_STATE_FILE"

_FIELDS = {
    "officeCode": "office_code",
    "schoolName": "school_name",
    "startDate": "start_date",
    "endDate": "end_date",
}


def _default_state_path() -> Path:
    """
    Return the default location of the state file.

    Using a function instead of a constant makes testing easier,
    because tests can override the path (or the environment variable).
    """
    override = os.environ.get(STATE_FILE_ENV, "").strip()
    if override:
        return Path(override)
    return Path.home() / ".schoolcal" / "last_search.json"


def _parse_state(data: object) -> Optional[SearchState]:
    if not isinstance(data, dict):
        return None
    values: dict[str, str] = {}
    for key, attr in _FIELDS.items():
        value = data.get(key)
        if not isinstance(value, str):
            return None
        values[attr] = value

    # dates must be real YYYY-MM-DD dates and the office must be a known one
    office = find_office(values["office_code"])
    if office is None:
        return None
    values["office_code"] = office.code
    try:
        values["start_date"] = parse_display_date(values["start_date"])
        values["end_date"] = parse_display_date(values["end_date"])
    except ValueError:
        return None
    return SearchState(**values)


def load_search_state(path: str | Path | None = None) -> Optional[SearchState]:
    """
    Load the last saved search.

    Returns None if the file does not exist or cannot be parsed as a saved
    search. Never raises: a broken file is logged and treated as absent.
    """
    state_path = Path(path) if path is not None else _default_state_path()

    # First run: nothing saved yet
    if not state_path.exists():
        return None

    try:
        data = json.loads(state_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable saved search %s: %s", state_path, exc)
        return None

    state = _parse_state(data)
    if state is None:
        logger.warning("Ignoring saved search %s: unexpected shape", state_path)
    return state


def save_search_state(state: SearchState, path: str | Path | None = None) -> None:
    """
    Overwrite the saved search with `state`.

    Creates parent directories if needed.
    """
    state_path = Path(path) if path is not None else _default_state_path()
    state_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {key: getattr(state, attr) for key, attr in _FIELDS.items()}
    state_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Saved search to %s", state_path)


def initial_search_state(path: str | Path | None = None, today: Optional[date] = None) -> SearchState:
    """
    The form values to start with: the saved search, or the defaults
    (default office, empty school name, today .. today + 14 days).
    """
    saved = load_search_state(path)
    if saved is not None:
        return saved
    start, end = default_date_range(today)
    return SearchState(office_code=DEFAULT_OFFICE_CODE, school_name="", start_date=start, end_date=end)
