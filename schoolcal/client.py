from __future__ import annotations

import logging
import os
from typing import Any, Optional

import requests

from schoolcal.dates import to_api_date
from schoolcal.errors import TransportError
from schoolcal.model import AcademicEvent, SchoolInfo

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Endpoints & settings
# ---------------------------------------------------------------------------

BASE_URL = "https://open.neis.go.kr/hub"
SCHOOL_INFO_URL = f"{BASE_URL}/schoolInfo"
SCHEDULE_URL = f"{BASE_URL}/SchoolSchedule"

API_KEY_ENV = "NEIS_API_KEY"

# RESULT code NEIS sends instead of rows when nothing matched
NO_DATA_CODE = "INFO-200"


# ---------------------------------------------------------------------------
# Envelope parsing
# ---------------------------------------------------------------------------


def extract_rows(data: Any, result_key: str) -> list[dict[str, Any]]:
    """
    Pull the row list out of a NEIS JSON envelope.

    Success looks like:
        {"schoolInfo": [{"head": [...]}, {"row": [{...}, ...]}]}
    Nothing found looks like:
        {"RESULT": {"CODE": "INFO-200", "MESSAGE": "..."}}

    Returns [] for INFO-200, raises TransportError for anything else
    that does not carry rows.
    """
    if not isinstance(data, dict):
        raise TransportError(f"{result_key}: response is not a JSON object")

    block = data.get(result_key)
    if isinstance(block, list):
        for part in block:
            if isinstance(part, dict) and isinstance(part.get("row"), list):
                rows = part["row"]
                if not all(isinstance(r, dict) for r in rows):
                    raise TransportError(f"{result_key}: row list contains non-object entries")
                return rows
        raise TransportError(f"{result_key}: envelope has no row list")

    result = data.get("RESULT")
    if isinstance(result, dict):
        code = str(result.get("CODE", "")).strip()
        if code == NO_DATA_CODE:
            return []
        raise TransportError(f"{result_key}: {code} {result.get('MESSAGE', '')}".strip())

    raise TransportError(f"{result_key}: unexpected response keys {sorted(data)[:5]}")


def _require(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None or str(value).strip() == "":
        raise TransportError(f"row is missing {key}")
    return str(value).strip()


def _school_from_row(row: dict[str, Any]) -> SchoolInfo:
    return SchoolInfo(
        office_code=_require(row, "ATPT_OFCDC_SC_CODE"),
        school_code=_require(row, "SD_SCHUL_CODE"),
        school_name=_require(row, "SCHUL_NM"),
    )


def _event_from_row(row: dict[str, Any]) -> AcademicEvent:
    return AcademicEvent(
        date=_require(row, "AA_YMD"),
        event_name=str(row.get("EVENT_NM") or "").strip(),
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class NeisClient:
    """
    Read-only client for the two NEIS lookups used by the workflow.

    No retry, and no timeout unless one is passed in.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if api_key is None:
            api_key = os.environ.get(API_KEY_ENV, "")
        self.api_key = api_key.strip()
        self.timeout = timeout
        self.session = session or requests.Session()

        if not self.api_key:
            logger.info("No NEIS API key configured; requests use the sample quota")

    def _get(self, url: str, params: dict[str, str], result_key: str) -> list[dict[str, Any]]:
        query = {"Type": "json", **params}
        if self.api_key:
            query["KEY"] = self.api_key

        logger.debug("GET %s %s", url, params)
        try:
            resp = self.session.get(url, params=query, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise TransportError(f"{result_key}: request failed: {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"{result_key}: response is not JSON") from exc

        rows = extract_rows(data, result_key)
        logger.debug("%s returned %d rows", result_key, len(rows))
        return rows

    def fetch_school_info(self, office_code: str, school_name: str) -> list[SchoolInfo]:
        """
        Search the school directory. Returns matches in response order.
        """
        rows = self._get(
            SCHOOL_INFO_URL,
            {"ATPT_OFCDC_SC_CODE": office_code, "SCHUL_NM": school_name},
            "schoolInfo",
        )
        return [_school_from_row(r) for r in rows]

    def fetch_schedule(
        self,
        office_code: str,
        school_code: str,
        start_date: str,
        end_date: str,
    ) -> list[AcademicEvent]:
        """
        Fetch academic events between start_date and end_date (inclusive).

        Dates may be given as YYYY-MM-DD or YYYYMMDD.
        """
        rows = self._get(
            SCHEDULE_URL,
            {
                "ATPT_OFCDC_SC_CODE": office_code,
                "SD_SCHUL_CODE": school_code,
                "AA_FROM_YMD": to_api_date(start_date),
                "AA_TO_YMD": to_api_date(end_date),
            },
            "SchoolSchedule",
        )
        return [_event_from_row(r) for r in rows]

    def close(self) -> None:
        self.session.close()
