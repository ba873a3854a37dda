"""
Static list of NEIS education offices (ATPT_OFCDC_SC_CODE).
"""

from __future__ import annotations

from typing import Optional, Tuple

from schoolcal.model import EducationOffice

DEFAULT_OFFICE_CODE = "B10"

EDUCATION_OFFICES: Tuple[EducationOffice, ...] = (
    EducationOffice("B10", "서울특별시교육청"),
    EducationOffice("C10", "부산광역시교육청"),
    EducationOffice("D10", "대구광역시교육청"),
    EducationOffice("E10", "인천광역시교육청"),
    EducationOffice("F10", "광주광역시교육청"),
    EducationOffice("G10", "대전광역시교육청"),
    EducationOffice("H10", "울산광역시교육청"),
    EducationOffice("I10", "세종특별자치시교육청"),
    EducationOffice("J10", "경기도교육청"),
    EducationOffice("K10", "강원특별자치도교육청"),
    EducationOffice("M10", "충청북도교육청"),
    EducationOffice("N10", "충청남도교육청"),
    EducationOffice("P10", "전북특별자치도교육청"),
    EducationOffice("Q10", "전라남도교육청"),
    EducationOffice("R10", "경상북도교육청"),
    EducationOffice("S10", "경상남도교육청"),
    EducationOffice("T10", "제주특별자치도교육청"),
)


def find_office(code: str) -> Optional[EducationOffice]:
    """
    Look up an office by code (case-insensitive). Returns None if unknown.
    """
    wanted = (code or "").strip().upper()
    for office in EDUCATION_OFFICES:
        if office.code == wanted:
            return office
    return None
