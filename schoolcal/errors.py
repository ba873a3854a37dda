"""
Failure classification for the school calendar lookup.

Every failure is non-fatal and is shown to the user as a single message.
The client raises TransportError; the workflow turns any LookupFailure into a
failed LookupResult instead of letting it escape.
"""

from __future__ import annotations


class LookupFailure(Exception):
    """Base class. `message` is the text shown to the user."""

    message = "조회 도중 오류가 발생했습니다."

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.message)
        self.detail = detail


class ValidationError(LookupFailure):
    message = "학교명을 입력해주세요."


class NotFoundError(LookupFailure):
    message = "해당 학교를 찾을 수 없습니다. 교육청과 학교명을 다시 확인해주세요."


class EmptyResultError(LookupFailure):
    message = "해당 기간의 학사일정이 없습니다."


class TransportError(LookupFailure):
    # network, HTTP status, non-JSON body or unexpected envelope
    message = "조회 도중 오류가 발생했습니다."
