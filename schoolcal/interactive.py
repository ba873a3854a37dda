from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from schoolcal.dates import format_display_date, parse_display_date
from schoolcal.export_ics import export_events_to_ics
from schoolcal.model import LookupResult, SearchState
from schoolcal.offices import EDUCATION_OFFICES, find_office
from schoolcal.workflow import SearchSession

console = Console()

TITLE = "학사력 조회 프로그램"
LOADING_MESSAGE = "학사일정을 조회하는 중..."
NO_RESULTS_MESSAGE = "조회 결과가 없습니다."
QUIT = "q"


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg)


def _ask(label: str, default: str) -> str:
    """
    Prompt with a pre-filled default; blank input keeps the default.
    """
    raw = _prompt(escape(f"{label} [{default}]: ")).strip()
    return raw or default


def _print_offices() -> None:
    table = Table(title="교육청", box=box.SIMPLE)
    table.add_column("Code")
    table.add_column("Name")
    for office in EDUCATION_OFFICES:
        table.add_row(office.code, office.name)
    console.print(table)


def _ask_office(default: str) -> Optional[str]:
    while True:
        raw = _ask("교육청 코드 (? = 목록, q = 종료)", default)
        if raw.lower() == QUIT:
            return None
        if raw == "?":
            _print_offices()
            continue
        office = find_office(raw)
        if office is None:
            _println(f"[red]알 수 없는 교육청 코드입니다: {escape(raw)}[/]")
            continue
        return office.code


def _ask_date(label: str, default: str) -> str:
    while True:
        raw = _ask(label, default)
        try:
            return parse_display_date(raw)
        except ValueError:
            _println("[red]날짜 형식은 YYYY-MM-DD 입니다.[/]")


def _ask_form(current: SearchState) -> Optional[SearchState]:
    """
    Ask for the four form fields, pre-filled with `current`.
    Returns None when the user quits.
    """
    office_code = _ask_office(current.office_code)
    if office_code is None:
        return None
    start_date = _ask_date("시작일", current.start_date)
    end_date = _ask_date("종료일", current.end_date)
    # Enter on the school name submits the form
    school_name = _ask("학교명 (예: 오금중학교)", current.school_name)
    return SearchState(office_code=office_code, school_name=school_name, start_date=start_date, end_date=end_date)


def _show_result(result: Optional[LookupResult]) -> None:
    if result is None:
        _println(f"[dim]{NO_RESULTS_MESSAGE}[/]")
        return
    if result.error is not None:
        _println(f"[red]{escape(result.error.message)}[/]")
        return
    if not result.events:
        _println(f"[dim]{NO_RESULTS_MESSAGE}[/]")
        return

    name = result.school.school_name if result.school else result.state.school_name.strip()
    table = Table(
        title=f"{escape(name)}  {result.state.start_date} ~ {result.state.end_date}",
        box=box.SIMPLE,
    )
    table.add_column("#", justify="right")
    table.add_column("날짜")
    table.add_column("행사명")
    for i, ev in enumerate(result.events, start=1):
        table.add_row(str(i), format_display_date(ev.date), escape(ev.event_name))
    console.print(table)


def _flow_export(result: LookupResult) -> None:
    out = _prompt(escape("Output .ics path [schoolcal.ics]: ")).strip() or "schoolcal.ics"
    try:
        n = export_events_to_ics(result.events, out, school=result.school)
    except OSError as exc:
        _println(f"[red]Export failed: {escape(str(exc))}[/]")
        return
    _println(f"Exported {n} events to: {escape(out)}")


def run_interactive(session: SearchSession) -> None:
    """
    Form loop: ask (pre-filled from the saved search), look up, show the table.
    """
    _println(f"[bold]{TITLE}[/]")

    while True:
        state = _ask_form(session.state)
        if state is None:
            return

        with console.status(LOADING_MESSAGE):
            result = session.search(state)
        _show_result(result)

        if result.ok:
            action = _prompt(escape("\n[Enter] 새 조회  [e] .ics 내보내기  [q] 종료: ")).strip().lower()
            if action == "e":
                _flow_export(result)
        else:
            action = _prompt(escape("\n[Enter] 다시 조회  [q] 종료: ")).strip().lower()
        if action == QUIT:
            return
