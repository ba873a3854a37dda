"""
CLI (Command Line Interface).

This module provides terminal commands for quick lookups, e.g.:

    schoolcal search 오금중학교 --office B10 --from 2024-03-01 --to 2024-03-15
    schoolcal search                 (repeat the last successful search)
    schoolcal export out.ics
    schoolcal offices
    schoolcal last
    schoolcal interactive

Note:
- The interactive form lives in schoolcal/interactive.py
- Any search argument left out is taken from the last successful search
- Results go to stdout as plain text; only diagnostics (-v) are rendered through rich on stderr
"""

from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler

from schoolcal.client import API_KEY_ENV, NeisClient
from schoolcal.dates import format_display_date, parse_display_date
from schoolcal.export_ics import export_events_to_ics
from schoolcal.model import LookupResult, SearchState
from schoolcal.offices import EDUCATION_OFFICES, find_office
from schoolcal.storage import STATE_FILE_ENV, load_search_state
from schoolcal.workflow import SearchSession


def _configure_logging(verbose: bool) -> None:
    """
    Diagnostics go to stderr through rich; normal output stays on stdout.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # urllib3 is very chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)


def _office_arg(text: str) -> str:
    office = find_office(text)
    if office is None:
        raise argparse.ArgumentTypeError(f"unknown office code {text!r} (see 'schoolcal offices')")
    return office.code


def _date_arg(text: str) -> str:
    try:
        return parse_display_date(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {text!r}, expected YYYY-MM-DD")


def _state_from_args(args: argparse.Namespace, saved: SearchState) -> SearchState:
    """
    Merge command-line values over the saved (or default) form values.
    """
    return SearchState(
        office_code=args.office or saved.office_code,
        school_name=args.school if args.school is not None else saved.school_name,
        start_date=args.start or saved.start_date,
        end_date=args.end or saved.end_date,
    )


def _print_failure(result: LookupResult) -> None:
    assert result.error is not None
    print(result.error.message)


def _print_events(result: LookupResult) -> None:
    school = result.school
    office = find_office(result.state.office_code)
    title = school.school_name if school else result.state.school_name.strip()
    where = office.name if office else result.state.office_code
    print(f"{title} ({where})  {result.state.start_date} ~ {result.state.end_date}")

    for i, ev in enumerate(result.events, start=1):
        print(f"{i:>3} | {format_display_date(ev.date)} | {ev.event_name}")
    print(f"{len(result.events)} events")


def _cmd_search(args: argparse.Namespace, session: SearchSession) -> int:
    """
    Run one lookup and print the events.
    """
    state = _state_from_args(args, session.state)
    result = session.search(state)
    if not result.ok:
        _print_failure(result)
        return 1

    _print_events(result)
    return 0


def _cmd_export(args: argparse.Namespace, session: SearchSession) -> int:
    """
    Run one lookup and write the events to an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    state = _state_from_args(args, session.state)
    result = session.search(state)
    if not result.ok:
        _print_failure(result)
        return 1

    try:
        n = export_events_to_ics(result.events, out_path, school=result.school)
    except OSError as exc:
        print(f"Export failed: {exc}")
        return 1
    print(f"Exported {n} events to: {out_path}")
    return 0


def _cmd_offices() -> int:
    for office in EDUCATION_OFFICES:
        print(f"{office.code} | {office.name}")
    return 0


def _cmd_last(args: argparse.Namespace) -> int:
    """
    Show the saved search (the values the next search starts from).
    """
    state = load_search_state(args.state_file)
    if state is None:
        print("No saved search.")
        return 0

    office = find_office(state.office_code)
    print(f"office : {state.office_code}" + (f" ({office.name})" if office else ""))
    print(f"school : {state.school_name}")
    print(f"range  : {state.start_date} ~ {state.end_date}")
    return 0


def _add_search_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("school", nargs="?", default=None, help="School name (default: last search)")
    p.add_argument("--office", "-o", type=_office_arg, default=None, help="Education office code (e.g. B10)")
    p.add_argument("--from", dest="start", type=_date_arg, default=None, help="Start date YYYY-MM-DD")
    p.add_argument("--to", dest="end", type=_date_arg, default=None, help="End date YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="schoolcal", description="NEIS school academic calendar lookup")
    parser.add_argument("--api-key", default=None, help=f"NEIS API key (default: ${API_KEY_ENV})")
    parser.add_argument(
        "--state-file", default=None, help=f"Saved search file (default: ${STATE_FILE_ENV} or ~/.schoolcal)"
    )
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds (default: none)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log diagnostics to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Look up a school's academic calendar")
    _add_search_arguments(p_search)

    p_export = sub.add_parser("export", help="Look up and export events to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. calendar.ics)")
    _add_search_arguments(p_export)

    sub.add_parser("offices", help="List education office codes")
    sub.add_parser("last", help="Show the last successful search")
    sub.add_parser("interactive", help="Interactive search form")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "offices":
        raise SystemExit(_cmd_offices())
    if args.command == "last":
        raise SystemExit(_cmd_last(args))

    client = NeisClient(api_key=args.api_key, timeout=args.timeout)
    try:
        session = SearchSession(client, state_path=args.state_file)

        if args.command == "search":
            raise SystemExit(_cmd_search(args, session))
        if args.command == "export":
            raise SystemExit(_cmd_export(args, session))

        if args.command == "interactive":
            from schoolcal.interactive import run_interactive

            run_interactive(session)
            raise SystemExit(0)
    finally:
        client.close()

    raise SystemExit(2)
