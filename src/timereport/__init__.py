#!/usr/bin/env python3
"""
Semi-monthly billing reports from a plain-text time log.
"""

import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from .errors import TimeReportError
from .model import ReportMode, parse_date

COMMAND_PREFIX = "time-report"


def print_warnings(warnings) -> None:
    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)


def parse_date_args(first: Optional[str], last: Optional[str]) -> List[Optional[date]]:
    """
    Parse optional MM/DD/YYYY command-line dates.

    Examples
    --------
    >>> parse_date_args("07/01/2024", None)
    [datetime.date(2024, 7, 1), None]
    >>> parse_date_args(None, None)
    [None, None]
    """
    if last is not None and first is None:
        raise ValueError("a last date requires a first date")
    return [parse_date(value) if value else None for value in (first, last)]


def run_report(
    path: Path,
    *,
    first: Optional[date] = None,
    last: Optional[date] = None,
    mode: ReportMode = ReportMode.SUMMARY,
    today: Optional[date] = None,
) -> int:
    """
    Print the report for the chosen period.

    Parameters
    ----------
    path : Path
        Log file.
    first : Optional[date], optional
        First date, or a date inside the wanted semi-monthly period.
    last : Optional[date], optional
        Last date of an explicit range.
    mode : ReportMode, optional
        Summary or detail grouping.
    today : Optional[date], optional
        Override for the current date.

    Returns
    -------
    int
        Exit code.
    """
    from .aggregate import build_report, resolve_period
    from .parse import load_log
    from .renderer import render_report

    current = today or date.today()
    try:
        log = load_log(path)
        period = resolve_period(first, last, today=current)
        report = build_report(log, current, mode, period=period)
    except TimeReportError as exc:
        print(f"{COMMAND_PREFIX}: report failed: {exc}", file=sys.stderr)
        return 1
    print_warnings(log.warnings)
    for line in render_report(report):
        print(line)
    return 0


def run_append(path: Path, *, today: Optional[date] = None) -> int:
    """
    Append today's block to the log.

    Returns
    -------
    int
        Exit code.
    """
    from .append import append_to_file
    from .config import load_settings

    settings = load_settings()
    current = today or date.today()
    try:
        entry = append_to_file(
            path,
            current,
            count=settings.recent_count,
            recent_days=settings.recent_days,
        )
    except TimeReportError as exc:
        print(f"{COMMAND_PREFIX}: append failed: {exc}", file=sys.stderr)
        return 1
    labels = [project.label for project in entry.projects]
    projects = ", ".join(labels) or "no recent projects"
    print(f"Appended {entry.date:%m/%d/%Y} to {path} ({projects}).")
    return 0


def run_random(
    *,
    first: Optional[date] = None,
    last: Optional[date] = None,
    seed: Optional[int] = None,
    today: Optional[date] = None,
) -> int:
    """
    Print a synthetic log covering the chosen period.

    Returns
    -------
    int
        Exit code.
    """
    from .aggregate import resolve_period
    from .random_log import format_log, random_day_entries

    try:
        period = resolve_period(first, last, today=today or date.today())
    except TimeReportError as exc:
        print(f"{COMMAND_PREFIX}: random failed: {exc}", file=sys.stderr)
        return 1
    print(format_log(random_day_entries(period, seed=seed)), end="")
    return 0


def build_app():
    """
    Build the Typer app lazily to keep fast-path imports light.

    Returns
    -------
    typer.Typer
        Configured Typer application for the time-report CLI.
    """
    import typer

    app = typer.Typer(help="Semi-monthly billing reports from a plain-text time log.")

    def dates_or_fail(first: Optional[str], last: Optional[str]) -> List[Optional[date]]:
        try:
            return parse_date_args(first, last)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc

    @app.command("report")
    def report_cmd(
        filename: Path = typer.Argument(..., help="Time log file."),
        first: Optional[str] = typer.Argument(
            None,
            help="First date (MM/DD/YYYY), or any date in the wanted half-month.",
        ),
        last: Optional[str] = typer.Argument(None, help="Last date (MM/DD/YYYY)."),
        detail: bool = typer.Option(
            False,
            "--detail",
            "-d",
            help="Report sub-projects separately.",
        ),
    ):
        start, end = dates_or_fail(first, last)
        mode = ReportMode.DETAIL if detail else ReportMode.SUMMARY
        raise typer.Exit(code=run_report(filename, first=start, last=end, mode=mode))

    @app.command("append")
    def append_cmd(
        filename: Path = typer.Argument(..., help="Time log file."),
    ):
        raise typer.Exit(code=run_append(filename))

    @app.command("watch")
    def watch_cmd(
        filename: Path = typer.Argument(..., help="Time log file."),
        first: Optional[str] = typer.Argument(
            None,
            help="First date (MM/DD/YYYY), or any date in the wanted half-month.",
        ),
        last: Optional[str] = typer.Argument(None, help="Last date (MM/DD/YYYY)."),
    ):
        from .aggregate import resolve_period
        from .watch import run_watch

        start, end = dates_or_fail(first, last)
        try:
            resolve_period(start, end)
        except TimeReportError as exc:
            raise typer.BadParameter(str(exc)) from exc

        def fixed_period(today: date):
            return resolve_period(start, end, today=today)

        period = fixed_period if start is not None else None
        raise typer.Exit(code=run_watch(filename, period=period))

    @app.command("random")
    def random_cmd(
        first: Optional[str] = typer.Argument(None, help="First date (MM/DD/YYYY)."),
        last: Optional[str] = typer.Argument(None, help="Last date (MM/DD/YYYY)."),
        seed: Optional[int] = typer.Option(None, "--seed", help="Random seed."),
    ):
        start, end = dates_or_fail(first, last)
        raise typer.Exit(code=run_random(first=start, last=end, seed=seed))

    return app


def main():
    """
    Entry point for the time-report command.
    """
    app = build_app()
    app()


if __name__ == "__main__":
    main()
