#!/usr/bin/env python3
"""
Render billing reports as aligned plain text.

A report is one MON-SUN grid per week of the period followed by the period
summary. Rendering is a pure function of the report, so equal reports always
produce identical text.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Sequence

from .model import Report, format_delta, format_minutes

COLUMN_GAP = 3
LABEL_HEADER = "PROJECT"
TOTAL_HEADER = "TOTAL"
BILLABLE_HEADER = "BILLABLE"
GRAND_TOTAL_LABEL = "TOTAL"
DELTA_LABEL = "DELTA"
DAY_LABELS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")
EMPTY_CELL = "-"


def render_header(report: Report) -> List[str]:
    """
    Return the title lines naming the period and mode.

    Examples
    --------
    >>> from datetime import date
    >>> from timereport.model import Period, ReportMode
    >>> report = Report(Period(date(2024, 7, 1), date(2024, 7, 15)), ReportMode.DETAIL, ())
    >>> render_header(report)
    ['Detail report 07/01/2024 - 07/15/2024', 'Days logged: 0']
    """
    return [
        f"{report.mode.title} report {report.period}",
        f"Days logged: {report.day_count}",
    ]


def _cell(minutes: int) -> str:
    """
    Format a grid cell, leaving empty days as a dash.

    Examples
    --------
    >>> _cell(0), _cell(70)
    ('-', '1:10')
    """
    return format_minutes(minutes) if minutes else EMPTY_CELL


def _align(rows: Sequence[Sequence[str]]) -> List[str]:
    """
    Left-align the first column and right-align the rest.

    Examples
    --------
    >>> _align([["PROJECT", "TOTAL"], ["acme,cms", "6:50"]])
    ['PROJECT    TOTAL', 'acme,cms    6:50']
    """
    widths = [max(len(row[index]) for row in rows) for index in range(len(rows[0]))]
    gap = " " * COLUMN_GAP
    lines = []
    for row in rows:
        cells = [f"{row[0]:<{widths[0]}}"]
        cells.extend(f"{value:>{width}}" for value, width in zip(row[1:], widths[1:]))
        lines.append(gap.join(cells).rstrip())
    return lines


def render_week(report: Report, monday: date) -> List[str]:
    """
    Render one MON-SUN grid of daily minutes per report key.

    Parameters
    ----------
    report : Report
        Report supplying the keys and daily totals.
    monday : date
        First day of the week.

    Returns
    -------
    List[str]
        Day labels, dates, one row per key, then daily totals and billables.
    """
    days = [monday + timedelta(days=offset) for offset in range(len(DAY_LABELS))]
    rows = [
        ["", *DAY_LABELS, "", ""],
        [LABEL_HEADER, *(day.strftime("%m/%d") for day in days), TOTAL_HEADER, BILLABLE_HEADER],
    ]
    for row in report.rows:
        per_day = [report.day_totals(day, row.key) for day in days]
        minutes = [sum(total.minutes for total in totals) for totals in per_day]
        billable = sum(total.billable for totals in per_day for total in totals)
        rows.append([row.label, *map(_cell, minutes), _cell(sum(minutes)), _cell(billable)])
    day_minutes = [sum(total.minutes for total in report.day_totals(day)) for day in days]
    day_billable = [sum(total.billable for total in report.day_totals(day)) for day in days]
    rows.append([GRAND_TOTAL_LABEL, *map(_cell, day_minutes), _cell(sum(day_minutes)), ""])
    rows.append([BILLABLE_HEADER, *map(_cell, day_billable), "", _cell(sum(day_billable))])
    return _align(rows)


def render_summary(report: Report) -> List[str]:
    """
    Render the period totals per key, the grand total and the delta line.
    """
    rows = [[LABEL_HEADER, TOTAL_HEADER, BILLABLE_HEADER]]
    rows.extend(
        [row.label, format_minutes(row.minutes), format_minutes(row.billable)]
        for row in report.rows
    )
    rows.append(
        [
            GRAND_TOTAL_LABEL,
            format_minutes(report.grand_total_minutes),
            format_minutes(report.grand_billable_minutes),
        ]
    )
    rows.append([DELTA_LABEL, "", format_delta(report.delta_minutes)])
    aligned = _align(rows)
    body = aligned[1:-2] or ["(no time recorded in this period)"]
    return [aligned[0], *body, "", *aligned[-2:]]


def render_report(report: Report) -> List[str]:
    """
    Render a report as a list of text lines.

    Parameters
    ----------
    report : Report
        Report to render.

    Returns
    -------
    List[str]
        Header, one grid per week when any time was logged, and the period
        summary.
    """
    lines = render_header(report)
    lines.append("")
    if report.rows:
        for monday in report.period.week_starts():
            lines.extend(render_week(report, monday))
            lines.append("")
    lines.extend(render_summary(report))
    return lines
