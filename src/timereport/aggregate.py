#!/usr/bin/env python3
"""
Aggregate day entries into semi-monthly billing reports.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import PeriodComputationError
from .model import (
    DayEntry,
    DayTotal,
    Period,
    ProjectKey,
    Report,
    ReportMode,
    ReportRow,
    TimeLog,
    sort_key,
)

SPLIT_DAY = 15


def period_for(reference_date: date) -> Period:
    """
    Return the semi-monthly period containing a date.

    Parameters
    ----------
    reference_date : date
        Any date.

    Returns
    -------
    Period
        Days 1-15, or 16 through the last day of the month.

    Examples
    --------
    >>> str(period_for(date(2024, 7, 4)))
    '07/01/2024 - 07/15/2024'
    >>> str(period_for(date(2024, 2, 16)))
    '02/16/2024 - 02/29/2024'
    """
    try:
        year, month = reference_date.year, reference_date.month
        if reference_date.day <= SPLIT_DAY:
            return Period(date(year, month, 1), date(year, month, SPLIT_DAY))
        last_day = calendar.monthrange(year, month)[1]
        return Period(date(year, month, SPLIT_DAY + 1), date(year, month, last_day))
    except (AttributeError, ValueError) as exc:
        raise PeriodComputationError(f"cannot compute period for {reference_date!r}") from exc


def resolve_period(
    first: Optional[date] = None,
    last: Optional[date] = None,
    *,
    today: Optional[date] = None,
) -> Period:
    """
    Choose the reporting window from optional command-line dates.

    Parameters
    ----------
    first : Optional[date], optional
        Start date, or any date inside the wanted semi-monthly period.
    last : Optional[date], optional
        Inclusive end date; requires ``first``.
    today : Optional[date], optional
        Reference date used when no dates are given.

    Returns
    -------
    Period
        Explicit range, semi-monthly period of ``first``, or of today.

    Examples
    --------
    >>> str(resolve_period(date(2024, 7, 20)))
    '07/16/2024 - 07/31/2024'
    >>> str(resolve_period(date(2024, 7, 2), date(2024, 7, 9)))
    '07/02/2024 - 07/09/2024'
    """
    if first is not None and last is not None:
        try:
            return Period(first, last)
        except ValueError as exc:
            raise PeriodComputationError(str(exc)) from exc
    if first is not None:
        return period_for(first)
    return period_for(today or date.today())


def entries_in_period(days: Iterable[DayEntry], period: Period) -> List[DayEntry]:
    """
    Select day entries within a period, sorted by date.
    """
    selected = [day for day in days if period.contains(day.date)]
    selected.sort(key=lambda day: day.date)
    return selected


def report_key(key: ProjectKey, mode: ReportMode) -> ProjectKey:
    """
    Map a project triplet to its report key.

    Examples
    --------
    >>> report_key(("acme", "cms", "docs"), ReportMode.SUMMARY)
    ('acme', 'cms', None)
    >>> report_key(("acme", "cms", "docs"), ReportMode.DETAIL)
    ('acme', 'cms', 'docs')
    """
    if mode is ReportMode.SUMMARY:
        return (key[0], key[1], None)
    return key


def build_report(
    log: TimeLog,
    reference_date: date,
    mode: ReportMode = ReportMode.SUMMARY,
    *,
    period: Optional[Period] = None,
) -> Report:
    """
    Sum durations per client/project for a period.

    Parameters
    ----------
    log : TimeLog
        Parsed log.
    reference_date : date
        Date whose semi-monthly period is reported.
    mode : ReportMode, optional
        Summary collapses sub-projects; Detail keeps them apart.
    period : Optional[Period], optional
        Explicit window overriding ``reference_date``.

    Returns
    -------
    Report
        Rows sorted by client, project, then sub-project, with billable
        time rounded down per date before it is summed.
    """
    window = period or period_for(reference_date)
    selected = entries_in_period(log.days, window)
    daily: Dict[Tuple[date, ProjectKey], int] = {}
    for day in selected:
        for project in day.projects:
            slot = (day.date, report_key(project.key, mode))
            daily[slot] = daily.get(slot, 0) + project.total_minutes
    day_totals = tuple(
        DayTotal(day_value, key, minutes)
        for (day_value, key), minutes in sorted(
            daily.items(), key=lambda item: (item[0][0], sort_key(item[0][1]))
        )
    )
    totals: Dict[ProjectKey, int] = {}
    billables: Dict[ProjectKey, int] = {}
    for total in day_totals:
        totals[total.key] = totals.get(total.key, 0) + total.minutes
        billables[total.key] = billables.get(total.key, 0) + total.billable
    rows = tuple(
        ReportRow(key, totals[key], billables[key])
        for key in sorted(totals, key=sort_key)
    )
    weekdays = {day.date for day in selected if day.date.weekday() < 5}
    return Report(
        period=window,
        mode=mode,
        rows=rows,
        day_count=len(selected),
        daily=day_totals,
        weekdays_logged=len(weekdays),
    )


def recent_projects(
    log: TimeLog,
    n: int = 5,
    *,
    min_date: Optional[date] = None,
) -> List[ProjectKey]:
    """
    Return the most recently used project triplets.

    Parameters
    ----------
    log : TimeLog
        Parsed log.
    n : int, optional
        Maximum number of triplets (default: 5).
    min_date : Optional[date], optional
        Ignore day entries before this date.

    Returns
    -------
    List[ProjectKey]
        Distinct triplets, most recently used first.
    """
    if n <= 0:
        return []
    days = [day for day in log.days if min_date is None or day.date >= min_date]
    # Later blocks for a repeated date count as more recent.
    ordered = sorted(enumerate(days), key=lambda item: (item[1].date, item[0]), reverse=True)
    seen = set()
    found: List[ProjectKey] = []
    for _, day in ordered:
        for project in day.projects:
            if project.key in seen:
                continue
            seen.add(project.key)
            found.append(project.key)
            if len(found) >= n:
                return found
    return found
