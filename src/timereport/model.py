#!/usr/bin/env python3
"""
Typed records for time logs and billing reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple

MINUTES_PER_DAY = 24 * 60
BILLING_INCREMENT = 15
WORKDAY_MINUTES = 8 * 60
DATE_FORMAT = "%m/%d/%Y"

ProjectKey = Tuple[str, str, Optional[str]]


def parse_date(text: str) -> date:
    """
    Parse an MM/DD/YYYY date.

    Parameters
    ----------
    text : str
        Date text.

    Returns
    -------
    date
        Parsed calendar date.

    Raises
    ------
    ValueError
        If the text is not a valid MM/DD/YYYY date.

    Examples
    --------
    >>> parse_date("07/04/2024")
    datetime.date(2024, 7, 4)
    """
    value = text.strip()
    if len(value) != 10:
        raise ValueError(f"not an MM/DD/YYYY date: {text}")
    return datetime.strptime(value, DATE_FORMAT).date()


def format_date(value: date) -> str:
    """
    Format a date as MM/DD/YYYY.

    Examples
    --------
    >>> format_date(date(2024, 7, 4))
    '07/04/2024'
    """
    return value.strftime(DATE_FORMAT)


def day_name(value: date) -> str:
    """
    Return the English weekday name for a date.

    Examples
    --------
    >>> day_name(date(2024, 7, 4))
    'Thursday'
    """
    return (
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
        "Sunday",
    )[value.weekday()]


def format_minutes(minutes: int) -> str:
    """
    Format a duration in minutes as hours:minutes.

    Examples
    --------
    >>> format_minutes(780)
    '13:00'
    >>> format_minutes(410)
    '6:50'
    >>> format_minutes(0)
    '0:00'
    """
    return f"{minutes // 60}:{minutes % 60:02d}"


def format_clock(minute_of_day: int) -> str:
    """
    Format a minute-of-day as hhmm.

    Examples
    --------
    >>> format_clock(515)
    '0835'
    """
    return f"{minute_of_day // 60:02d}{minute_of_day % 60:02d}"


def billable_minutes(minutes: int) -> int:
    """
    Round a duration down to the billing increment.

    Examples
    --------
    >>> billable_minutes(410)
    405
    >>> billable_minutes(780)
    780
    """
    return minutes - (minutes % BILLING_INCREMENT)


def format_delta(minutes: int) -> str:
    """
    Format a signed difference in minutes.

    Examples
    --------
    >>> format_delta(225)
    '+3:45'
    >>> format_delta(-1440)
    '-24:00'
    >>> format_delta(0)
    '0:00'
    """
    if minutes == 0:
        return format_minutes(0)
    sign = "+" if minutes > 0 else "-"
    return sign + format_minutes(abs(minutes))


@dataclass(frozen=True)
class TimeEntry:
    """
    A worked interval within one day.

    Attributes
    ----------
    start : int
        Start minute-of-day (0-1439).
    stop : int
        Stop minute-of-day (0-1439), strictly after start.
    """

    start: int
    stop: int

    def __post_init__(self) -> None:
        for value in (self.start, self.stop):
            if not 0 <= value < MINUTES_PER_DAY:
                raise ValueError(f"minute-of-day out of range: {value}")
        if self.stop <= self.start:
            raise ValueError(
                f"time range {format_clock(self.start)}-{format_clock(self.stop)} "
                "does not end after it starts"
            )

    @property
    def duration(self) -> int:
        """
        Return the entry length in minutes.

        Examples
        --------
        >>> TimeEntry(515, 715).duration
        200
        """
        return self.stop - self.start

    def __str__(self) -> str:
        return f"{format_clock(self.start)}-{format_clock(self.stop)}"


@dataclass(frozen=True)
class ProjectLine:
    """
    Time ranges worked on one client project during a day.
    """

    client_id: str
    project_id: str
    sub_project_id: Optional[str] = None
    entries: Tuple[TimeEntry, ...] = ()

    def __post_init__(self) -> None:
        if not self.client_id or not self.project_id:
            raise ValueError("client and project identifiers are required")

    @property
    def key(self) -> ProjectKey:
        return (self.client_id, self.project_id, self.sub_project_id)

    @property
    def total_minutes(self) -> int:
        return sum(entry.duration for entry in self.entries)

    @property
    def label(self) -> str:
        """
        Return the client,project[,sub] label used in the log grammar.

        Examples
        --------
        >>> ProjectLine("acme", "cms", "docs").label
        'acme,cms,docs'
        """
        parts = [self.client_id, self.project_id]
        if self.sub_project_id:
            parts.append(self.sub_project_id)
        return ",".join(parts)


@dataclass(frozen=True)
class DayEntry:
    """
    All project lines recorded under one Date line.

    Attributes
    ----------
    date : date
        Calendar date of the block.
    projects : Tuple[ProjectLine, ...]
        Project lines in file order.
    line_number : int
        1-based line number of the Date line (0 when not read from a file).
    """

    date: date
    projects: Tuple[ProjectLine, ...] = ()
    line_number: int = field(default=0, compare=False)

    @property
    def total_minutes(self) -> int:
        return sum(project.total_minutes for project in self.projects)


@dataclass(frozen=True)
class TimeLog:
    """
    Parsed contents of a log file.

    Attributes
    ----------
    days : Tuple[DayEntry, ...]
        Day entries in file order.
    warnings : Tuple[str, ...]
        Non-fatal problems noticed while parsing.
    """

    days: Tuple[DayEntry, ...] = ()
    warnings: Tuple[str, ...] = field(default=(), compare=False)

    def find_day(self, value: date) -> Optional[DayEntry]:
        return next((day for day in self.days if day.date == value), None)


@dataclass(frozen=True)
class Period:
    """
    Inclusive reporting window.

    Examples
    --------
    >>> period = Period(date(2024, 7, 1), date(2024, 7, 15))
    >>> period.contains(date(2024, 7, 15))
    True
    >>> str(period)
    '07/01/2024 - 07/15/2024'
    """

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValueError("period ends before it starts")

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date

    def week_starts(self) -> List[date]:
        """
        Return the Mondays of the full weeks covering the period.

        Examples
        --------
        >>> Period(date(2024, 7, 1), date(2024, 7, 15)).week_starts()
        [datetime.date(2024, 7, 1), datetime.date(2024, 7, 8), datetime.date(2024, 7, 15)]
        >>> Period(date(2024, 7, 16), date(2024, 7, 17)).week_starts()
        [datetime.date(2024, 7, 15)]
        """
        monday = self.start_date - timedelta(days=self.start_date.weekday())
        mondays = []
        while monday <= self.end_date:
            mondays.append(monday)
            monday += timedelta(days=7)
        return mondays

    def __str__(self) -> str:
        return f"{format_date(self.start_date)} - {format_date(self.end_date)}"


class ReportMode(Enum):
    SUMMARY = "summary"
    DETAIL = "detail"

    def toggled(self) -> "ReportMode":
        """
        Return the other report mode.

        Examples
        --------
        >>> ReportMode.SUMMARY.toggled()
        <ReportMode.DETAIL: 'detail'>
        """
        return ReportMode.DETAIL if self is ReportMode.SUMMARY else ReportMode.SUMMARY

    @property
    def title(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class DayTotal:
    """
    Minutes logged for one report key on one date.

    Billing rounds each day's total separately, so short intervals spread
    over several days never add up to a billable quarter hour.

    Examples
    --------
    >>> DayTotal(date(2024, 7, 1), ("acme", "cms", None), 10).billable
    0
    """

    date: date
    key: ProjectKey
    minutes: int

    @property
    def billable(self) -> int:
        return billable_minutes(self.minutes)


@dataclass(frozen=True)
class ReportRow:
    """
    Total for one report key.

    Attributes
    ----------
    key : ProjectKey
        (client, project, sub-project); sub-project is None in Summary mode.
    minutes : int
        Total minutes within the period.
    billable : int
        Sum of the key's daily totals, each rounded down to the billing
        increment.
    """

    key: ProjectKey
    minutes: int
    billable: int

    @property
    def label(self) -> str:
        client, project, sub_project = self.key
        return ProjectLine(client, project, sub_project).label


@dataclass(frozen=True)
class Report:
    """
    Period totals grouped by client and project.

    Attributes
    ----------
    period : Period
        Reported window.
    mode : ReportMode
        Summary or detail grouping.
    rows : Tuple[ReportRow, ...]
        Period totals, sorted by key.
    day_count : int
        Number of day entries inside the period.
    daily : Tuple[DayTotal, ...]
        Per-date totals behind ``rows``, sorted by date and key.
    weekdays_logged : int
        Distinct Monday-Friday dates with a day entry.
    """

    period: Period
    mode: ReportMode
    rows: Tuple[ReportRow, ...]
    day_count: int = 0
    daily: Tuple[DayTotal, ...] = ()
    weekdays_logged: int = 0

    @property
    def grand_total_minutes(self) -> int:
        return sum(row.minutes for row in self.rows)

    @property
    def grand_billable_minutes(self) -> int:
        return sum(row.billable for row in self.rows)

    @property
    def expected_minutes(self) -> int:
        return WORKDAY_MINUTES * self.weekdays_logged

    @property
    def delta_minutes(self) -> int:
        """
        Billable time above (or below) a full workday per logged weekday.
        """
        return self.grand_billable_minutes - self.expected_minutes

    def total_for(self, client_id: str, project_id: str) -> int:
        return sum(
            row.minutes
            for row in self.rows
            if row.key[0] == client_id and row.key[1] == project_id
        )

    def day_totals(self, value: date, key: Optional[ProjectKey] = None) -> List[DayTotal]:
        return [
            total
            for total in self.daily
            if total.date == value and (key is None or total.key == key)
        ]


def sort_key(key: ProjectKey) -> Tuple[str, str, str]:
    """
    Ordinal sort key placing a missing sub-project first.

    Examples
    --------
    >>> sorted([("b", "x", None), ("a", "y", "z"), ("a", "y", None)], key=sort_key)
    [('a', 'y', None), ('a', 'y', 'z'), ('b', 'x', None)]
    """
    client, project, sub_project = key
    return (client, project, sub_project or "")
