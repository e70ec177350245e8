"""
Tests for the time log data model.
"""

from __future__ import annotations

import doctest
from datetime import date

import pytest

import timereport.model as model
from timereport.model import (
    Period,
    ProjectLine,
    Report,
    ReportMode,
    ReportRow,
    TimeEntry,
    TimeLog,
    DayEntry,
)


@pytest.mark.parametrize(
    ("start", "stop", "expected"),
    [
        (8 * 60 + 35, 11 * 60 + 55, 200),
        (14 * 60, 15 * 60, 60),
        (15 * 60 + 30, 18 * 60 + 10, 160),
        (0, 1, 1),
        (0, 1439, 1439),
    ],
)
@pytest.mark.unit
def test_time_entry_duration(start, stop, expected):
    """
    Ensure durations are stop minus start.

    Returns
    -------
    None
        This test asserts entry durations.
    """
    assert TimeEntry(start, stop).duration == expected


@pytest.mark.parametrize(
    ("start", "stop"),
    [
        (600, 600),
        (600, 540),
        (-1, 10),
        (10, 1440),
    ],
)
@pytest.mark.unit
def test_time_entry_rejects_invalid_ranges(start, stop):
    """
    Ensure empty, reversed and out-of-day ranges are rejected.

    Returns
    -------
    None
        This test asserts entry validation.
    """
    with pytest.raises(ValueError):
        TimeEntry(start, stop)


@pytest.mark.unit
def test_time_entry_str_uses_hhmm():
    """
    Ensure entries format back into the log grammar.

    Returns
    -------
    None
        This test asserts entry formatting.
    """
    assert str(TimeEntry(8 * 60 + 5, 9 * 60)) == "0805-0900"


@pytest.mark.unit
def test_project_line_totals_and_label():
    """
    Ensure a project line sums its entries and labels itself.

    Returns
    -------
    None
        This test asserts project line properties.
    """
    line = ProjectLine("acme", "cms", None, (TimeEntry(515, 715), TimeEntry(840, 900)))

    assert line.key == ("acme", "cms", None)
    assert line.total_minutes == 260
    assert line.label == "acme,cms"


@pytest.mark.unit
def test_project_line_requires_identifiers():
    """
    Ensure client and project identifiers are mandatory.

    Returns
    -------
    None
        This test asserts project line validation.
    """
    with pytest.raises(ValueError):
        ProjectLine("acme", "")


@pytest.mark.unit
def test_day_entry_equality_ignores_line_number():
    """
    Ensure day entries compare by content only.

    Returns
    -------
    None
        This test asserts day entry equality.
    """
    first = DayEntry(date(2024, 7, 4), (ProjectLine("acme", "cms"),), line_number=3)
    second = DayEntry(date(2024, 7, 4), (ProjectLine("acme", "cms"),), line_number=9)

    assert first == second


@pytest.mark.unit
def test_time_log_find_day():
    """
    Ensure day lookup returns the first matching block.

    Returns
    -------
    None
        This test asserts day lookup.
    """
    day = DayEntry(date(2024, 7, 4))
    log = TimeLog((day,))

    assert log.find_day(date(2024, 7, 4)) is day
    assert log.find_day(date(2024, 7, 5)) is None


@pytest.mark.unit
def test_period_rejects_reversed_range():
    """
    Ensure a period cannot end before it starts.

    Returns
    -------
    None
        This test asserts period validation.
    """
    with pytest.raises(ValueError):
        Period(date(2024, 7, 15), date(2024, 7, 1))


@pytest.mark.unit
def test_report_totals():
    """
    Ensure report totals, billable totals and the delta add up.

    Returns
    -------
    None
        This test asserts report aggregates.
    """
    report = Report(
        Period(date(2024, 7, 1), date(2024, 7, 15)),
        ReportMode.DETAIL,
        (
            ReportRow(("acme", "cms", None), 780, 780),
            ReportRow(("acme", "cms", "docs"), 50, 30),
            ReportRow(("bozon", "prototype", None), 410, 405),
        ),
        weekdays_logged=2,
    )

    assert report.grand_total_minutes == 1240
    assert report.grand_billable_minutes == 780 + 30 + 405
    assert report.expected_minutes == 960
    assert report.delta_minutes == 1215 - 960
    assert report.total_for("acme", "cms") == 830
    assert report.rows[1].label == "acme,cms,docs"


@pytest.mark.unit
def test_day_totals_filter_by_date_and_key():
    """
    Ensure daily totals are looked up per date and optionally per key.

    Returns
    -------
    None
        This test asserts daily lookups.
    """
    acme = ("acme", "cms", None)
    bozon = ("bozon", "prototype", None)
    daily = (
        model.DayTotal(date(2024, 7, 1), acme, 10),
        model.DayTotal(date(2024, 7, 1), bozon, 50),
        model.DayTotal(date(2024, 7, 2), acme, 70),
    )
    report = Report(
        Period(date(2024, 7, 1), date(2024, 7, 15)),
        ReportMode.SUMMARY,
        (ReportRow(acme, 80, 60), ReportRow(bozon, 50, 45)),
        daily=daily,
    )

    assert report.day_totals(date(2024, 7, 1)) == list(daily[:2])
    assert report.day_totals(date(2024, 7, 1), acme) == [daily[0]]
    assert [total.billable for total in report.day_totals(date(2024, 7, 2))] == [60]
    assert report.day_totals(date(2024, 7, 3)) == []


@pytest.mark.parametrize(
    "text",
    ["7/4/2024", "2024-07-04", "13/01/2024", "02/30/2024", ""],
)
@pytest.mark.unit
def test_parse_date_rejects_bad_dates(text):
    """
    Ensure only real MM/DD/YYYY dates parse.

    Returns
    -------
    None
        This test asserts date validation.
    """
    with pytest.raises(ValueError):
        model.parse_date(text)


@pytest.mark.unit
def test_doctest_examples():
    """
    Run doctest examples embedded in model docstrings.

    Returns
    -------
    None
        This test asserts that doctest examples succeed.
    """
    results = doctest.testmod(model)
    assert results.failed == 0
