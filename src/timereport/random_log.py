#!/usr/bin/env python3
"""
Generate synthetic time logs for demos and manual testing.
"""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from .append import format_day_entry
from .model import DayEntry, Period, ProjectLine, TimeEntry

PROJECTS: Tuple[Tuple[str, str], ...] = (
    ("nasa", "navigation system"),
    ("nasa", "saturn v launch"),
    ("nasa", "astronaut recovery"),
    ("nasa", "meeting"),
    ("spacex", "landing software"),
    ("spacex", "navigation"),
    ("spacex", "pr meeting"),
    ("blue", "aws interop"),
    ("blue", "navigation fixes"),
    ("carnival", "gps upgrade"),
    ("carnival", "hull scrub"),
    ("carnival", "lifeboat repairs"),
)

EIGHT_AM = 8 * 60
NOON = 12 * 60
ONE_PM = 13 * 60
FIVE_PM = 17 * 60


def random_time(rng: random.Random) -> int:
    hour = 8 + rng.randrange(4) if rng.randrange(10) < 5 else 13 + rng.randrange(4)
    return hour * 60 + rng.randrange(60)


def random_time_entries(rng: random.Random) -> List[TimeEntry]:
    """
    Split a working day into consecutive ranges, skipping the lunch hour.
    """
    times = {EIGHT_AM, NOON, ONE_PM, FIVE_PM}
    for _ in range(2 + rng.randrange(5)):
        times.add(random_time(rng))
    ordered = sorted(times)
    entries = []
    for start, stop in zip(ordered, ordered[1:]):
        if (start, stop) == (NOON, ONE_PM):
            continue
        entries.append(TimeEntry(start, stop))
    return entries


def random_day_entry(rng: random.Random, day: date) -> DayEntry:
    assigned: Dict[Tuple[str, str], List[TimeEntry]] = {}
    for entry in random_time_entries(rng):
        if not assigned or rng.randrange(4) == 0:
            project = rng.choice(PROJECTS)
        else:
            project = rng.choice(sorted(assigned))
        assigned.setdefault(project, []).append(entry)
    projects = tuple(
        ProjectLine(client, code, None, tuple(entries))
        for (client, code), entries in assigned.items()
    )
    return DayEntry(day, projects)


def random_day_entries(period: Period, seed: Optional[int] = None) -> List[DayEntry]:
    """
    Return one random day entry per date in the period.

    Parameters
    ----------
    period : Period
        Dates to generate.
    seed : Optional[int], optional
        Seed for reproducible output.

    Returns
    -------
    List[DayEntry]
        Generated entries in date order.
    """
    rng = random.Random(seed)
    days = []
    current = period.start_date
    while current <= period.end_date:
        days.append(random_day_entry(rng, current))
        current += timedelta(days=1)
    return days


def format_log(days: List[DayEntry]) -> str:
    return "\n".join(format_day_entry(day) for day in days)
