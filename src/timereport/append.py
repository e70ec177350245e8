#!/usr/bin/env python3
"""
Append a new day block for today to a time log.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from .aggregate import recent_projects
from .errors import AppendError, FileAccessError
from .model import DayEntry, ProjectLine, TimeLog, day_name, format_date
from .parse import TokenKind, parse_log, read_log_text, tokenize_line

DEFAULT_RECENT_COUNT = 5
DEFAULT_RECENT_DAYS = 30


def format_day_entry(day: DayEntry) -> str:
    """
    Serialize a day entry in the log grammar.

    Examples
    --------
    >>> day = DayEntry(date(2024, 7, 5), (ProjectLine("acme", "cms"),))
    >>> print(format_day_entry(day), end="")
    Date: Friday 07/05/2024
    acme,cms:
    """
    lines = [f"Date: {day_name(day.date)} {format_date(day.date)}"]
    for project in day.projects:
        ranges = ",".join(str(entry) for entry in project.entries)
        lines.append(f"{project.label}: {ranges}".rstrip())
    return "\n".join(lines) + "\n"


def new_day_entry(
    log: TimeLog,
    today: date,
    *,
    count: int = DEFAULT_RECENT_COUNT,
    recent_days: Optional[int] = DEFAULT_RECENT_DAYS,
) -> DayEntry:
    """
    Build today's empty day entry pre-filled with recent projects.

    Parameters
    ----------
    log : TimeLog
        Current log contents.
    today : date
        Date of the new block.
    count : int, optional
        Number of recent projects to copy.
    recent_days : Optional[int], optional
        Look-back window in days; None scans the whole log.

    Returns
    -------
    DayEntry
        New entry with empty time ranges.

    Raises
    ------
    AppendError
        If the log already has a block for ``today``.
    """
    if log.find_day(today) is not None:
        raise AppendError(f"{format_date(today)} is already in the log")
    min_date = today - timedelta(days=recent_days) if recent_days is not None else None
    keys = recent_projects(log, count, min_date=min_date)
    return DayEntry(today, tuple(ProjectLine(*key) for key in keys))


def _with_separator(text: str) -> str:
    if not text:
        return text
    if not text.endswith("\n"):
        text += "\n"
    if text.splitlines()[-1].strip():
        text += "\n"
    return text


def append_block(text: str, block: str) -> str:
    """
    Insert a day block after the existing content.

    The block goes before the first END line when one exists. Existing lines
    are kept unchanged, and a blank line separates the block from them.

    Examples
    --------
    >>> append_block("Date: Thursday 07/04/2024\\n", "Date: Friday 07/05/2024\\n")
    'Date: Thursday 07/04/2024\\n\\nDate: Friday 07/05/2024\\n'
    >>> append_block("a,b: 0800-0900\\nEND\\n", "X\\n")
    'a,b: 0800-0900\\n\\nX\\n\\nEND\\n'
    """
    lines = text.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if tokenize_line(line, index + 1).kind is TokenKind.END:
            before = "".join(lines[:index])
            after = "".join(lines[index:])
            return _with_separator(before) + block + "\n" + after
    return _with_separator(text) + block


def write_atomic(path: Path, text: str) -> None:
    """
    Replace a file's contents via a temporary file in the same directory.

    Raises
    ------
    FileAccessError
        When the temporary file cannot be written or renamed.
    """
    target = Path(path)
    temp_name: Optional[str] = None
    try:
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        if target.exists():
            shutil.copymode(target, temp_name)
        os.replace(temp_name, target)
        temp_name = None
    except OSError as exc:
        raise FileAccessError("write", str(target), exc.strerror or str(exc)) from exc
    finally:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)


def append_to_file(
    path: Path,
    today: date,
    *,
    count: int = DEFAULT_RECENT_COUNT,
    recent_days: Optional[int] = DEFAULT_RECENT_DAYS,
) -> DayEntry:
    """
    Append today's block to a log file.

    Returns
    -------
    DayEntry
        The appended entry.

    Raises
    ------
    FileAccessError
        When the file cannot be read or replaced.
    ParseError
        When the existing content is malformed.
    AppendError
        When today is already present.
    """
    text = read_log_text(path)
    log = parse_log(text)
    entry = new_day_entry(log, today, count=count, recent_days=recent_days)
    write_atomic(path, append_block(text, format_day_entry(entry)))
    return entry
