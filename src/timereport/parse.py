#!/usr/bin/env python3
"""
Parse time log text into day entries.

The log is line oriented::

    Date: Thursday 07/04/2024
    acme,cms: 0835-1155,1400-1500
    bozon,prototype,api: 1205-1400

Lines are first tokenized, then matched against the grammar. ``--`` starts a
comment, and a line reading ``END`` stops parsing. Ranges that overlap within a
day are reported as warnings, not errors.
"""

from __future__ import annotations

import re
from datetime import date
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import FileAccessError, ParseError
from .model import (
    DayEntry,
    ProjectKey,
    ProjectLine,
    TimeEntry,
    TimeLog,
    day_name,
    format_date,
    parse_date,
)

COMMENT_MARKER = "--"
END_MARKER = "END"

DATE_LINE_RE = re.compile(r"^Date:\s*(?P<body>.*)$")
DATE_BODY_RE = re.compile(r"^(?P<weekday>[A-Za-z]+)\s+(?P<date>\d{2}/\d{2}/\d{4})$")
PROJECT_LINE_RE = re.compile(r"^(?P<label>[^:]*):(?P<ranges>.*)$")
TIME_RANGE_RE = re.compile(r"^(?P<h1>\d{2})(?P<m1>\d{2})-(?P<h2>\d{2})(?P<m2>\d{2})$")


class TokenKind(Enum):
    BLANK = "blank"
    DATE = "date"
    PROJECT = "project"
    END = "end"
    INVALID = "invalid"


@dataclass(frozen=True)
class Token:
    """
    One classified log line.

    Attributes
    ----------
    kind : TokenKind
        Line classification.
    line_number : int
        1-based line number.
    text : str
        Line text with comments removed.
    head : str
        Date body for DATE tokens, label for PROJECT tokens.
    tail : str
        Time range text for PROJECT tokens.
    """

    kind: TokenKind
    line_number: int
    text: str
    head: str = ""
    tail: str = ""


def remove_comment(line: str) -> str:
    """
    Strip a trailing ``--`` comment and surrounding whitespace.

    Examples
    --------
    >>> remove_comment(" xyz --first  --  second")
    'xyz'
    >>> remove_comment("    --  ignored")
    ''
    """
    index = line.find(COMMENT_MARKER)
    if index >= 0:
        line = line[:index]
    return line.strip()


def tokenize_line(line: str, line_number: int) -> Token:
    """
    Classify a single log line.

    Examples
    --------
    >>> tokenize_line("Date: Thursday 07/04/2024", 1).kind
    <TokenKind.DATE: 'date'>
    >>> tokenize_line("acme,cms: 0835-1155", 2).head
    'acme,cms'
    >>> tokenize_line("what is this", 3).kind
    <TokenKind.INVALID: 'invalid'>
    """
    text = remove_comment(line)
    if not text:
        return Token(TokenKind.BLANK, line_number, text)
    if text == END_MARKER:
        return Token(TokenKind.END, line_number, text)
    date_match = DATE_LINE_RE.match(text)
    if date_match:
        return Token(TokenKind.DATE, line_number, text, head=date_match.group("body").strip())
    project_match = PROJECT_LINE_RE.match(text)
    if project_match:
        return Token(
            TokenKind.PROJECT,
            line_number,
            text,
            head=project_match.group("label").strip(),
            tail=project_match.group("ranges").strip(),
        )
    return Token(TokenKind.INVALID, line_number, text)


def tokenize(text: str) -> List[Token]:
    """
    Tokenize log text up to the END marker.
    """
    tokens: List[Token] = []
    for index, line in enumerate(text.splitlines(), start=1):
        token = tokenize_line(line, index)
        if token.kind is TokenKind.END:
            break
        tokens.append(token)
    return tokens


def parse_time_entry(text: str, line_number: int, line: str) -> TimeEntry:
    match = TIME_RANGE_RE.match(text.strip())
    if not match:
        raise ParseError(line_number, f"malformed time range '{text.strip()}'", line)
    h1, m1, h2, m2 = (int(match.group(name)) for name in ("h1", "m1", "h2", "m2"))
    if h1 > 23 or h2 > 23 or m1 > 59 or m2 > 59:
        raise ParseError(line_number, f"invalid time in range '{text.strip()}'", line)
    try:
        return TimeEntry(h1 * 60 + m1, h2 * 60 + m2)
    except ValueError as exc:
        raise ParseError(line_number, str(exc), line) from exc


def parse_time_entries(text: str, line_number: int, line: str) -> Tuple[TimeEntry, ...]:
    """
    Parse a comma separated list of hhmm-hhmm ranges.

    An empty string yields no entries.

    Examples
    --------
    >>> [e.duration for e in parse_time_entries("0835-1155,1400-1500", 1, "")]
    [200, 60]
    >>> parse_time_entries("", 1, "")
    ()
    """
    if not text.strip():
        return ()
    return tuple(parse_time_entry(part, line_number, line) for part in text.split(","))


def parse_project_token(token: Token) -> ProjectLine:
    parts = [part.strip() for part in token.head.split(",")]
    if len(parts) not in (2, 3) or not all(parts):
        raise ParseError(
            token.line_number,
            "malformed project label, expected client,project[,sub]",
            token.text,
        )
    entries = parse_time_entries(token.tail, token.line_number, token.text)
    sub_project = parts[2] if len(parts) == 3 else None
    return ProjectLine(parts[0], parts[1], sub_project, entries)


def parse_date_token(token: Token, warnings: List[str]) -> date:
    match = DATE_BODY_RE.match(token.head)
    if not match:
        raise ParseError(
            token.line_number,
            "malformed date line, expected 'Date: <Weekday> <MM/DD/YYYY>'",
            token.text,
        )
    try:
        value = parse_date(match.group("date"))
    except ValueError as exc:
        raise ParseError(token.line_number, "invalid calendar date", token.text) from exc
    weekday = match.group("weekday")
    expected = day_name(value)
    if weekday.lower() not in (expected.lower(), expected[:3].lower()):
        warnings.append(
            f"line {token.line_number}: {format_date(value)} is a {expected}, not {weekday}"
        )
    return value


class _DayBuilder:
    def __init__(self, date_value: date, line_number: int) -> None:
        self.date = date_value
        self.line_number = line_number
        self.projects: Dict[ProjectKey, ProjectLine] = {}
        self.project_lines: Dict[ProjectKey, int] = {}

    def add(self, project: ProjectLine, token: Token) -> None:
        if project.key in self.projects:
            raise ParseError(
                token.line_number,
                f"duplicate project {project.label} for {format_date(self.date)}",
                token.text,
            )
        self.projects[project.key] = project
        self.project_lines[project.key] = token.line_number

    def overlaps(self) -> List[str]:
        """
        Describe ranges that start before an earlier range of the day stops.

        Ranges from every project line of the block are compared. A range
        starting exactly where another stops is not an overlap.
        """
        ranges = sorted(
            (
                (entry, project.label, self.project_lines[key])
                for key, project in self.projects.items()
                for entry in project.entries
            ),
            key=lambda item: (item[0].start, item[0].stop),
        )
        found: List[str] = []
        latest = None
        for entry, label, line_number in ranges:
            if latest is not None and entry.start < latest[0].stop:
                found.append(
                    f"line {line_number}: {label} {entry} overlaps "
                    f"{latest[1]} {latest[0]} on {format_date(self.date)}"
                )
            if latest is None or entry.stop > latest[0].stop:
                latest = (entry, label, line_number)
        return found

    def build(self, warnings: List[str]) -> DayEntry:
        warnings.extend(self.overlaps())
        return DayEntry(self.date, tuple(self.projects.values()), self.line_number)


def parse_tokens(tokens: Iterable[Token]) -> TimeLog:
    """
    Apply the grammar to a token stream.

    Raises
    ------
    ParseError
        On the first malformed line.
    """
    days: List[DayEntry] = []
    warnings: List[str] = []
    current: Optional[_DayBuilder] = None
    for token in tokens:
        if token.kind is TokenKind.BLANK:
            continue
        if token.kind is TokenKind.INVALID:
            raise ParseError(token.line_number, "invalid line", token.text)
        if token.kind is TokenKind.DATE:
            if current is not None:
                days.append(current.build(warnings))
            value = parse_date_token(token, warnings)
            if days and value <= days[-1].date:
                warnings.append(
                    f"line {token.line_number}: {format_date(value)} does not follow "
                    f"{format_date(days[-1].date)}"
                )
            current = _DayBuilder(value, token.line_number)
            continue
        if current is None:
            raise ParseError(token.line_number, "project line before any Date line", token.text)
        current.add(parse_project_token(token), token)
    if current is not None:
        days.append(current.build(warnings))
    return TimeLog(tuple(days), tuple(warnings))


def parse_log(text: str) -> TimeLog:
    """
    Parse full log text.

    Parameters
    ----------
    text : str
        File contents.

    Returns
    -------
    TimeLog
        Parsed day entries and warnings.

    Raises
    ------
    ParseError
        When any line is malformed.

    Examples
    --------
    >>> log = parse_log("Date: Thursday 07/04/2024\\nacme,cms: 0835-1155\\n")
    >>> log.days[0].projects[0].total_minutes
    200
    >>> parse_log("").days
    ()
    """
    return parse_tokens(tokenize(text))


def read_log_text(path: Path) -> str:
    """
    Read the whole log file as one snapshot.

    Raises
    ------
    FileAccessError
        When the file cannot be read or decoded.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        raise FileAccessError("read", str(path), reason) from exc


def load_log(path: Path) -> TimeLog:
    """
    Read and parse a log file.
    """
    return parse_log(read_log_text(path))
