#!/usr/bin/env python3
"""
Error types raised by time-report.
"""

from __future__ import annotations

from typing import Optional


class TimeReportError(Exception):
    """
    Base class for all time-report errors.
    """


class ParseError(TimeReportError):
    """
    Raised when a time log line cannot be parsed.

    Attributes
    ----------
    line_number : int
        1-based line number of the offending line.
    reason : str
        Human-readable reason.
    text : str
        Offending line text.

    Examples
    --------
    >>> str(ParseError(3, "invalid time range", "acme,cms: 0900-0800"))
    'line 3: invalid time range: acme,cms: 0900-0800'
    """

    def __init__(self, line_number: int, reason: str, text: str = "") -> None:
        self.line_number = line_number
        self.reason = reason
        self.text = text
        message = f"line {line_number}: {reason}"
        if text:
            message = f"{message}: {text}"
        super().__init__(message)


class FileAccessError(TimeReportError):
    """
    Raised when the log file cannot be read or written.

    Examples
    --------
    >>> str(FileAccessError("read", "log.txt", "No such file or directory"))
    'read log.txt: No such file or directory'
    """

    def __init__(self, operation: str, path: str, reason: str) -> None:
        self.operation = operation
        self.path = path
        self.reason = reason
        super().__init__(f"{operation} {path}: {reason}")


class PeriodComputationError(TimeReportError):
    """
    Raised when a reporting period cannot be derived from a date.
    """


class AppendError(TimeReportError):
    """
    Raised when a day block cannot be appended.
    """


class EditorLaunchError(TimeReportError):
    """
    Raised when the external editor cannot be started or fails.
    """

    def __init__(self, editor: str, reason: str, returncode: Optional[int] = None) -> None:
        self.editor = editor
        self.reason = reason
        self.returncode = returncode
        super().__init__(f"editor {editor}: {reason}")


class TerminalError(TimeReportError):
    """
    Raised when the terminal cannot be placed into or restored from raw mode.
    """
