#!/usr/bin/env python3
"""
State machine behind watch mode.

The controller consumes tagged events (key presses, file changes, timer ticks
and terminal resizes) one at a time and replaces its single ``WatchState``
value after each one. File access, appending and the editor are reached
through a backend object so the state machine runs without a terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Callable, Optional, Protocol, Tuple, Union

from .aggregate import build_report
from .errors import AppendError, EditorLaunchError, FileAccessError, ParseError
from .model import DayEntry, Period, Report, ReportMode, TimeLog, format_date
from .renderer import render_report

logger = logging.getLogger(__name__)

MENU_ITEMS = (
    ("e", "Edit"),
    ("a", "Append"),
    ("r", "Reload"),
    ("m", "Mode"),
    ("w", "Warnings"),
    ("q", "Quit"),
)


class Phase(Enum):
    VIEWING = "viewing"
    EDITOR_OPEN = "editor_open"
    EXITING = "exiting"


@dataclass(frozen=True)
class Key:
    name: str


@dataclass(frozen=True)
class FileChanged:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Resize:
    height: int
    width: int = 80


Event = Union[Key, FileChanged, Tick, Resize]


class Backend(Protocol):
    def load(self) -> TimeLog:
        ...

    def append(self, log: TimeLog, today: date) -> DayEntry:
        ...

    def edit(self, line_number: Optional[int]) -> None:
        ...


@dataclass(frozen=True)
class WatchState:
    """
    Everything watch mode knows about the session.

    Attributes
    ----------
    phase : Phase
        Viewing, editor open, or exiting.
    mode : ReportMode
        Current report grouping.
    scroll_offset : int
        First visible content line.
    view_height : int
        Number of content lines that fit on screen.
    view_width : int
        Number of columns available to content lines.
    log : Optional[TimeLog]
        Last successfully parsed log.
    report : Optional[Report]
        Report built from ``log``.
    report_lines : Tuple[str, ...]
        Rendered report.
    banner : Optional[str]
        Transient error message shown above the report.
    show_warnings : bool
        Whether parser warnings replace the report view.
    pending_reload : bool
        File change seen while the editor was open.
    """

    phase: Phase = Phase.VIEWING
    mode: ReportMode = ReportMode.SUMMARY
    scroll_offset: int = 0
    view_height: int = 20
    view_width: int = 80
    log: Optional[TimeLog] = None
    report: Optional[Report] = None
    report_lines: Tuple[str, ...] = ()
    banner: Optional[str] = None
    show_warnings: bool = False
    pending_reload: bool = False

    @property
    def content_lines(self) -> Tuple[str, ...]:
        """
        Return the scrollable lines: banner, warning notice, then the body.
        """
        lines = []
        if self.banner:
            lines.extend([f"error: {self.banner}", ""])
        warnings = self.log.warnings if self.log else ()
        if self.show_warnings:
            if warnings:
                lines.extend(f"warning: {warning}" for warning in warnings)
            else:
                lines.append("There are no warnings to display.")
            return tuple(lines)
        if len(warnings) == 1:
            lines.extend([f"warning: {warnings[0]}", ""])
        elif warnings:
            lines.extend([f"There are {len(warnings)} warnings (press w to list them).", ""])
        lines.extend(self.report_lines)
        return tuple(lines)

    @property
    def max_offset(self) -> int:
        return max(0, len(self.content_lines) - self.view_height)

    @property
    def visible_lines(self) -> Tuple[str, ...]:
        return self.content_lines[self.scroll_offset:self.scroll_offset + self.view_height]


def clamp_offset(state: WatchState, offset: int) -> WatchState:
    """
    Return the state with ``scroll_offset`` clamped to the content.

    Examples
    --------
    >>> state = WatchState(view_height=2, report_lines=("a", "b", "c"))
    >>> clamp_offset(state, 10).scroll_offset
    1
    >>> clamp_offset(state, -4).scroll_offset
    0
    """
    return replace(state, scroll_offset=min(max(0, offset), state.max_offset))


def render_menu() -> str:
    """
    Return the one-line key menu.

    Examples
    --------
    >>> render_menu().split("  ")[0]
    '(E)dit'
    """
    return "  ".join(f"({name[0]}){name[1:]}" for _key, name in MENU_ITEMS)


def render_status(state: WatchState, path_label: str) -> str:
    mode = state.mode.title
    if state.report is not None:
        return f"{path_label}  {mode}  {state.report.period}"
    return f"{path_label}  {mode}"


class WatchController:
    """
    Apply events to the watch state.

    Parameters
    ----------
    backend : Backend
        File, append and editor operations.
    today : Callable[[], date]
        Returns the current date.
    period : Optional[Callable[[date], Optional[Period]]], optional
        Returns an explicit report window for a date, or None for the
        semi-monthly period containing it.
    """

    def __init__(
        self,
        backend: Backend,
        today: Callable[[], date] = date.today,
        period: Optional[Callable[[date], Optional[Period]]] = None,
        state: Optional[WatchState] = None,
    ) -> None:
        self.backend = backend
        self.today = today
        self.period = period or (lambda _today: None)
        self.state = state or WatchState()

    @property
    def running(self) -> bool:
        return self.state.phase is not Phase.EXITING

    def start(self) -> WatchState:
        """
        Perform the initial load; a failure shows a banner instead of a report.
        """
        self.state = self._reload(self.state)
        return self.state

    def handle(self, event: Event) -> WatchState:
        """
        Process one event and return the new state.
        """
        state = self.state
        if state.phase is Phase.EXITING:
            return state
        if isinstance(event, Key):
            state = self._handle_key(state, event.name)
        elif isinstance(event, FileChanged):
            if state.phase is Phase.EDITOR_OPEN:
                state = replace(state, pending_reload=True)
            else:
                state = self._reload(state)
        elif isinstance(event, Tick):
            state = self._reload(state)
        elif isinstance(event, Resize):
            resized = replace(
                state,
                view_height=max(1, event.height),
                view_width=max(1, event.width),
            )
            state = clamp_offset(resized, state.scroll_offset)
        self.state = state
        return state

    def _handle_key(self, state: WatchState, name: str) -> WatchState:
        page = max(1, state.view_height)
        if name == "q":
            return replace(state, phase=Phase.EXITING)
        if name == "r":
            return self._reload(state)
        if name == "a":
            return self._append(state)
        if name == "e":
            return self._edit(state)
        if name == "m":
            toggled = replace(state, mode=state.mode.toggled(), scroll_offset=0)
            return self._rebuild(toggled)
        if name == "w":
            return replace(state, show_warnings=not state.show_warnings, scroll_offset=0)
        if name == "page_up":
            return clamp_offset(state, state.scroll_offset - page)
        if name == "page_down":
            return clamp_offset(state, state.scroll_offset + page)
        if name == "up":
            return clamp_offset(state, state.scroll_offset - 1)
        if name == "down":
            return clamp_offset(state, state.scroll_offset + 1)
        return state

    def _build(self, state: WatchState, log: TimeLog) -> WatchState:
        today = self.today()
        report = build_report(log, today, state.mode, period=self.period(today))
        updated = replace(
            state,
            log=log,
            report=report,
            report_lines=tuple(render_report(report)),
        )
        return clamp_offset(updated, updated.scroll_offset)

    def _rebuild(self, state: WatchState) -> WatchState:
        if state.log is None:
            return state
        return self._build(state, state.log)

    def _reload(self, state: WatchState) -> WatchState:
        try:
            log = self.backend.load()
        except (ParseError, FileAccessError) as exc:
            logger.debug("reload failed: %s", exc)
            return clamp_offset(replace(state, banner=str(exc)), state.scroll_offset)
        return self._build(replace(state, banner=None, pending_reload=False), log)

    def _append(self, state: WatchState) -> WatchState:
        try:
            log = self.backend.load()
            entry = self.backend.append(log, self.today())
        except (ParseError, FileAccessError, AppendError) as exc:
            logger.debug("append failed: %s", exc)
            return clamp_offset(replace(state, banner=str(exc)), state.scroll_offset)
        logger.debug("appended %s", format_date(entry.date))
        return self._reload(state)

    def _edit(self, state: WatchState) -> WatchState:
        line_number = None
        if state.log is not None and state.log.days:
            line_number = state.log.days[-1].line_number or None
        self.state = replace(state, phase=Phase.EDITOR_OPEN)
        try:
            self.backend.edit(line_number)
        except EditorLaunchError as exc:
            logger.debug("editor failed: %s", exc)
            returned = replace(self.state, phase=Phase.VIEWING)
            reloaded = self._reload(returned)
            return replace(reloaded, banner=str(exc))
        return self._reload(replace(self.state, phase=Phase.VIEWING))
