#!/usr/bin/env python3
"""
Interactive watch mode: keep a live report on screen while the log is edited.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import time
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from .append import append_block, format_day_entry, new_day_entry, write_atomic
from .config import Settings, load_settings
from .controller import (
    FileChanged,
    Key,
    Resize,
    Tick,
    WatchController,
    render_menu,
    render_status,
)
from .editor import edit_file
from .errors import TerminalError
from .model import DayEntry, Period, TimeLog
from .parse import parse_log, read_log_text
from .terminal import CursesTerminal
from .watcher import FileWatcher

LOG_PATH_ENV = "TIME_REPORT_LOG"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """
    Send debug logging to ``$TIME_REPORT_LOG`` when it is set.

    The terminal belongs to curses in watch mode, so nothing is logged to
    the screen.
    """
    root = logging.getLogger("timereport")
    target = os.environ.get(LOG_PATH_ENV, "").strip()
    if not target:
        root.addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(os.path.expanduser(target), encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


class FileBackend:
    """
    File, append and editor operations for a watched log.
    """

    def __init__(
        self,
        path: Path,
        settings: Settings,
        watcher: FileWatcher,
        terminal: Optional[CursesTerminal] = None,
    ) -> None:
        self.path = Path(path)
        self.settings = settings
        self.watcher = watcher
        self.terminal = terminal

    def load(self) -> TimeLog:
        self.watcher.acknowledge()
        return parse_log(read_log_text(self.path))

    def append(self, log: TimeLog, today: date) -> DayEntry:
        text = read_log_text(self.path)
        entry = new_day_entry(
            log,
            today,
            count=self.settings.recent_count,
            recent_days=self.settings.recent_days,
        )
        write_atomic(self.path, append_block(text, format_day_entry(entry)))
        return entry

    def edit(self, line_number: Optional[int]) -> None:
        if self.terminal is None:
            edit_file(self.path, line_number, configured=self.settings.editor)
            return
        with self.terminal.suspended():
            edit_file(self.path, line_number, configured=self.settings.editor)


def _resize_event(terminal: CursesTerminal) -> Resize:
    return Resize(terminal.content_height(), terminal.content_width())


def run_event_loop(
    controller: WatchController,
    terminal: CursesTerminal,
    watcher: FileWatcher,
    *,
    path_label: str,
    refresh_seconds: float,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """
    Wait for one event at a time and feed it to the controller.

    Keyboard input is polled first; each wait lasts at most the terminal's
    poll interval, after which the watcher and the refresh timer are checked.
    Every tick also makes the watcher hash the file again.
    """
    controller.handle(_resize_event(terminal))
    state = controller.start()
    terminal.draw(render_menu(), render_status(state, path_label), state.visible_lines)
    next_tick = clock() + refresh_seconds
    while controller.running:
        key = terminal.read_key()
        if key == "resize":
            event = _resize_event(terminal)
        elif key is not None:
            event = Key(key)
        elif watcher.poll():
            event = FileChanged()
        elif clock() >= next_tick:
            watcher.rehash()
            event = Tick()
            next_tick = clock() + refresh_seconds
        else:
            continue
        before = controller.state
        after = controller.handle(event)
        if after != before and controller.running:
            terminal.draw(render_menu(), render_status(after, path_label), after.visible_lines)


def _raise_exit(signum, _frame) -> None:
    raise SystemExit(128 + signum)


def run_watch(
    path: Path,
    period: Optional[Callable[[date], Optional[Period]]] = None,
    settings: Optional[Settings] = None,
) -> int:
    """
    Run watch mode until the user quits.

    Returns
    -------
    int
        Exit code.
    """
    configure_logging()
    settings = settings or load_settings()
    path = Path(path)
    watcher = FileWatcher(path, debounce_seconds=settings.debounce_ms / 1000.0)
    previous = {
        signum: signal.signal(signum, _raise_exit)
        for signum in (signal.SIGTERM, signal.SIGHUP)
    }
    try:
        with CursesTerminal(poll_ms=settings.poll_ms) as terminal:
            backend = FileBackend(path, settings, watcher, terminal)
            controller = WatchController(backend, period=period)
            run_event_loop(
                controller,
                terminal,
                watcher,
                path_label=path.name,
                refresh_seconds=settings.refresh_seconds,
            )
    except TerminalError as exc:
        print(f"time-report: watch failed: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
    logger.debug("watch mode finished")
    return 0
