#!/usr/bin/env python3
"""
Curses terminal used by watch mode.

Raw mode is acquired on ``__enter__`` and released on every way out of the
``with`` block. ``suspended()`` hands the terminal to a child process and
takes it back afterwards.
"""

from __future__ import annotations

import curses
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Tuple

from .errors import TerminalError

ESCAPE = 27
CTRL_V = 22

KEY_NAMES = {
    curses.KEY_PPAGE: "page_up",
    curses.KEY_NPAGE: "page_down",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_RESIZE: "resize",
    CTRL_V: "page_down",
}

HEADER_ROWS = 3


def key_name(code: int, next_code: Optional[int] = None) -> Optional[str]:
    """
    Map a curses key code to a command name.

    Parameters
    ----------
    code : int
        Key code from ``getch``.
    next_code : Optional[int], optional
        Following key code, used to recognise Meta-v (ESC v).

    Returns
    -------
    Optional[str]
        Command name, or None for keys without a binding.

    Examples
    --------
    >>> key_name(ord("q"))
    'q'
    >>> key_name(27, ord("v"))
    'page_up'
    >>> key_name(22)
    'page_down'
    """
    if code == ESCAPE:
        return "page_up" if next_code == ord("v") else None
    if code in KEY_NAMES:
        return KEY_NAMES[code]
    if 32 <= code < 127:
        return chr(code).lower()
    return None


class CursesTerminal:
    """
    Scoped curses session.

    Parameters
    ----------
    poll_ms : int, optional
        How long ``read_key`` waits for input.
    """

    def __init__(self, poll_ms: int = 100) -> None:
        self.poll_ms = poll_ms
        self.stdscr = None

    def __enter__(self) -> "CursesTerminal":
        try:
            self.stdscr = curses.initscr()
            curses.noecho()
            curses.cbreak()
            self.stdscr.keypad(True)
            self.stdscr.timeout(self.poll_ms)
            try:
                curses.curs_set(0)
            except curses.error:
                pass  # some terminals cannot hide the cursor
        except curses.error as exc:
            self._restore()
            raise TerminalError(f"cannot initialise terminal: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._restore()

    def _restore(self) -> None:
        if self.stdscr is None:
            return
        try:
            self.stdscr.keypad(False)
            curses.nocbreak()
            curses.echo()
        finally:
            curses.endwin()
            self.stdscr = None

    @contextmanager
    def suspended(self) -> Iterator[None]:
        """
        Release the terminal for a child process, then restore raw mode.
        """
        curses.def_prog_mode()
        curses.endwin()
        try:
            yield
        finally:
            try:
                curses.reset_prog_mode()
                self.stdscr.refresh()
            except curses.error as exc:
                raise TerminalError(f"cannot restore terminal: {exc}") from exc

    def size(self) -> Tuple[int, int]:
        height, width = self.stdscr.getmaxyx()
        return height, width

    def content_height(self) -> int:
        height, _width = self.size()
        return max(1, height - HEADER_ROWS)

    def content_width(self) -> int:
        _height, width = self.size()
        return max(1, width - 1)

    def read_key(self) -> Optional[str]:
        """
        Wait up to ``poll_ms`` for a key and return its command name.
        """
        code = self.stdscr.getch()
        if code == -1:
            return None
        next_code = None
        if code == ESCAPE:
            self.stdscr.nodelay(True)
            next_code = self.stdscr.getch()
            self.stdscr.timeout(self.poll_ms)
        return key_name(code, next_code)

    def draw(self, menu: str, status: str, lines: Sequence[str]) -> None:
        """
        Redraw the screen: menu, status line, blank row, then content.
        """
        height, _width = self.size()
        usable = self.content_width()
        self.stdscr.erase()
        self.stdscr.addnstr(0, 0, menu, usable, curses.A_BOLD)
        if height > 1:
            self.stdscr.addnstr(1, 0, status, usable, curses.A_DIM)
        for row, text in enumerate(lines, start=HEADER_ROWS):
            if row >= height:
                break
            attrs = curses.A_BOLD if text.startswith(("error:", "warning:")) else curses.A_NORMAL
            self.stdscr.addnstr(row, 0, text, usable, attrs)
        self.stdscr.refresh()
