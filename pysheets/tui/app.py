"""
curses front end: draws the grid and feeds keys to an EditSession.

Layout:
    line 0       cell address, mode, raw text of the current cell, file name
    line 1       column letters
    lines 2..-2  rows
    last line    status message, or the edit / command line
"""
from __future__ import annotations

import curses
import logging
from typing import Final

from pysheets.session.modes import CommandMode, EditMode
from pysheets.session.session import EditSession
from pysheets.utils.address import column_label

logger = logging.getLogger(__name__)

GUTTER = 5  # row number column
HEADER_LINES = 2
FOOTER_LINES = 1


def draw_text(stdscr: "curses._CursesWindow", y: int, x: int, text: str, attr: int = 0) -> None:
    max_y, max_x = stdscr.getmaxyx()
    if y < 0 or y >= max_y or x >= max_x - 1:
        return
    if x < 0:
        x = 0
    stdscr.addnstr(y, x, text, max_x - x - 1, attr)


def fit(text: str, width: int, right: bool = False) -> str:
    """Pad or cut text to width, keeping one blank column as separator."""
    inner = width - 1
    if len(text) > inner:
        text = text[: max(0, inner - 1)] + "~"
    return (text.rjust(inner) if right else text.ljust(inner)) + " "


class TUIApp:
    TITLE: Final[str] = "pysheets"

    def __init__(self, session: EditSession) -> None:
        self.session: EditSession = session

    # ---------- Geometry ----------
    def _viewport_size(self, stdscr: "curses._CursesWindow") -> None:
        max_y, max_x = stdscr.getmaxyx()
        rows = max_y - HEADER_LINES - FOOTER_LINES
        cols = (max_x - GUTTER - 1) // self.session.config.col_width
        self.session.resize(rows, cols)

    # ---------- Rendering ----------
    def _render_header(self, stdscr: "curses._CursesWindow") -> None:
        s = self.session
        max_y, max_x = stdscr.getmaxyx()
        cell = s.grid.cell(s.cursor.row, s.cursor.col)
        left = f" {s.current_address} [{s.mode.NAME}] {cell.text}"
        right = f"{s.filename or '<unnamed>'}{'*' if s.dirty else ''} "
        space = max(1, max_x - 1 - len(left) - len(right))
        draw_text(stdscr, 0, 0, (left + " " * space + right).ljust(max_x - 1), curses.A_REVERSE)

    def _render_grid(self, stdscr: "curses._CursesWindow") -> None:
        s = self.session
        width = s.config.col_width
        v = s.viewport
        last_col = min(s.grid.max_cols, v.left + v.cols)
        last_row = min(s.grid.max_rows, v.top + v.rows)

        draw_text(stdscr, 1, 0, " " * GUTTER, curses.A_BOLD)
        for i, c in enumerate(range(v.left, last_col)):
            draw_text(stdscr, 1, GUTTER + i * width, column_label(c).center(width), curses.A_BOLD)

        for y, r in enumerate(range(v.top, last_row), start=HEADER_LINES):
            draw_text(stdscr, y, 0, f"{r + 1:>{GUTTER - 1}} ", curses.A_BOLD)
            for i, c in enumerate(range(v.left, last_col)):
                cell = s.grid.cell(r, c)
                text = fit(s.grid.display(r, c), width, right=cell.has_value)
                selected = (r, c) == (s.cursor.row, s.cursor.col)
                draw_text(stdscr, y, GUTTER + i * width, text, curses.A_REVERSE if selected else 0)

    def _render_footer(self, stdscr: "curses._CursesWindow") -> None:
        s = self.session
        max_y, max_x = stdscr.getmaxyx()
        y = max_y - 1
        mode = s.mode
        if isinstance(mode, CommandMode):
            draw_text(stdscr, y, 0, f":{mode.buffer}")
            self._show_cursor(stdscr, y, 1 + len(mode.buffer))
        elif isinstance(mode, EditMode):
            prompt = f"{s.current_address}> "
            # keep the insertion point on screen for long buffers
            avail = max(1, max_x - len(prompt) - 2)
            start = max(0, mode.offset - avail)
            draw_text(stdscr, y, 0, prompt + mode.buffer[start:start + avail])
            self._show_cursor(stdscr, y, len(prompt) + mode.offset - start)
        else:
            status_attr = curses.A_BOLD | (curses.A_REVERSE if s.status.error else 0)
            draw_text(stdscr, y, 0, f" {s.status.message} ".ljust(max_x - 1), status_attr)
            self._set_cursor_visibility(0)

    def _show_cursor(self, stdscr: "curses._CursesWindow", y: int, x: int) -> None:
        max_y, max_x = stdscr.getmaxyx()
        self._set_cursor_visibility(1)
        stdscr.move(y, min(x, max_x - 2))

    @staticmethod
    def _set_cursor_visibility(visibility: int) -> None:
        try:
            curses.curs_set(visibility)
        except curses.error:
            pass  # terminal cannot change cursor visibility

    def draw(self, stdscr: "curses._CursesWindow") -> None:
        stdscr.erase()
        self._viewport_size(stdscr)
        self._render_header(stdscr)
        self._render_grid(stdscr)
        self._render_footer(stdscr)
        stdscr.refresh()

    # ---------- Main loop ----------
    def run(self, stdscr: "curses._CursesWindow") -> None:
        self._set_cursor_visibility(0)
        stdscr.nodelay(False)
        stdscr.keypad(True)
        curses.set_escdelay(25)
        logger.info("session started on %s", self.session.filename or "<unnamed>")
        while True:
            self.draw(stdscr)
            ch = stdscr.getch()
            if ch == curses.KEY_RESIZE:
                continue
            if not self.session.handle_key(ch):
                break
        logger.info("session ended")


def run(session: EditSession) -> None:
    curses.wrapper(TUIApp(session).run)
