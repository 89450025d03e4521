"""
Vim-like modal editing session over a Grid.

Modes:
- Normal: navigation, clear/yank/paste, entering the other modes
- Edit: line editing of one cell's text
- Command: for :w, :wq, :q, :q!, :e <file> and :<address> (goto)

Every key is handled to completion, including the recalculation pass, before
handle_key returns. ESC always returns to Normal.
"""
from __future__ import annotations

import curses
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from multipledispatch import dispatch

from pysheets.config import Config, FORMULA_MARKER
from pysheets.elements.grid import Grid
from pysheets.formula.recalc import recalculate
from pysheets.persistence.csvfile import read_csv, write_csv
from pysheets.session.modes import CommandMode, EditMode, NormalMode
from pysheets.utils import address
from pysheets.utils.errors import SheetsError, Status

logger = logging.getLogger(__name__)

ESC = 27
TAB = 9
CTRL_A = 1
CTRL_E = 5
CTRL_U = 21
ENTER_KEYS = (curses.KEY_ENTER, 10, 13)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)

HELP = ("hjkl move  i/= insert  e edit  x cut  y yank  p paste  "
        ":w [file]  :wq  :q[!]  :e[!] file  :A1 goto  q/Q quit")


def clamp(value: int, lo: int, hi: int) -> int:
    if hi < lo:
        return lo
    return max(lo, min(value, hi))


def printable(key: int) -> bool:
    return 32 <= key < 127


@dataclass
class Cursor:
    row: int = 0
    col: int = 0


@dataclass
class Viewport:
    top: int = 0
    left: int = 0
    rows: int = 20  # visible rows, set by the renderer
    cols: int = 7   # visible columns, set by the renderer


class EditSession:
    def __init__(self, grid: Optional[Grid] = None, config: Optional[Config] = None,
                 filename: Optional[str] = None) -> None:
        self.config: Config = config or Config()
        self.grid: Grid = grid or Grid(self.config.max_rows, self.config.max_cols)
        self.cursor: Cursor = Cursor()
        self.viewport: Viewport = Viewport()
        self.mode = NormalMode()
        self.yank: str = ""
        self.dirty: bool = False
        self.filename: Optional[str] = filename
        self.status: Status = Status()
        self.running: bool = True

        # ---------- Dispatch Table ----------
        self.normal_keys: Dict[int, Callable[[], None]] = {
            ord("h"): lambda: self.move(0, -1),
            curses.KEY_LEFT: lambda: self.move(0, -1),
            ord("j"): lambda: self.move(1, 0),
            curses.KEY_DOWN: lambda: self.move(1, 0),
            ord("k"): lambda: self.move(-1, 0),
            curses.KEY_UP: lambda: self.move(-1, 0),
            ord("l"): lambda: self.move(0, 1),
            curses.KEY_RIGHT: lambda: self.move(0, 1),
            curses.KEY_NPAGE: lambda: self.move(self.viewport.rows, 0),
            curses.KEY_PPAGE: lambda: self.move(-self.viewport.rows, 0),
            ord("0"): lambda: self.goto(self.cursor.row, 0),
            curses.KEY_HOME: lambda: self.goto(self.cursor.row, 0),
            ord("$"): lambda: self.goto(self.cursor.row, self.grid.max_cols - 1),
            curses.KEY_END: lambda: self.goto(self.cursor.row, self.grid.max_cols - 1),
            ord("g"): lambda: self.goto(0, 0),
            ord("i"): self.begin_insert,
            ord(FORMULA_MARKER): self.begin_formula,
            ord("e"): self.begin_edit,
            10: self.begin_edit,
            13: self.begin_edit,
            curses.KEY_ENTER: self.begin_edit,
            ord("x"): self.cut,
            ord("d"): self.cut,
            ord("y"): self.copy,
            ord("p"): self.paste,
            ord(":"): self.begin_command,
            ord("q"): lambda: self.quit(force=False),
            ord("Q"): lambda: self.quit(force=True),
            ord("?"): lambda: self.set_status(HELP),
        }

    # ---------- Status ----------
    def set_status(self, msg: str, *, error: bool = False) -> None:
        self.status = Status(msg, error)

    @property
    def current_address(self) -> str:
        return self.grid.address(self.cursor.row, self.cursor.col)

    # ---------- Files ----------
    def load(self, path: str) -> bool:
        """Replace the grid contents with path. On failure the grid is left as it was."""
        if not read_csv(self.grid, path, self.config.separator):
            return False
        recalculate(self.grid)
        self.filename = path
        self.dirty = False
        self.cursor = Cursor()
        self.viewport.top = self.viewport.left = 0
        return True

    def write(self, path: Optional[str] = None) -> None:
        """Write to path (remembered as the filename) or the current filename. FatalError propagates."""
        if path:
            self.filename = path
        if not self.filename:
            self.set_status("No file name", error=True)
            return
        write_csv(self.grid, self.filename, self.config.separator)
        self.dirty = False
        self.set_status(f'"{self.filename}" written')

    def quit(self, force: bool) -> None:
        if self.dirty and not force:
            self.set_status("No write since last change (add ! to override)", error=True)
            return
        self.running = False

    # ---------- Cursor navigation ----------
    def resize(self, rows: int, cols: int) -> None:
        self.viewport.rows = max(1, rows)
        self.viewport.cols = max(1, cols)
        self.scroll()

    def scroll(self) -> None:
        """Shift the viewport by the least amount that shows the cursor."""
        v, cur = self.viewport, self.cursor
        if cur.row < v.top:
            v.top = cur.row
        elif cur.row >= v.top + v.rows:
            v.top = cur.row - v.rows + 1
        if cur.col < v.left:
            v.left = cur.col
        elif cur.col >= v.left + v.cols:
            v.left = cur.col - v.cols + 1

    def goto(self, row: int, col: int) -> None:
        self.cursor = Cursor(clamp(row, 0, self.grid.max_rows - 1),
                             clamp(col, 0, self.grid.max_cols - 1))
        self.scroll()

    def move(self, drow: int, dcol: int) -> None:
        self.goto(self.cursor.row + drow, self.cursor.col + dcol)

    # ---------- Cell mutation ----------
    def _changed(self) -> None:
        self.dirty = True
        recalculate(self.grid)

    def store(self, text: str) -> None:
        self.grid.set_text(self.cursor.row, self.cursor.col, text)
        self._changed()

    def cut(self) -> None:
        if self.grid.cell(self.cursor.row, self.cursor.col).blank:
            return
        self.yank = self.grid.text(self.cursor.row, self.cursor.col)
        self.grid.clear(self.cursor.row, self.cursor.col)
        self._changed()

    def copy(self) -> None:
        self.yank = self.grid.text(self.cursor.row, self.cursor.col)
        self.set_status(f"Yanked {self.current_address}")

    def paste(self) -> None:
        if not self.yank:
            self.set_status("Nothing to paste", error=True)
            return
        self.store(self.yank)

    # ---------- Mode Switching ----------
    def begin_insert(self) -> None:
        self.mode = EditMode()

    def begin_formula(self) -> None:
        self.mode = EditMode(FORMULA_MARKER, len(FORMULA_MARKER))

    def begin_edit(self) -> None:
        text = self.grid.text(self.cursor.row, self.cursor.col)
        self.mode = EditMode(text, len(text))

    def begin_command(self) -> None:
        self.mode = CommandMode()

    # ---------- Input handling ----------
    def handle_key(self, key: int) -> bool:
        """Feed one key. Returns False once the session has quit."""
        self.status = Status()
        self._handle(self.mode, key)
        return self.running

    @dispatch(NormalMode, int)
    def _handle(self, mode, key):
        action = self.normal_keys.get(key)
        if action is not None:
            action()

    @dispatch(EditMode, int)
    def _handle(self, mode, key):
        if key == ESC:
            self.mode = NormalMode()
        elif key in ENTER_KEYS:
            self.mode = NormalMode()
            self.store(mode.buffer)
            self.move(1, 0)
        elif key == TAB:
            self.mode = NormalMode()
            self.store(mode.buffer)
        elif key in BACKSPACE_KEYS:
            mode.backspace()
        elif key == curses.KEY_DC:
            mode.delete()
        elif key == curses.KEY_LEFT:
            mode.left()
        elif key == curses.KEY_RIGHT:
            mode.right()
        elif key in (curses.KEY_HOME, CTRL_A):
            mode.home()
        elif key in (curses.KEY_END, CTRL_E):
            mode.end()
        elif key == CTRL_U:
            mode.clear()
        elif printable(key):
            if not mode.insert(chr(key)):
                self.set_status("Cell is full", error=True)

    @dispatch(CommandMode, int)
    def _handle(self, mode, key):
        if key == ESC:
            self.mode = NormalMode()
        elif key in ENTER_KEYS:
            self.mode = NormalMode()
            self.execute(mode.buffer.strip())
        elif key in BACKSPACE_KEYS:
            if mode.buffer:
                mode.buffer = mode.buffer[:-1]
            else:
                self.mode = NormalMode()
        elif printable(key):
            mode.buffer += chr(key)

    # ---------- Commands ----------
    def execute(self, cmd: str) -> None:
        logger.debug("command %r", cmd)
        if not cmd:
            return
        if cmd in ("q", "q!"):
            self.quit(force=cmd.endswith("!"))
        elif cmd in ("wq", "wq!"):
            if not self.filename:
                self.set_status("No file name", error=True)
                return
            self.write()
            self.running = False
        elif cmd == "w" or cmd.startswith("w "):
            self.write(cmd[1:].strip() or None)
        elif cmd.startswith(("e ", "e! ")) or cmd in ("e", "e!"):
            self._cmd_open(cmd.partition(" ")[2].strip(), force=cmd.startswith("e!"))
        else:
            self._cmd_goto(cmd)

    def _cmd_open(self, path: str, force: bool) -> None:
        if not path:
            self.set_status("Usage: :e <file>", error=True)
            return
        if self.dirty and not force:
            self.set_status("No write since last change (add ! to override)", error=True)
            return
        if self.load(path):
            self.set_status(f'"{path}" loaded')
        else:
            self.set_status(f"Cannot open {path}", error=True)

    def _cmd_goto(self, cmd: str) -> None:
        try:
            row, col = address.decode(cmd, self.grid.max_rows, self.grid.max_cols)
        except SheetsError:
            self.set_status(f"Unknown command: {cmd}", error=True)
            return
        self.goto(row, col)
