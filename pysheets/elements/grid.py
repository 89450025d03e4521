from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from pysheets.config import CELL_TEXT_MAX, MAX_COLS, MAX_ROWS
from pysheets.elements.cell import Cell
from pysheets.utils import address
from pysheets.utils.errors import SheetsError, OutOfRange


class Grid:
    """Fixed-size store of cells. All cells are allocated up front."""

    def __init__(self, max_rows: int = MAX_ROWS, max_cols: int = MAX_COLS) -> None:
        if max_rows < 1 or max_cols < 1:
            raise SheetsError("Grid needs at least one row and one column")
        self.max_rows: int = max_rows
        self.max_cols: int = max_cols
        self.cells: List[List[Cell]] = [[Cell() for _ in range(max_cols)] for _ in range(max_rows)]

    def __repr__(self) -> str:
        return f"<Grid {self.max_rows}x{self.max_cols}>"

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.max_rows and 0 <= col < self.max_cols

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise OutOfRange(f"Cell ({row}, {col}) is outside the grid")
        return self.cells[row][col]

    def text(self, row: int, col: int) -> str:
        return self.cell(row, col).text

    def set_text(self, row: int, col: int, text: str) -> None:
        c = self.cell(row, col)
        c.text = text[:CELL_TEXT_MAX]
        c.value = 0.0
        c.has_value = False

    def clear(self, row: int, col: int) -> None:
        self.cell(row, col).reset()

    def reset(self) -> None:
        for r in self.cells:
            for c in r:
                c.reset()

    # --- reading for the evaluator and the renderer ---

    def lookup(self, addr: str) -> Optional[float]:
        """Value of the cell at addr, or None if the address is bad or the cell has no value."""
        try:
            row, col = address.decode(addr, self.max_rows, self.max_cols)
        except SheetsError:
            return None
        c = self.cells[row][col]
        return c.value if c.has_value else None

    def display(self, row: int, col: int) -> str:
        c = self.cell(row, col)
        if c.blank:
            return ""
        if c.has_value:
            return f"{c.value:g}"
        return c.text

    def address(self, row: int, col: int) -> str:
        return address.encode(row, col, self.max_rows, self.max_cols)

    def occupied(self) -> Iterator[Tuple[int, int, str]]:
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if not cell.blank:
                    yield r, c, cell.text

    def extent(self) -> Tuple[int, int]:
        """(last occupied row + 1, last occupied column + 1); (0, 0) when empty."""
        rows = cols = 0
        for r, c, _ in self.occupied():
            rows = max(rows, r + 1)
            cols = max(cols, c + 1)
        return rows, cols
