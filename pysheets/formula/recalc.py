from __future__ import annotations

import logging
import re

from pysheets.config import FORMULA_MARKER
from pysheets.elements.grid import Grid
from pysheets.formula.evaluator import evaluate

logger = logging.getLogger(__name__)

# decimal literal, leading whitespace allowed, nothing after it
_LITERAL = re.compile(r"[ \t]*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_number(text: str):
    """float of text if the whole text is a decimal number, else None."""
    if not _LITERAL.fullmatch(text):
        return None
    return float(text)


def recalculate(grid: Grid) -> None:
    """One row-major pass over every cell.

    There is no dependency ordering: a formula reads referenced cells as they
    are at that moment, so references to cells later in the pass see the
    values from the previous pass.
    """
    formulas = 0
    bounds = (grid.max_rows, grid.max_cols)
    for row in grid.cells:
        for cell in row:
            if cell.text.startswith(FORMULA_MARKER):
                cell.value = evaluate(cell.text[len(FORMULA_MARKER):], grid.lookup, bounds)
                cell.has_value = True
                formulas += 1
            elif cell.text:
                v = parse_number(cell.text)
                if v is None:
                    cell.has_value = False
                else:
                    cell.value = v
                    cell.has_value = True
            else:
                cell.has_value = False
    logger.debug("recalculated %r, %d formulas", grid, formulas)
