"""
Recursive descent formula evaluator.

Grammar:
    expr   = term (('+' | '-') term)*
    term   = unary (('*' | '/') unary)*
    unary  = '-' unary | atom
    atom   = number | cellref | func '(' cellref ':' cellref ')' | '(' expr ')'
    func   = "SUM" | "AVG" | "MIN" | "MAX"

Evaluation never fails. Anything that cannot be parsed contributes 0, and
division by zero gives 0 for that sub-expression.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Iterable, Optional, Protocol, Tuple, runtime_checkable

from pysheets.utils.address import column_label, split_address
from pysheets.utils.errors import SheetsError

logger = logging.getLogger(__name__)

FUNCTIONS = ("SUM", "AVG", "MIN", "MAX")

_NUMBER = re.compile(r"\+?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_CELLREF = re.compile(r"[A-Z]+[0-9]+")
_FUNC_NAME = re.compile(r"[A-Z]{3,7}")


@runtime_checkable
class CellLookup(Protocol):
    """Read-only access to cell values by address; None when the cell has no value."""

    def __call__(self, address: str) -> Optional[float]:
        ...


def aggregate(name: str, values: Iterable[float], zeros: int = 0) -> float:
    """Fold a range's values. MIN/MAX of nothing are +inf/-inf, AVG of nothing is 0.

    zeros counts further cells that read as 0 without being looked up.
    """
    if name == "MIN":
        v = min(values, default=math.inf)
        return min(v, 0.0) if zeros else v
    if name == "MAX":
        v = max(values, default=-math.inf)
        return max(v, 0.0) if zeros else v
    values = list(values)
    total = sum(values, 0.0)
    count = len(values) + zeros
    if name == "AVG":
        return total / count if count else 0.0
    return total


class FormulaParser:
    def __init__(self, text: str, lookup: CellLookup,
                 bounds: Optional[Tuple[int, int]] = None) -> None:
        self.text: str = text
        self.pos: int = 0
        self.lookup: CellLookup = lookup
        self.bounds: Optional[Tuple[int, int]] = bounds

    # ---------- helpers ----------
    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_ws(self) -> None:
        while self._peek() in (" ", "\t"):
            self.pos += 1

    def _match(self, pattern: "re.Pattern[str]") -> Optional[str]:
        m = pattern.match(self.text, self.pos)
        if not m:
            return None
        self.pos = m.end()
        return m.group()

    def _cell_value(self, addr: str) -> float:
        v = self.lookup(addr)
        return 0.0 if v is None else v

    # ---------- grammar ----------
    def parse_expr(self) -> float:
        v = self.parse_term()
        while True:
            self._skip_ws()
            ch = self._peek()
            if ch == "+":
                self.pos += 1
                v += self.parse_term()
            elif ch == "-":
                self.pos += 1
                v -= self.parse_term()
            else:
                return v

    def parse_term(self) -> float:
        v = self.parse_unary()
        while True:
            self._skip_ws()
            ch = self._peek()
            if ch == "*":
                self.pos += 1
                v *= self.parse_unary()
            elif ch == "/":
                self.pos += 1
                d = self.parse_unary()
                v = v / d if d != 0 else 0.0
            else:
                return v

    def parse_unary(self) -> float:
        self._skip_ws()
        if self._peek() == "-":
            self.pos += 1
            return -self.parse_unary()
        return self.parse_atom()

    def parse_atom(self) -> float:
        self._skip_ws()

        if self._peek() == "(":
            self.pos += 1
            v = self.parse_expr()
            self._skip_ws()
            if self._peek() == ")":
                self.pos += 1
            return v

        start = self.pos
        name = self._match(_FUNC_NAME)
        if name is not None:
            self._skip_ws()
            if self._peek() == "(":
                self.pos += 1
                return self._parse_call(name)
            # not a call, retry as a cell reference
            self.pos = start

        ref = self._match(_CELLREF)
        if ref is not None:
            return self._cell_value(ref)

        number = self._match(_NUMBER)
        if number is not None:
            return float(number)

        # unknown token, skip one character
        if self._peek():
            self.pos += 1
        return 0.0

    def _parse_call(self, name: str) -> float:
        """Parse 'A1:B2)' after NAME( has been consumed."""
        self._skip_ws()
        first = self._match(_CELLREF)
        if first is not None:
            self._skip_ws()
            if self._peek() == ":":
                self.pos += 1
                self._skip_ws()
                second = self._match(_CELLREF)
                if second is not None:
                    self._skip_ws()
                    if self._peek() == ")":
                        self.pos += 1
                    return self._eval_range(name, first, second)
        if self._peek() == ")":
            self.pos += 1
        return 0.0

    def _eval_range(self, name: str, first: str, second: str) -> float:
        if name not in FUNCTIONS:
            logger.debug("unknown function %s", name)
            return 0.0
        try:
            r1, c1 = split_address(first)
            r2, c2 = split_address(second)
        except SheetsError as e:
            logger.debug("range %s:%s: %s", first, second, e)
            return 0.0
        top, bottom = min(r1, r2), max(r1, r2)
        left, right = min(c1, c2), max(c1, c2)
        cells = (bottom - top + 1) * (right - left + 1)
        if self.bounds is not None:
            # only cells inside the grid are looked up, the rest read as 0
            max_rows, max_cols = self.bounds
            top, bottom = max(top, 0), min(bottom, max_rows - 1)
            left, right = max(left, 0), min(right, max_cols - 1)
        rows = range(top, bottom + 1)
        cols = range(left, right + 1)
        values = [
            self._cell_value(f"{column_label(c)}{r + 1}")
            for r in rows
            for c in cols
        ]
        return aggregate(name, values, zeros=cells - len(values))


def evaluate(expression: str, lookup: CellLookup,
             bounds: Optional[Tuple[int, int]] = None) -> float:
    """Evaluate a formula body (without the leading marker).

    bounds is (max_rows, max_cols) of the grid behind lookup. When given,
    ranges only look up cells inside it.
    """
    try:
        return FormulaParser(expression, lookup, bounds).parse_expr()
    except RecursionError:
        logger.debug("expression nested too deeply: %.40s...", expression)
        return 0.0
