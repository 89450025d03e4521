from __future__ import annotations

import re
from typing import Tuple

from pysheets.utils.errors import InvalidAddress, OutOfRange

# letters immediately followed by digits, nothing else; uppercase only
_ADDRESS = re.compile(r"([A-Z]+)([0-9]+)")

# longer addresses are far outside any grid
MAX_LETTERS = 10
MAX_DIGITS = 18


def column_index(letters: str) -> int:
    """Bijective base-26 column letters to a zero-based index: A=0, Z=25, AA=26."""
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def column_label(index: int) -> str:
    if index < 0:
        raise OutOfRange(f"Column index {index} is negative")
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def split_address(text: str) -> Tuple[int, int]:
    """Parse an address without bounds checking. Row "0" gives row index -1."""
    m = _ADDRESS.fullmatch(text)
    if not m:
        raise InvalidAddress(f"Not a cell address: {text!r}")
    letters, digits = m.groups()
    if len(letters) > MAX_LETTERS or len(digits) > MAX_DIGITS:
        raise OutOfRange(f"{text[:20]}... is outside any grid")
    return int(digits) - 1, column_index(letters)


def encode(row: int, col: int, max_rows: int, max_cols: int) -> str:
    if not 0 <= row < max_rows or not 0 <= col < max_cols:
        raise OutOfRange(f"Cell ({row}, {col}) is outside {max_rows}x{max_cols}")
    return f"{column_label(col)}{row + 1}"


def decode(text: str, max_rows: int, max_cols: int) -> Tuple[int, int]:
    row, col = split_address(text)
    if not 0 <= row < max_rows or not 0 <= col < max_cols:
        raise OutOfRange(f"{text} is outside the grid")
    return row, col
