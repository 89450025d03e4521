"""
Startup constants for the grid, the renderer and CSV persistence.

The module level values are the defaults; Config.from_env() lets them be
overridden through PYSHEETS_* environment variables.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from pysheets.utils.errors import SheetsError

# Config
MAX_ROWS = 100
MAX_COLS = 26
COL_WIDTH = 10  # characters per rendered column
SEPARATOR = ","
FORMULA_MARKER = "="
CELL_TEXT_MAX = 255


def _int_setting(env: Mapping[str, str], key: str, default: int, lo: int = 1) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise SheetsError(f"{key} must be an integer, got {raw!r}")
    if value < lo:
        raise SheetsError(f"{key} must be >= {lo}")
    return value


@dataclass
class Config:
    max_rows: int = MAX_ROWS
    max_cols: int = MAX_COLS
    col_width: int = COL_WIDTH
    separator: str = SEPARATOR
    log_file: Optional[str] = None
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Config":
        env = os.environ if env is None else env
        separator = env.get("PYSHEETS_SEPARATOR") or SEPARATOR
        if len(separator) != 1 or separator == '"':
            raise SheetsError("PYSHEETS_SEPARATOR must be a single character other than '\"'")
        level_name = (env.get("PYSHEETS_LOG_LEVEL") or "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise SheetsError(f"Unknown log level {level_name!r}")
        return cls(
            max_rows=_int_setting(env, "PYSHEETS_ROWS", MAX_ROWS),
            max_cols=_int_setting(env, "PYSHEETS_COLS", MAX_COLS),
            col_width=_int_setting(env, "PYSHEETS_COLWIDTH", COL_WIDTH, lo=3),
            separator=separator,
            log_file=env.get("PYSHEETS_LOG_FILE") or None,
            log_level=level,
        )
