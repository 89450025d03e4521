from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pysheets import __version__
from pysheets.config import Config
from pysheets.elements.grid import Grid
from pysheets.formula.recalc import recalculate
from pysheets.logging_config import setup_logging
from pysheets.session.session import EditSession
from pysheets.tui import app
from pysheets.utils.errors import FatalError, SheetsError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pysheets", description="Terminal spreadsheet editor")
    parser.add_argument("file", nargs="?", help="CSV file to open")
    parser.add_argument("-v", "--version", action="version", version=f"pysheets {__version__}")
    return parser


def make_session(path: Optional[str], config: Config) -> EditSession:
    session = EditSession(Grid(config.max_rows, config.max_cols), config)
    if path is None:
        recalculate(session.grid)
    elif not session.load(path):
        # start an empty sheet that will be written to path
        session.filename = path
        session.set_status(f'"{path}" [New]')
    return session


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = Config.from_env()
    except SheetsError as e:
        print(f"pysheets: {e}", file=sys.stderr)
        return 2
    setup_logging(config.log_level, config.log_file)

    session = make_session(args.file, config)
    try:
        app.run(session)
    except FatalError as e:
        logger.error("%s", e)
        print(f"pysheets: {e}", file=sys.stderr)
        return 1
    return 0
