from __future__ import annotations

import csv
import logging
import os
import shutil
import tempfile

from pysheets.config import SEPARATOR
from pysheets.elements.grid import Grid
from pysheets.utils.errors import FatalError

logger = logging.getLogger(__name__)


def _dialect(separator: str) -> dict:
    return dict(delimiter=separator, quotechar='"', doublequote=True,
                quoting=csv.QUOTE_MINIMAL, lineterminator="\n")


def read_csv(grid: Grid, path: str, separator: str = SEPARATOR) -> bool:
    """Load path into grid. Returns False, leaving grid untouched, if the file cannot be read."""
    try:
        with open(path, newline="", encoding="utf-8") as f:
            records = list(csv.reader(f, **_dialect(separator)))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.warning("not loading %s: %s", path, e)
        return False
    dropped = 0
    grid.reset()
    for r, fields in enumerate(records):
        if r >= grid.max_rows:
            dropped += 1
            continue
        for c, text in enumerate(fields):
            if not text:
                continue
            if c >= grid.max_cols:
                dropped += 1
                continue
            grid.set_text(r, c, text)
    if dropped:
        logger.warning("%s does not fit in %r, %d rows/fields dropped", path, grid, dropped)
    logger.info("loaded %s", path)
    return True


def write_csv(grid: Grid, path: str, separator: str = SEPARATOR) -> None:
    """Write occupied cells to path, replacing it atomically. Raises FatalError on failure.

    A symlink is followed and its target replaced. An existing file keeps its
    permission bits, a new one gets the usual umask defaults.
    """
    rows, _ = grid.extent()
    target = os.path.realpath(path)
    exists = os.path.exists(target)
    if exists and not os.access(target, os.W_OK):
        raise FatalError(f"cannot write {path}: permission denied")
    directory = os.path.dirname(target)
    try:
        fd, tmp = tempfile.mkstemp(prefix=".pysheets_", dir=directory)
    except OSError as e:
        raise FatalError(f"cannot write {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, **_dialect(separator))
            for r in range(rows):
                texts = [cell.text for cell in grid.cells[r]]
                last = max((c + 1 for c, t in enumerate(texts) if t), default=0)
                writer.writerow(texts[:last])
        if exists:
            shutil.copymode(target, tmp)
        else:
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(tmp, 0o666 & ~umask)
        os.replace(tmp, target)
    except OSError as e:
        raise FatalError(f"cannot write {path}: {e}") from e
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)
    logger.info("wrote %d rows to %s", rows, path)
