"""TableLoader: reads a tab-separated logger export into column-major form."""

from __future__ import annotations

import logging
import os

from bosch2pi.conversion.models import Table

_logger = logging.getLogger(__name__)

_INPUT_ENCODING = "utf-8-sig"


class TableReadError(Exception):
    """Raised when the logger export cannot be opened or read."""


def _is_comment(line: str) -> bool:
    return line.lstrip().startswith("#")


class TableLoader:
    """Loads a tab-separated export and transposes it into columns.

    The first retained row fixes the column count; shorter rows are padded
    with ``""`` and longer rows are cut.  Undecodable bytes become U+FFFD so
    mis-encoded unit labels can still be repaired downstream.
    """

    def load(self, path: str) -> Table | None:
        """Return the table in *path*, or ``None`` if it has no rows.

        Raises
        ------
        TableReadError
            If the file does not exist or cannot be read.
        """
        if not os.path.exists(path):
            raise TableReadError(f"File not found: {path!r}")
        try:
            with open(path, encoding=_INPUT_ENCODING, errors="replace", newline=None) as fh:
                rows = [
                    line.rstrip("\n").split("\t")
                    for line in fh
                    if not _is_comment(line)
                ]
        except OSError as exc:
            raise TableReadError(f"Could not read {path!r}: {exc}") from exc

        return self.from_rows(rows)

    def from_rows(self, rows: list[list[str]]) -> Table | None:
        """Transpose already split *rows*; ``None`` if there are none."""
        if not rows:
            return None

        width = len(rows[0])
        columns = [
            [row[col] if col < len(row) else "" for row in rows]
            for col in range(width)
        ]
        _logger.debug("Loaded %d rows x %d columns", len(rows), width)
        return Table(columns=columns)
