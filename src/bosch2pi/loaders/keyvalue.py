"""Key/value metadata files (name maps, outing info, constants).

One pair per line.  The separator is the first entry of
:data:`KEY_VALUE_SEPARATORS` that occurs in the line; the line is split once
on it.  Blank lines and ``#`` comments (whole-line or trailing) are ignored,
as are lines with no separator, an empty key or an empty value.

Example::

    # raw name -> display name
    vCar -> Speed
    nEngine = RPM
    DriverName: A. Driver
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator

_logger = logging.getLogger(__name__)

# Tried in this order; the first one present in a line wins.
KEY_VALUE_SEPARATORS: tuple[str, ...] = ("->", "\t", "=", ",", ":")

_COMMENT = "#"
_INPUT_ENCODING = "utf-8-sig"


class KeyValueReadError(Exception):
    """Raised when a key/value file cannot be read."""


def split_pair(line: str) -> tuple[str, str] | None:
    """Return ``(key, value)`` for one raw line, or ``None`` if it holds no pair."""
    line = line.strip()
    if not line:
        return None

    hash_idx = line.find(_COMMENT)
    if hash_idx == 0:
        return None
    if hash_idx > 0:
        line = line[:hash_idx].strip()
        if not line:
            return None

    separator = next((sep for sep in KEY_VALUE_SEPARATORS if sep in line), None)
    if separator is None:
        return None

    key, value = (part.strip() for part in line.split(separator, 1))
    if not key or not value:
        return None
    return key, value


def parse_key_value_lines(lines: Iterable[str]) -> Iterator[tuple[str, str]]:
    """Yield every ``(key, value)`` pair in *lines*, in order."""
    for line in lines:
        pair = split_pair(line)
        if pair is not None:
            yield pair


def _read_lines(path: str) -> list[str]:
    if not os.path.exists(path):
        raise KeyValueReadError(f"File not found: {path!r}")
    try:
        with open(path, encoding=_INPUT_ENCODING, errors="replace", newline=None) as fh:
            return [line.rstrip("\n") for line in fh]
    except OSError as exc:
        raise KeyValueReadError(f"Could not read {path!r}: {exc}") from exc


def load_ordered_pairs(path: str) -> list[tuple[str, str]]:
    """Return all pairs of *path* in file order, duplicates included.

    Raises
    ------
    KeyValueReadError
        If the file is missing or unreadable.
    """
    pairs = list(parse_key_value_lines(_read_lines(path)))
    _logger.debug("Loaded %d pairs from %s", len(pairs), path)
    return pairs


def load_first_wins(path: str) -> dict[str, str]:
    """Return the pairs of *path* as a dict; the first definition of a key wins."""
    mapping: dict[str, str] = {}
    for key, value in parse_key_value_lines(_read_lines(path)):
        if key in mapping:
            _logger.debug("Ignoring duplicate key %r in %s", key, path)
            continue
        mapping[key] = value
    _logger.debug("Loaded %d entries from %s", len(mapping), path)
    return mapping
