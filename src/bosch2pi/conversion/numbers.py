"""Lenient numeric parsing for logger text cells."""

from __future__ import annotations


def parse_float(text: str | None) -> float | None:
    """Return *text* as a float, or ``None`` if it is not a number.

    Surrounding whitespace is ignored.  Underscore digit grouping, which
    ``float()`` would accept, is rejected.
    """
    if text is None or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def parse_int(text: str | None) -> int | None:
    """Return *text* as an int, or ``None`` if it is not an integer."""
    if text is None or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def format_number(value: float) -> str:
    """Shortest round-trip text for *value*, without a trailing ``.0``.

    Exponents are upper-case (``1E-05``, ``1E+16``).
    """
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text.replace("e", "E")
