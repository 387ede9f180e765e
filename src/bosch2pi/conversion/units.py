"""UnitNormalizer: rewrites logger unit tokens into Pi Toolbox display tokens."""

from __future__ import annotations

DEGREE = "°"

# (old, new) literal replacements, applied in order to the whole token.
_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("deg",     DEGREE),
    ("\ufffd",  DEGREE),  # undecodable cp1252 0xB0 read as UTF-8
    ("\xfd",    DEGREE),
    ("[km/h]",  "[kph]"),
    ("[l]",     "[ltr]"),
    ("[g]",     "[G]"),
)

# Whole-token substitutions checked after the replacements above.
_EXACT: dict[str, str] = {
    "[C]": f"[{DEGREE}C]",
}


class UnitNormalizer:
    """Maps a bracketed units token (``"[km/h]"``, ``"[C]"``...) to its display form.

    Only the label changes; sample values are never converted.  Unknown
    tokens, including the empty ``"[]"``, are returned unchanged.
    """

    def normalize(self, units: str, channel_name: str = "") -> str:
        """Return the display token for *units*.

        *channel_name* is accepted for name-dependent rules; none exist yet.
        """
        for old, new in _REPLACEMENTS:
            units = units.replace(old, new)
        return _EXACT.get(units, units)


def clean_up_units(units: str, channel_name: str = "") -> str:
    """Module-level shortcut for :meth:`UnitNormalizer.normalize`."""
    return UnitNormalizer().normalize(units, channel_name)
