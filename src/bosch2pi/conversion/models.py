"""Conversion data models."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_LAP_COLUMN = "lapctr"


@dataclass
class Table:
    """A column-major view of a tab-separated logger export.

    ``columns[0]`` is the time axis, ``columns[1:]`` are channels.  Cell 0 of
    every column is the raw header; cells 1.. are row-aligned values.
    """

    columns: list[list[str]]

    @property
    def time_column(self) -> list[str]:
        return self.columns[0]

    @property
    def channel_count(self) -> int:
        """Number of data channels (every column except the time axis)."""
        return max(0, len(self.columns) - 1)

    @property
    def row_count(self) -> int:
        """Number of data rows below the header row."""
        if not self.columns:
            return 0
        return max(0, len(self.columns[0]) - 1)


@dataclass(frozen=True)
class ChannelHeader:
    """Channel name and bracketed units token split from a header cell."""

    name: str
    """Text before the first ``[``, trimmed."""

    units: str
    """First ``[...]`` token including brackets, or ``"[]"`` if absent."""

    @classmethod
    def parse(cls, raw: str | None) -> ChannelHeader:
        raw = raw or ""
        start = raw.find("[")
        end = raw.find("]", start + 1) if start != -1 else -1
        units = raw[start:end + 1] if end > start else "[]"
        name = raw.split("[", 1)[0].strip()
        return cls(name=name, units=units)


@dataclass
class PiDocument:
    """Everything the writer needs to produce one output file.

    Args:
        table: Loaded logger export.
        name_map: Raw channel name → display name.  Empty means identity.
        outing_info: Ordered outing metadata; duplicates are kept.
        constants: Ordered calibration constants; non-numeric values are dropped.
        lap_column_name: Channel name of the lap counter.
    """

    table: Table
    name_map: dict[str, str] = field(default_factory=dict)
    outing_info: list[tuple[str, str]] = field(default_factory=list)
    constants: list[tuple[str, str]] = field(default_factory=list)
    lap_column_name: str = DEFAULT_LAP_COLUMN


@dataclass(frozen=True)
class LapScan:
    """Result of scanning a lap-counter channel.

    ``markers`` has exactly the declared lap count; slots without an observed
    lap boundary stay at ``0.0``.
    """

    markers: tuple[float, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass
class WriteResult:
    """Summary of a completed write."""

    output_path: str
    channel_count: int
    lap_column_index: int | None = None
    markers: tuple[float, ...] = ()
    warnings: list[str] = field(default_factory=list)
