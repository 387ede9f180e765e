"""LapMarkerExtractor: derives lap boundary timestamps from a lap-counter channel.

The logger writes a running lap count on every sample and the total number of
laps in the channel's last cell.  A single forward scan folds the samples into
``(lap_counter, markers, warnings)``:

  - samples equal to 1 before the first boundary are the out-lap warm-up and
    are skipped;
  - the first usable sample after that opens the first marker slot;
  - every later increase of the counter fills the next slot.

Boundaries beyond the declared lap count are counted but not recorded.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from bosch2pi.conversion.models import LapScan
from bosch2pi.conversion.numbers import parse_float, parse_int

_logger = logging.getLogger(__name__)

_FIRST_SAMPLE = 2  # cell 0 is the header, cell 1 has no predecessor sample


@dataclass(frozen=True)
class _ScanState:
    lap_counter: int
    markers: tuple[float, ...]
    warnings: tuple[str, ...] = ()

    def record(self, time_value: float) -> _ScanState:
        markers = self.markers
        if self.lap_counter < len(markers):
            markers = markers[:self.lap_counter] + (time_value,) + markers[self.lap_counter + 1:]
        return replace(self, lap_counter=self.lap_counter + 1, markers=markers)

    def warn(self, message: str) -> _ScanState:
        return replace(self, warnings=self.warnings + (message,))


def declared_lap_count(lap_column: Sequence[str]) -> int:
    """Return the lap total stored in the last cell of *lap_column* (0 if unreadable)."""
    if not lap_column:
        return 0
    return max(0, parse_int(lap_column[-1]) or 0)


def _step(
    state: _ScanState,
    current_cell: str,
    previous_cell: str,
    time_cell: str | None,
) -> _ScanState:
    current = parse_float(current_cell)
    previous = parse_float(previous_cell)
    if current is None or previous is None:
        return state

    if current == 1 and state.lap_counter == 0:
        return state

    time_value = parse_float(time_cell)
    if time_value is None:
        message = f"Error parsing time {time_cell}"
        _logger.warning(message)
        return state.warn(message)

    if state.lap_counter == 0:
        return state.record(time_value)

    if current > previous:
        return state.record(time_value)
    return state


class LapMarkerExtractor:
    """Scans a lap-counter column against the time column.

    Parameters
    ----------
    first_sample:
        Index of the first sample compared with its predecessor.
    """

    def __init__(self, first_sample: int = _FIRST_SAMPLE) -> None:
        self._first_sample = first_sample

    def extract(self, lap_column: Sequence[str], time_column: Sequence[str]) -> LapScan:
        """Return the lap markers found in *lap_column*.

        The result always holds exactly the declared number of markers;
        if fewer boundaries were observed the trailing slots are ``0.0``.
        """
        num_laps = declared_lap_count(lap_column)
        state = _ScanState(lap_counter=0, markers=(0.0,) * num_laps)

        for j in range(self._first_sample, len(lap_column)):
            time_cell = time_column[j] if j < len(time_column) else None
            state = _step(state, lap_column[j], lap_column[j - 1], time_cell)

        dropped = state.lap_counter - len(state.markers)
        if num_laps and dropped > 0:
            _logger.debug(
                "Ignored %d lap boundaries beyond the declared %d laps", dropped, num_laps
            )

        return LapScan(markers=state.markers, warnings=state.warnings)
