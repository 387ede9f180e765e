"""PiFileWriter: serializes a PiDocument as a Pi Toolbox Versioned ASCII Data Set."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Iterator
from pathlib import Path

from bosch2pi.conversion.laps import LapMarkerExtractor
from bosch2pi.conversion.models import ChannelHeader, LapScan, PiDocument, WriteResult
from bosch2pi.conversion.numbers import format_number, parse_float
from bosch2pi.conversion.units import UnitNormalizer

_logger = logging.getLogger(__name__)

PI_ENCODING = "cp1252"
OUTPUT_SUFFIX = ".pi.txt"

_SYSTEM_DETAILS = "Bosch"
_LAP_EVENT = "End of lap\tToolbox Added\tDRV\tEnd of lap"


class OutputWriteError(Exception):
    """Raised when the output file cannot be written."""


def output_path_for(infile: str) -> str:
    """Return *infile* with its last extension replaced by ``.pi.txt``."""
    return os.path.splitext(infile)[0] + OUTPUT_SUFFIX


class _Collector:
    """Mutable side channel filled while lines are generated."""

    def __init__(self) -> None:
        self.lap_column_index: int | None = None
        self.scan = LapScan()
        self.warnings: list[str] = []


class PiFileWriter:
    """Writes Pi Toolbox ASCII v2 files.

    Parameters
    ----------
    newline:
        Line terminator used in the output file.
    unit_normalizer, lap_extractor:
        Injected for testability; default to the stock implementations.
    """

    def __init__(
        self,
        newline: str = "\r\n",
        unit_normalizer: UnitNormalizer | None = None,
        lap_extractor: LapMarkerExtractor | None = None,
    ) -> None:
        self._newline = newline
        self._units = unit_normalizer or UnitNormalizer()
        self._laps = lap_extractor or LapMarkerExtractor()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def iter_lines(self, document: PiDocument) -> Iterator[str]:
        """Yield the output document line by line, without terminators."""
        yield from self._iter_lines(document, _Collector())

    def format(self, document: PiDocument) -> str:
        """Return the full output document as a string."""
        return "".join(line + self._newline for line in self.iter_lines(document))

    def write(self, document: PiDocument, path: str) -> WriteResult:
        """Write *document* to *path* (code page 1252), replacing any existing file.

        The document is streamed into a temporary file next to *path* which
        only replaces *path* once fully written.

        Raises
        ------
        OutputWriteError
            If the file cannot be created, encoded or moved into place.
        """
        collector = _Collector()
        target = Path(path)

        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
            )
        except OSError as exc:
            raise OutputWriteError(f"Could not create {path!r}: {exc}") from exc

        try:
            with open(fd, "w", encoding=PI_ENCODING, errors="replace", newline="") as fh:
                for line in self._iter_lines(document, collector):
                    fh.write(line)
                    fh.write(self._newline)
            os.chmod(tmp_name, _output_mode(target))
            os.replace(tmp_name, target)
        except (OSError, UnicodeError) as exc:
            _remove_quietly(tmp_name)
            raise OutputWriteError(f"Could not write {path!r}: {exc}") from exc
        except BaseException:
            _remove_quietly(tmp_name)
            raise

        _logger.info(
            "Wrote %s: %d channels, %d lap markers",
            path, document.table.channel_count, len(collector.scan.markers),
        )
        return WriteResult(
            output_path=str(path),
            channel_count=document.table.channel_count,
            lap_column_index=collector.lap_column_index,
            markers=collector.scan.markers,
            warnings=collector.warnings,
        )

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _iter_lines(self, document: PiDocument, collector: _Collector) -> Iterator[str]:
        yield "PiToolboxVersionedASCIIDataSet"
        yield "Version\t2"
        yield ""
        yield from self._outing_block(document)
        yield ""
        yield from self._constant_block(document, collector)
        yield from self._channel_blocks(document, collector)
        yield from self._event_block(document, collector)

    def _outing_block(self, document: PiDocument) -> Iterator[str]:
        yield "{OutingInformation}"
        for key, value in document.outing_info:
            yield f"{key}\t{value}"
        yield f"SystemDetails\t{_SYSTEM_DETAILS}"
        yield "FirstLapNumber\t0"

    def _constant_block(self, document: PiDocument, collector: _Collector) -> Iterator[str]:
        yield "{ConstantBlock}"
        yield "Name\tValue\tComment"
        for key, value in document.constants:
            if parse_float(value) is None:
                message = f"Dropped non-numeric constant {key}={value!r}"
                _logger.warning(message)
                collector.warnings.append(message)
                continue
            yield f"{key}\t{value}\t"

    def _channel_blocks(self, document: PiDocument, collector: _Collector) -> Iterator[str]:
        columns = document.table.columns
        if not columns:
            return
        time_column = columns[0]
        # shared by every channel block
        times = [_format_time(cell) for cell in time_column]

        for i in range(1, len(columns)):
            column = columns[i]
            header = ChannelHeader.parse(column[0] if column else "")
            if header.name == document.lap_column_name:
                collector.lap_column_index = i

            units = self._units.normalize(header.units, header.name)
            display_name = document.name_map.get(header.name, header.name)

            yield ""
            yield "{ChannelBlock}"
            yield f"Time\t{display_name}{units}"
            for j in range(1, len(column)):
                time_text = times[j] if j < len(times) else ""
                yield f"{time_text}\t{column[j]}"

    def _event_block(self, document: PiDocument, collector: _Collector) -> Iterator[str]:
        if collector.lap_column_index is None:
            return
        columns = document.table.columns
        collector.scan = self._laps.extract(columns[collector.lap_column_index], columns[0])
        collector.warnings.extend(collector.scan.warnings)
        if not collector.scan.markers:
            return

        yield ""
        yield "{EventBlock}"
        yield "Time\tName\tCategory\tSource\tMessage"
        for marker in collector.scan.markers:
            yield f"{format_number(marker)}\t{_LAP_EVENT}"


def _format_time(cell: str) -> str:
    value = parse_float(cell)
    return cell if value is None else format_number(value)


def _output_mode(target: Path) -> int:
    """Mode for the finished file: the replaced file's, else what ``open()`` would give.

    ``mkstemp`` creates files as 0o600.  ``os.umask`` can only be read by
    setting it, so it is restored immediately; the converter is single-threaded.
    """
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _remove_quietly(name: str) -> None:
    try:
        os.remove(name)
    except FileNotFoundError:
        pass
