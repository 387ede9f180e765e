"""Bosch export → Pi Toolbox ASCII conversion."""

from bosch2pi.conversion.laps import LapMarkerExtractor
from bosch2pi.conversion.models import (
    ChannelHeader,
    LapScan,
    PiDocument,
    Table,
    WriteResult,
)
from bosch2pi.conversion.units import UnitNormalizer
from bosch2pi.conversion.writer import OutputWriteError, PiFileWriter, output_path_for

__all__ = [
    "ChannelHeader",
    "LapMarkerExtractor",
    "LapScan",
    "OutputWriteError",
    "PiDocument",
    "PiFileWriter",
    "Table",
    "UnitNormalizer",
    "WriteResult",
    "output_path_for",
]
