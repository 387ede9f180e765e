"""Bosch export → Pi Toolbox ASCII converter.

Usage:
  bosch2pi session.txt
  bosch2pi session.txt -namemap names.txt -outinginfo outing.txt \\
      -constants constants.txt -lapctr lapctr

Writes ``session.pi.txt`` next to the input.  Flag names are
case-insensitive.  Defaults can be set in ``.env`` (see ``bosch2pi.config``).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from bosch2pi.config import Settings
from bosch2pi.conversion.models import DEFAULT_LAP_COLUMN, PiDocument, WriteResult
from bosch2pi.conversion.writer import OutputWriteError, PiFileWriter, output_path_for
from bosch2pi.loaders.keyvalue import KeyValueReadError, load_first_wins, load_ordered_pairs
from bosch2pi.loaders.table import TableLoader, TableReadError

_logger = logging.getLogger(__name__)

USAGE = (
    "Usage: bosch2pi <data_file> [-namemap <name_map_file>] [-outinginfo <outing_file>] "
    "[-constants <constants_file>] [-lapctr <lap_column_name>]"
)

# flag → (Options field, what the flag's value is)
_VALUE_FLAGS: dict[str, tuple[str, str]] = {
    "-namemap":    ("name_map_path", "a filename"),
    "-outinginfo": ("outing_path", "a filename"),
    "-constants":  ("constants_path", "a filename"),
    "-lapctr":     ("lap_column_name", "a column name"),
}

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """Raised for malformed command lines.  An empty message means "show usage only"."""


class ConversionError(Exception):
    """Raised when a conversion has to stop; the message is shown to the user."""


@dataclass
class Options:
    infile: str
    name_map_path: str | None = None
    outing_path: str | None = None
    constants_path: str | None = None
    lap_column_name: str = DEFAULT_LAP_COLUMN
    verbose: bool = False


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(
        prog="bosch2pi",
        description="Convert a Bosch logger export to Pi Toolbox ASCII",
        allow_abbrev=False,
        exit_on_error=False,
    )
    ap.add_argument("positional", nargs="*", metavar="data_file", help="Tab-separated logger export")
    for flag, (dest, _) in _VALUE_FLAGS.items():
        ap.add_argument(flag, dest=dest, default=None)
    ap.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    return ap


_SWITCHES = frozenset({"-v", "--verbose", "-h", "--help"})


def _normalize_flags(argv: Sequence[str]) -> list[str]:
    """Rewrite *argv* so argparse binds every token the way the converter reads it.

    Value flags are case-insensitive and take the next token verbatim, even
    one starting with ``-``; they are passed on as ``-flag=value``.  Any other
    token apart from the switches is a data file, so positionals go after
    ``--``.
    """
    options: list[str] = []
    positionals: list[str] = []
    pending: str | None = None
    for arg in argv:
        if pending is not None:
            options.append(f"{pending}={arg}")
            pending = None
        elif arg.lower() in _VALUE_FLAGS:
            pending = arg.lower()
        elif arg in _SWITCHES:
            options.append(arg)
        else:
            positionals.append(arg)
    if pending is not None:
        options.append(pending)  # argparse reports the missing value
    return [*options, "--", *positionals]


def parse_options(argv: Sequence[str], settings: Settings | None = None) -> Options:
    """Parse *argv* (without the program name) into :class:`Options`.

    Raises
    ------
    UsageError
        If a flag is missing its value or no data file is given.
    """
    settings = settings or Settings()
    try:
        ns, _ = _build_parser().parse_known_args(_normalize_flags(argv))
    except argparse.ArgumentError as exc:
        flag = exc.argument_name or ""
        if flag in _VALUE_FLAGS:
            raise UsageError(f"{flag} requires {_VALUE_FLAGS[flag][1]}.") from exc
        raise UsageError(str(exc)) from exc

    if not ns.positional:
        raise UsageError("")

    return Options(
        infile=ns.positional[0],
        name_map_path=ns.name_map_path,
        outing_path=ns.outing_path,
        constants_path=ns.constants_path,
        lap_column_name=ns.lap_column_name or settings.lap_column_name,
        verbose=ns.verbose,
    )


def _require_file(path: str, label: str) -> None:
    if not os.path.isfile(path):
        raise ConversionError(f"{label} not found: {path}")


def convert(options: Options, settings: Settings | None = None) -> WriteResult:
    """Run one conversion.  All input files are checked before the output is touched.

    Raises
    ------
    ConversionError
        On a missing or unreadable input, an empty export or a failed write.
    """
    settings = settings or Settings()

    _require_file(options.infile, "File")
    _logger.info("Converting %s", options.infile)

    name_map: dict[str, str] = {}
    if options.name_map_path:
        _require_file(options.name_map_path, "Name map file")
        try:
            name_map = load_first_wins(options.name_map_path)
        except KeyValueReadError as exc:
            raise ConversionError(f"Failed to read name map file: {exc}") from exc

    outing_info: list[tuple[str, str]] = []
    if options.outing_path:
        _require_file(options.outing_path, "Outing info file")
        try:
            outing_info = load_ordered_pairs(options.outing_path)
        except KeyValueReadError as exc:
            raise ConversionError(f"Failed to read outing info file: {exc}") from exc

    constants: list[tuple[str, str]] = []
    if options.constants_path:
        _require_file(options.constants_path, "Constants file")
        try:
            constants = load_ordered_pairs(options.constants_path)
        except KeyValueReadError as exc:
            raise ConversionError(f"Failed to read constants file: {exc}") from exc

    try:
        table = TableLoader().load(options.infile)
    except TableReadError as exc:
        raise ConversionError(f"Failed to read input file: {exc}") from exc
    if table is None or not table.columns:
        raise ConversionError("Input file contains no data.")

    document = PiDocument(
        table=table,
        name_map=name_map,
        outing_info=outing_info,
        constants=constants,
        lap_column_name=options.lap_column_name,
    )
    outfile = output_path_for(options.infile)
    try:
        return PiFileWriter(newline=settings.newline).write(document, outfile)
    except OutputWriteError as exc:
        raise ConversionError(f"Failed to write output file: {exc}") from exc


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    settings = Settings.from_env()

    try:
        options = parse_options(sys.argv[1:] if argv is None else argv, settings)
    except UsageError as exc:
        if str(exc):
            print(f"Error: {exc}")
        print(USAGE)
        return EXIT_USAGE

    logging.basicConfig(
        level=logging.INFO if options.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = convert(options, settings)
    except ConversionError as exc:
        print(exc)
        return EXIT_FAILURE

    if result.warnings:
        print(f"{len(result.warnings)} warning(s) while converting; see log output.")
    print(f"Wrote {result.output_path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
