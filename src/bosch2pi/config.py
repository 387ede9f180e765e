"""Runtime settings read from the environment.

``bosch2pi.cli`` calls ``load_dotenv()`` first, so a ``.env`` file in the
working directory can provide any of:

  BOSCH2PI_LAPCTR     default lap-counter channel name (``lapctr``)
  BOSCH2PI_LOG_LEVEL  logging level name (``WARNING``)
  BOSCH2PI_NEWLINE    ``crlf`` or ``lf`` output line terminator (``crlf``)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from bosch2pi.conversion.models import DEFAULT_LAP_COLUMN

_NEWLINES: dict[str, str] = {"crlf": "\r\n", "lf": "\n"}


@dataclass(frozen=True)
class Settings:
    lap_column_name: str = DEFAULT_LAP_COLUMN
    log_level: int = logging.WARNING
    newline: str = "\r\n"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *environ* (defaults to ``os.environ``).

        Unknown level or newline names fall back to the defaults.
        """
        env = os.environ if environ is None else environ

        level_name = env.get("BOSCH2PI_LOG_LEVEL", "").strip().upper()
        level = logging.getLevelName(level_name) if level_name else logging.WARNING
        if not isinstance(level, int):
            level = logging.WARNING

        newline = _NEWLINES.get(env.get("BOSCH2PI_NEWLINE", "").strip().lower(), "\r\n")

        return cls(
            lap_column_name=env.get("BOSCH2PI_LAPCTR", "").strip() or DEFAULT_LAP_COLUMN,
            log_level=level,
            newline=newline,
        )
