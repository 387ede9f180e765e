"""Convert a Bosch logger export to a Pi Toolbox ASCII file.

Usage:
  uv run python scripts/convert_log.py session.txt \\
      -namemap names.txt \\
      -outinginfo outing.txt \\
      -constants constants.txt \\
      -lapctr lapctr

Output is written to ``session.pi.txt`` next to the input file.
"""

from __future__ import annotations

import sys

from bosch2pi.cli import main

if __name__ == "__main__":
    sys.exit(main())
