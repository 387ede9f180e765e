"""Input loaders for logger exports and key/value metadata files.

Public API
----------
TableLoader         - tab-separated export → column-major Table
TableReadError      - raised when the export cannot be read
load_first_wins     - key/value file → dict (first definition wins)
load_ordered_pairs  - key/value file → ordered list of pairs
KeyValueReadError   - raised when a key/value file cannot be read
"""

from bosch2pi.loaders.keyvalue import (
    KEY_VALUE_SEPARATORS,
    KeyValueReadError,
    load_first_wins,
    load_ordered_pairs,
    parse_key_value_lines,
)
from bosch2pi.loaders.table import TableLoader, TableReadError

__all__ = [
    "KEY_VALUE_SEPARATORS",
    "KeyValueReadError",
    "TableLoader",
    "TableReadError",
    "load_first_wins",
    "load_ordered_pairs",
    "parse_key_value_lines",
]
