"""Tests for key/value metadata file loading."""

from __future__ import annotations

import pytest

from bosch2pi.loaders.keyvalue import (
    KEY_VALUE_SEPARATORS,
    KeyValueReadError,
    load_first_wins,
    load_ordered_pairs,
    parse_key_value_lines,
    split_pair,
)


def test_separator_precedence_is_explicit():
    assert KEY_VALUE_SEPARATORS == ("->", "\t", "=", ",", ":")


@pytest.mark.parametrize(
    ("line", "pair"),
    [
        ("vCar -> Speed", ("vCar", "Speed")),
        ("vCar\tSpeed", ("vCar", "Speed")),
        ("Mass = 650", ("Mass", "650")),
        ("Track, Spa", ("Track", "Spa")),
        ("Driver: A. Driver", ("Driver", "A. Driver")),
        # earlier separators win over later ones present in the same line
        ("a=b -> c", ("a=b", "c")),
        ("Time = 12:30", ("Time", "12:30")),
        ("Note, x: y", ("Note", "x: y")),
        # split once
        ("k = v = w", ("k", "v = w")),
    ],
)
def test_split_pair(line, pair):
    assert split_pair(line) == pair


@pytest.mark.parametrize(
    "line",
    ["", "   ", "# comment", "   # indented comment", "no separator here", "= value", "key =", " # -> x"],
)
def test_split_pair_skips(line):
    assert split_pair(line) is None


def test_trailing_comment_is_stripped():
    assert split_pair("Mass = 650  # kg") == ("Mass", "650")


def test_line_with_only_trailing_comment_content_skipped():
    assert split_pair("key # = value") is None


def test_parse_key_value_lines_keeps_order():
    lines = ["b = 2", "# skip", "a = 1", "b = 3"]
    assert list(parse_key_value_lines(lines)) == [("b", "2"), ("a", "1"), ("b", "3")]


def test_load_ordered_pairs_keeps_duplicates(tmp_path):
    path = tmp_path / "outing.txt"
    path.write_text("Driver: A\nNote: one\nNote: two\n", encoding="utf-8")
    assert load_ordered_pairs(str(path)) == [("Driver", "A"), ("Note", "one"), ("Note", "two")]


def test_load_first_wins(tmp_path):
    path = tmp_path / "names.txt"
    path.write_text("vCar -> Speed\nvCar -> Other\nnEngine -> RPM\n", encoding="utf-8")
    assert load_first_wins(str(path)) == {"vCar": "Speed", "nEngine": "RPM"}


def test_keys_are_case_sensitive(tmp_path):
    path = tmp_path / "names.txt"
    path.write_text("vcar -> a\nvCar -> b\n", encoding="utf-8")
    assert load_first_wins(str(path)) == {"vcar": "a", "vCar": "b"}


def test_load_handles_bom_and_crlf(tmp_path):
    path = tmp_path / "names.txt"
    path.write_bytes("\ufeffvCar -> Speed\r\nnEngine -> RPM\r\n".encode("utf-8"))
    assert load_first_wins(str(path)) == {"vCar": "Speed", "nEngine": "RPM"}


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(KeyValueReadError, match="not found"):
        load_ordered_pairs(str(tmp_path / "missing.txt"))
