"""Reading .cub map files and the line helpers the map parser relies on."""

from __future__ import annotations

import os
from itertools import takewhile
from pathlib import Path
from typing import Iterable, Optional, Sequence

WHITESPACE = "\t\n\v\f\r "
VOID = "2"
_DIGITS = frozenset("0123456789")
_HEADER_TOKENS = ("NO", "SO", "WE", "EA", "F", "C")


class MapError(Exception):
    """Raised when a map file is missing or malformed."""


def is_blank(text: str) -> bool:
    """Return True if the text holds only whitespace (or nothing)."""
    return all(char in WHITESPACE for char in text)


def count_blank(lines: Iterable[str]) -> int:
    """Count the blank lines at the start of ``lines``."""
    return sum(1 for _ in takewhile(is_blank, lines))


def ws_count(text: str) -> int:
    """Count the leading whitespace characters of ``text``."""
    return len(text) - len(text.lstrip(WHITESPACE))


def longest_line(lines: Iterable[str]) -> int:
    """Return the length of the longest line, 0 when there are none."""
    return max((len(line) for line in lines), default=0)


def int_len(n: int) -> int:
    """Return the number of decimal digits of ``n``; zero has none."""
    n = abs(n)
    digits = 0
    while n:
        n //= 10
        digits += 1
    return digits


def has_suffix(text: str, suffix: str) -> bool:
    """Return True if ``text`` ends with ``suffix``."""
    return text.endswith(suffix)


def check_map_path(path: str | os.PathLike) -> Path:
    """Check that ``path`` names a readable .cub file and return it."""
    if not has_suffix(os.fspath(path), ".cub"):
        raise MapError("Wrong path or not a .cub file")
    map_path = Path(path)
    try:
        with map_path.open("rb"):
            pass
    except OSError as exc:
        raise MapError("Wrong path or not a .cub file") from exc
    return map_path


def split_lines(raw: str) -> list[str]:
    """Split raw file text into lines; text after the last newline is dropped."""
    return raw.split("\n")[:-1]


def read_raw_map(path: str | os.PathLike) -> list[str]:
    """Read a .cub file and return its newline-terminated lines."""
    map_path = check_map_path(path)
    try:
        raw = map_path.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        raise MapError("Wrong path or not a .cub file") from exc
    return split_lines(raw)


def del_blank(lines: Sequence[str]) -> list[str]:
    """Return ``lines`` without its leading blank lines."""
    return list(lines[count_blank(lines):])


def fill_blank(lines: Sequence[str]) -> list[str]:
    """Pad every line to the longest one, turning spaces and padding into void cells."""
    width = longest_line(lines)
    return [line.replace(" ", VOID).ljust(width, VOID) for line in lines]


def is_num_ws(text: str) -> bool:
    """Return True if the text holds at least one digit and only digits or whitespace."""
    has_digit = any(char in _DIGITS for char in text)
    return has_digit and all(char in _DIGITS or char in WHITESPACE for char in text)


def first_map_line(lines: Sequence[str]) -> Optional[int]:
    """Return the index of the first line made of digits and whitespace, or None."""
    return next((index for index, line in enumerate(lines) if is_num_ws(line)), None)


def has_letter(text: str) -> bool:
    """Return True if the line holds one of the header identifiers."""
    return any(token in text for token in _HEADER_TOKENS)


def check_order(lines: Sequence[str]) -> Optional[int]:
    """Ensure no header line follows the map; return the first map line index."""
    first = first_map_line(lines)
    limit = -1 if first is None else first
    for index, line in enumerate(lines):
        if has_letter(line) and index > limit:
            raise MapError("Wrong order")
    return first