"""Parsing of .cub map contents: textures, colours and map checks."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence

from raycube.mapfile import (
    VOID,
    MapError,
    check_order,
    del_blank,
    fill_blank,
    has_suffix,
    int_len,
    read_raw_map,
    ws_count,
)

FLOOR = 0
CEILING = 1
PLAYER_CHARS = "NSEW"
_MAP_CHARS = frozenset("01NSEW D")
_COLOR_CHARS = frozenset("0123456789,\t\n\v\f\r ")
_ATOI = re.compile(r"[\t\n\v\f\r ]*(\+(?!-))?(-)?([0-9]*)")
_NEIGHBOURS = tuple(
    (di, dj) for di in (-1, 0, 1) for dj in (-1, 0, 1) if (di, dj) != (0, 0)
)


class Wall(IntEnum):
    """Texture slots, in the order the map identifiers fill them."""

    NO = 0
    EA = 1
    WE = 2
    SO = 3


@dataclass
class CubConfig:
    """Everything a parsed .cub file provides."""

    grid: list[str]
    texture_paths: tuple[str, ...]
    floor: int
    ceiling: int


def direction_index(text: str) -> Optional[Wall]:
    """Return the texture slot named at the start of ``text``, or None."""
    for wall in (Wall.NO, Wall.SO, Wall.WE, Wall.EA):
        if text.startswith(wall.name):
            return wall
    return None


def color_index(char: str) -> Optional[int]:
    """Return FLOOR for 'F', CEILING for 'C', otherwise None."""
    return {"F": FLOOR, "C": CEILING}.get(char)


def is_player_char(char: str) -> bool:
    """Return True for a player start cell."""
    return len(char) == 1 and char in PLAYER_CHARS


def numbers_check(text: str) -> int:
    """Count the runs of digits in ``text``."""
    return len(re.findall(r"[0-9]+", text))


def color_check(text: str) -> bool:
    """Return True if the text holds three numbers split by two commas."""
    if numbers_check(text) != 3:
        return False
    if any(char not in _COLOR_CHARS for char in text):
        return False
    return text.count(",") == 2


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    value = int(match.group(3) or "0")
    return -value if match.group(2) else value


def parse_color(line: str, offset: int) -> int:
    """Read the three components following the identifier at ``offset``.

    Returns the packed 0xRRGGBB value; raises MapError if a component
    falls outside 0..255.
    """
    index = offset + 1
    components = []
    for position in range(3):
        value = _atoi(line[index:])
        components.append(value)
        if position < 2:
            index += ws_count(line[index:])
            index += int_len(value)
            index += ws_count(line[index:])
            index += 1
    if any(not 0 <= value <= 255 for value in components):
        raise MapError("Error colors")
    red, green, blue = components
    return (red << 16) + (green << 8) + blue


def extract_colors(lines: Sequence[str]) -> tuple[tuple[int, int], list[str]]:
    """Pull the floor and ceiling lines out of ``lines``.

    Returns ((floor, ceiling), remaining_lines).
    """
    colors = [0, 0]
    found = 0
    remaining = []
    for line in lines:
        offset = ws_count(line)
        slot = color_index(line[offset:offset + 1])
        if slot is None:
            remaining.append(line)
            continue
        if not color_check(line[offset + 2:]):
            raise MapError("Error colors")
        colors[slot] = parse_color(line, offset)
        found += 1
    if found != 2:
        raise MapError("Error colors")
    return (colors[FLOOR], colors[CEILING]), remaining


def extract_texture_paths(lines: Sequence[str]) -> tuple[tuple[str, ...], list[str]]:
    """Pull the four wall texture lines out of ``lines``.

    Returns (paths ordered by Wall, remaining_lines).
    """
    paths: list[Optional[str]] = [None] * len(Wall)
    remaining = []
    for line in lines:
        offset = ws_count(line)
        wall = direction_index(line[offset:])
        if wall is None:
            remaining.append(line)
            continue
        offset += ws_count(line[offset + 2:])
        if paths[wall] is not None:
            raise MapError("Wrong texture path")
        start = offset + 2
        stop = start + len(line) - 3 if len(line) >= 3 else len(line)
        paths[wall] = line[start:stop]
    if any(path is None for path in paths):
        raise MapError("Wrong texture path")
    return tuple(paths), remaining


def check_texture_files(paths: Sequence[str]) -> None:
    """Ensure every texture file can be opened and is an .xpm file."""
    for path in paths:
        try:
            with open(path, "rb"):
                pass
        except OSError as exc:
            raise MapError("Wrong texture path") from exc
        if not has_suffix(os.fspath(path), ".xpm"):
            raise MapError("Wrong texture path")


def check_one_player(lines: Sequence[str]) -> None:
    """Ensure the map holds only known characters and exactly one player."""
    chars = "".join(lines)
    if set(chars) - _MAP_CHARS:
        raise MapError("Only one player is allowed")
    if sum(char in PLAYER_CHARS for char in chars) != 1:
        raise MapError("Only one player is allowed")


def _surrounded(grid: Sequence[str], row: int, col: int) -> bool:
    for di, dj in _NEIGHBOURS:
        i, j = row + di, col + dj
        if i < 0 or j < 0 or i >= len(grid) or j >= len(grid[i]):
            return False
        if grid[i][j] == VOID:
            return False
    return True


def check_closed(grid: Sequence[str], bonus: bool = False) -> None:
    """Ensure every floor and player cell is enclosed by walls."""
    allowed = "NSEW120" + ("D" if bonus else "")
    for i, row in enumerate(grid):
        for j, cell in enumerate(row):
            if cell not in allowed:
                raise MapError("Map is not closed")
            if (cell == "0" or cell in PLAYER_CHARS) and not _surrounded(grid, i, j):
                raise MapError("Map is not closed")


def check_multimap(grid: Sequence[str]) -> None:
    """Reject a map split in two by a fully empty row."""
    if not grid:
        return
    width = len(grid[0])
    if any(row.count(VOID) == width for row in grid):
        raise MapError("Multimap detected")


def parse_map(path: str | os.PathLike, bonus: bool = False) -> CubConfig:
    """Read and validate a .cub file."""
    lines = read_raw_map(path)
    check_order(lines)
    paths, lines = extract_texture_paths(lines)
    check_texture_files(paths)
    (floor, ceiling), lines = extract_colors(lines)
    check_one_player(lines)
    grid = fill_blank(del_blank(lines))
    check_closed(grid, bonus)
    check_multimap(grid)
    return CubConfig(grid=grid, texture_paths=paths, floor=floor, ceiling=ceiling)