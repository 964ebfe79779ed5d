"""The round, rotating minimap drawn in the corner of the screen."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from raycube.framebuffer import FrameBuffer
from raycube.player import Player

MINIMAP_SIZE = 9
MINIMAP_SCALE = 20
OFFSET_X = 40
OFFSET_Y = 40
COLORS = (0xFAF3DD, 0xAD6A44, 0x2F3038, 0x19D043, 0xFFFFFF)
OUTSIDE = -1
PLAYER_MARK = 30
_PAINT_CODES = (4, 8, 16, 32, 64)


def map_width(grid: Sequence[str]) -> int:
    """Return the length of the first map row."""
    return len(grid[0])


def map_height(grid: Sequence[str]) -> int:
    """Return the number of map rows."""
    return len(grid)


class Minimap:
    """Circular window onto the map around the player, turned with the view."""

    def __init__(self, size: int = MINIMAP_SIZE, scale: int = MINIMAP_SCALE) -> None:
        self.size = size
        self.scale = scale
        self.draw_size = size * scale
        self.center = self.draw_size // 2
        self.colors = COLORS
        self.angle = 0.0
        shape = (self.draw_size + 2, self.draw_size + 2)
        self.circle = np.zeros(shape, dtype=np.int64)
        self.coords = np.zeros(shape, dtype=np.int64)
        self.filled = np.zeros(shape, dtype=np.int64)
        self.rotated = np.zeros(shape, dtype=np.int64)
        self._draw_circle()
        self._fill_circle()
        self._add_border()

    def _plot_octants(self, x: int, y: int) -> None:
        n, c = self.draw_size, self.center
        points = (
            (c + x, c + y), (c + y, c + x), (c - y, c + x), (c - x, c + y),
            (c - x, c - y), (c - y, c - x), (c + y, c - x), (c + x, c - y),
        )
        for px, py in points:
            if 0 <= px < n and 0 <= py < n:
                self.circle[px, py] = 1

    def _draw_circle(self) -> None:
        radius_term = (self.draw_size // 2) << 1
        x, y = self.draw_size // 2 - 5, 0
        dx = dy = 1
        err = dx - radius_term
        while True:
            self._plot_octants(x, y)
            if x < y:
                break
            if err <= 0:
                y += 1
                err += dy
                dy += 2
            if err > 0:
                x -= 1
                dx += 2
                err += dx - radius_term

    def _fill_circle(self) -> None:
        n = self.draw_size
        for x in range(n):
            row = self.circle[x]
            for y in range(n // 2):
                if row[y] == 1 and row[y + 1] == 0:
                    y += 1
                    while y < len(row) and row[y] == 0:
                        row[y] = 1
                        y += 1
                    break

    def _add_border(self) -> None:
        n, half = self.draw_size, self.draw_size // 2
        m = self.circle
        for x in range(n):
            for y in range(n - 1):
                if m[x, y] != 1:
                    continue
                candidates = (
                    (x - 1 > 0, x - 1, y),
                    (x - 2 > 0, x - 2, y),
                    (y - 1 > 0, x, y - 1),
                    (y - 2 > 0, x, y - 2),
                    (y + 1 < n - 1, x, y + 1),
                    (y + 1 < n - 1, x, y + 2),
                    (x + 1 > half, x + 1, y),
                    (x + 2 > half, x + 2, y),
                )
                for allowed, i, j in candidates:
                    if allowed and m[i, j] == 0:
                        m[i, j] = 2

    @staticmethod
    def _coord_value(row: str, cx: int, cy: int, px: int, py: int) -> int:
        if not 0 <= cy < len(row):
            return OUTSIDE
        cell = row[cy]
        is_player = cx == px and cy == py
        if cell in "NSWE" and not is_player:
            return 0
        if is_player:
            return PLAYER_MARK
        return ord(cell) - ord("0")

    def build_coords(self, grid: Sequence[str], player: Player) -> None:
        """Sample the map cells around the player into the coordinate matrix."""
        n = self.draw_size
        half_area = (self.size - 1) // 2
        height = map_height(grid)
        px, py = int(player.pos_x), int(player.pos_y)
        for mx in range(n):
            cx = px + ((n - mx) // self.scale - half_area)
            if cx < 0 or cx > height - 1:
                self.coords[mx, :n] = OUTSIDE
                continue
            row = grid[cx]
            for my in range(n):
                cy = py + (my // self.scale - half_area)
                self.coords[mx, my] = self._coord_value(row, cx, cy, px, py)

    def render(self, player: Player) -> None:
        """Colour-code the sampled cells and turn them with the player's view."""
        n, c = self.draw_size, self.center
        coords = self.coords[:n, :n]
        circle = self.circle[:n, :n]
        inside = circle == 1
        self.filled[:n, :n] = np.select(
            [
                (coords == 0) & inside,
                (coords == 1) & inside,
                (coords == PLAYER_MARK) & inside,
                circle == 2,
            ],
            [4, 8, 4, 64],
            default=16,
        )
        self.angle = math.atan2(player.dir_x, player.dir_y)
        cos_a, sin_a = math.cos(self.angle), math.sin(self.angle)
        xs, ys = np.indices((n, n))
        new_x = ((xs - c) * cos_a - (ys - c) * sin_a + c).astype(np.int64)
        new_y = ((xs - c) * sin_a + (ys - c) * cos_a + c).astype(np.int64)
        limit = self.filled.shape[0] - 1
        source = self.filled[np.clip(new_x, 0, limit), np.clip(new_y, 0, limit)]
        values = np.where(circle != 0, source, 0)
        self.rotated[:n, :n] = values[::-1, ::-1]

    def paint(self, frame: FrameBuffer) -> None:
        """Draw the rotated minimap into ``frame``."""
        n = self.draw_size
        for code, color in zip(_PAINT_CODES, self.colors):
            xs, ys = np.nonzero(self.rotated[:n, :n] == code)
            px, py = xs + OFFSET_X, ys + OFFSET_Y
            keep = (px > 0) & (px < frame.width) & (py > 0) & (py < frame.height)
            frame.pixels[py[keep], px[keep]] = color

    def draw(self, frame: FrameBuffer, grid: Sequence[str], player: Player) -> None:
        """Sample, render and paint the minimap in one go."""
        self.build_coords(grid, player)
        self.render(player)
        self.paint(frame)