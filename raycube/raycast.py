"""Ray casting of the wall columns, plus door aiming and toggling."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import MutableSequence, Optional, Sequence

import numpy as np

from raycube.framebuffer import HEIGHT, WIDTH, FrameBuffer
from raycube.player import Player

DOOR_TEXTURE = 4
CENTER_COLUMN = WIDTH // 2
_MASK32 = 0xFFFFFFFF


@dataclass
class DoorAim:
    """What the centre of the view is aimed at, door-wise."""

    aiming_at_door: bool = False
    aiming_at_open_door: bool = False
    door_x: int = -1
    door_y: int = -1

    @property
    def show_prompt(self) -> bool:
        """True when the open/close hint should be shown."""
        return self.aiming_at_door or self.aiming_at_open_door


@dataclass(frozen=True)
class RayHit:
    """Where the ray cast for one screen column stopped."""

    x: int
    map_x: int
    map_y: int
    side: int
    perp_dist: float
    wall_x: float
    hit: int


@dataclass(frozen=True)
class WallSlice:
    """The vertical strip of wall drawn for one screen column."""

    x: int
    line_height: int
    y0: int
    y1: int
    tex_x: int
    span: int
    off: int


def _delta(direction: float) -> float:
    return math.inf if direction == 0 else abs(1 / direction)


def _cell(grid: Sequence[str], i: int, j: int) -> Optional[str]:
    if 0 <= i < len(grid) and 0 <= j < len(grid[i]):
        return grid[i][j]
    return None


def cast_ray(
    grid: Sequence[str],
    player: Player,
    x: int,
    bonus: bool = False,
    aim: Optional[DoorAim] = None,
) -> RayHit:
    """Walk the grid from the player along the ray of screen column ``x``.

    The returned side is the texture slot of the face that was hit.
    Cells outside the grid count as walls.
    """
    camera_x = 2 * x / WIDTH - 1
    ray_x = player.dir_x + player.plane_x * camera_x
    ray_y = player.dir_y + player.plane_y * camera_x
    map_x, map_y = int(player.pos_x), int(player.pos_y)
    delta_x, delta_y = _delta(ray_x), _delta(ray_y)

    if ray_x < 0:
        step_x = -1
        side_x = (player.pos_x - map_x) * delta_x
    else:
        step_x = 1
        side_x = (map_x + 1.0 - player.pos_x) * delta_x
    if ray_y < 0:
        step_y = -1
        side_y = (player.pos_y - map_y) * delta_y
    else:
        step_y = 1
        side_y = (map_y + 1.0 - player.pos_y) * delta_y

    player_cell = _cell(grid, int(player.pos_x), int(player.pos_y))
    hit = 0
    side = 0
    while hit == 0:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        cell = _cell(grid, map_x, map_y)
        if bonus and aim is not None:
            if cell == "O" and x == CENTER_COLUMN and player_cell != "O":
                distance = side_x - delta_x if side == 0 else side_y - delta_y
                if distance < 1.0:
                    aim.aiming_at_open_door = True
            if cell in ("D", "O"):
                aim.door_x, aim.door_y = map_x, map_y
        if cell is None or cell == "1":
            hit = 1
        elif bonus and cell == "D":
            hit = 2

    perp = side_x - delta_x if side == 0 else side_y - delta_y
    if side == 1 and step_y == -1:
        side = 2
    if side == 0 and step_x == 1:
        side = 3
    if side in (0, 3):
        wall_x = player.pos_y + perp * ray_y
    else:
        wall_x = player.pos_x + perp * ray_x
    wall_x -= math.floor(wall_x)
    return RayHit(
        x=x, map_x=map_x, map_y=map_y, side=side,
        perp_dist=perp, wall_x=wall_x, hit=hit,
    )


def wall_slice(
    hit: RayHit,
    tex_size: int,
    walk_offset: int = 0,
    aim: Optional[DoorAim] = None,
) -> WallSlice:
    """Work out the screen rows and texture window of a column's wall."""
    distance = hit.perp_dist
    line_height = int(HEIGHT / distance) if distance > 0 else HEIGHT * HEIGHT
    half = line_height // 2
    y0 = max(-half + HEIGHT // 2 + walk_offset, 0)
    y1 = min(half + HEIGHT // 2 + walk_offset, HEIGHT - 1)
    tex_x = int(hit.wall_x * tex_size)
    span, off = tex_size, 0

    if aim is not None and hit.x == CENTER_COLUMN:
        if hit.hit == 2 and distance < 1:
            aim.aiming_at_door = True
        elif hit.hit == 1 or (hit.hit == 2 and distance > 1):
            aim.aiming_at_door = False

    if y1 - y0 >= HEIGHT - 1:
        half_tex = tex_size * 0.5
        scaled = distance * tex_size * 0.5
        span = int((half_tex + scaled) - (half_tex - scaled))
        off = int(half_tex - scaled)
    return WallSlice(
        x=hit.x, line_height=line_height, y0=y0, y1=y1,
        tex_x=tex_x, span=span, off=off,
    )


def _put_rows(frame: FrameBuffer, x: int, rows: np.ndarray, values) -> None:
    if not 0 < x < frame.width or rows.size == 0:
        return
    colors = np.broadcast_to(np.asarray(values, dtype=np.int64), rows.shape)
    keep = (rows > 0) & (rows < frame.height)
    frame.pixels[rows[keep], x] = (colors[keep] & _MASK32).astype(np.uint32)


def _draw_column(
    frame: FrameBuffer,
    piece: WallSlice,
    texture: np.ndarray,
    tex_size: int,
    floor: int,
    ceiling: int,
) -> None:
    if piece.y1 > piece.y0:
        rows = np.arange(piece.y0, piece.y1)
        fraction = (rows - piece.y0) / (piece.y1 - piece.y0)
        tex_y = (fraction * piece.span + piece.off).astype(np.int64)
        index = np.clip(tex_y * tex_size + piece.tex_x, 0, texture.size - 1)
        _put_rows(frame, piece.x, rows, texture[index])
    _put_rows(frame, piece.x, np.arange(piece.y1, HEIGHT), floor)
    _put_rows(frame, piece.x, np.arange(0, piece.y0), ceiling)


def render_scene(
    frame: FrameBuffer,
    grid: Sequence[str],
    player: Player,
    textures: Sequence[Sequence[int]],
    tex_size: int,
    colors: tuple[int, int],
    walk_offset: int = 0,
    bonus: bool = False,
) -> DoorAim:
    """Draw walls, floor and ceiling for every column; return the door aim."""
    tex = [np.asarray(t, dtype=np.int64).ravel() & _MASK32 for t in textures]
    floor, ceiling = colors
    aim = DoorAim()
    for x in range(WIDTH):
        hit = cast_ray(grid, player, x, bonus, aim)
        piece = wall_slice(hit, tex_size, walk_offset, aim)
        texture = tex[DOOR_TEXTURE] if bonus and hit.hit == 2 else tex[hit.side]
        _draw_column(frame, piece, texture, tex_size, floor, ceiling)
    return aim


def _set_cell(grid: MutableSequence[str], i: int, j: int, char: str) -> None:
    row = grid[i]
    grid[i] = row[:j] + char + row[j + 1:]


def toggle_door(grid: MutableSequence[str], aim: DoorAim) -> None:
    """Open the aimed closed door, or close the aimed open one, in place."""
    i, j = aim.door_x, aim.door_y
    cell = _cell(grid, i, j)
    if aim.aiming_at_door and cell == "D":
        _set_cell(grid, i, j, "O")
        cell = "O"
    if aim.aiming_at_open_door and cell == "O":
        _set_cell(grid, i, j, "D")