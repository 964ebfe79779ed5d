"""Player position, orientation, controls and the walking bob."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

from raycube.framebuffer import WIDTH

ROTSPEED = 0.06
MOVESPEED = 0.08
PLANE = 0.66
WALK_LIMIT = 8
_REFERENCE_FPS = 60

_FACINGS = {
    "N": ((-1.0, 0.0), (0.0, PLANE)),
    "S": ((1.0, 0.0), (0.0, -PLANE)),
    "W": ((0.0, -1.0), (-PLANE, 0.0)),
    "E": ((0.0, 1.0), (PLANE, 0.0)),
}


class Key(IntEnum):
    """Key codes the game reacts to."""

    W = 119
    A = 97
    S = 115
    D = 100
    E = 101
    ARROW_LEFT = 65361
    ARROW_UP = 65362
    ARROW_RIGHT = 65363
    ARROW_DOWN = 65364
    ESCAPE = 65307


@dataclass
class WalkAnimation:
    """Vertical bob of the view while walking."""

    offset: int = 0
    speed: int = 2
    falling: bool = False

    def step(self) -> None:
        """Advance the bob one step, bouncing between the limits."""
        if self.offset >= WALK_LIMIT:
            self.falling = True
        if self.offset <= -WALK_LIMIT:
            self.falling = False
        self.offset += -self.speed if self.falling else self.speed


@dataclass
class Player:
    """Position, direction and camera plane of the player, plus held keys."""

    pos_x: float = 0.0
    pos_y: float = 0.0
    dir_x: float = 0.0
    dir_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0
    moved_x: int = 0
    moved_y: int = 0
    camera_left: bool = False
    camera_right: bool = False

    @classmethod
    def from_grid(cls, grid: Sequence[str]) -> "Player":
        """Place a player on the first start cell of the grid."""
        for i, row in enumerate(grid):
            for j, cell in enumerate(row):
                if cell in _FACINGS:
                    player = cls(pos_x=i + 0.5, pos_y=j + 0.5)
                    player.face(cell)
                    return player
        raise ValueError("no player start cell in the map")

    def face(self, direction: str) -> None:
        """Turn the player towards 'N', 'S', 'E' or 'W'."""
        try:
            (self.dir_x, self.dir_y), (self.plane_x, self.plane_y) = _FACINGS[direction]
        except KeyError:
            raise ValueError(f"unknown direction {direction!r}") from None

    def rotate(self, angle: float) -> None:
        """Rotate direction and camera plane by ``angle`` radians."""
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        self.dir_x, self.dir_y = (
            self.dir_x * cos_a - self.dir_y * sin_a,
            self.dir_x * sin_a + self.dir_y * cos_a,
        )
        self.plane_x, self.plane_y = (
            self.plane_x * cos_a - self.plane_y * sin_a,
            self.plane_x * sin_a + self.plane_y * cos_a,
        )

    def apply_view(self) -> None:
        """Turn according to the held arrow keys; right wins over left."""
        speed = 0.0
        if self.camera_left:
            speed = ROTSPEED
        if self.camera_right:
            speed = -ROTSPEED
        self.rotate(speed)

    def mouse_motion(self, x: int) -> bool:
        """Turn according to the pointer's distance from the screen centre.

        Returns True when the view turned, meaning the pointer should be
        moved back to the centre.
        """
        center = WIDTH // 2
        if x == center:
            return False
        self.rotate(ROTSPEED * (0.01 * (WIDTH / 2 - x)) / 4)
        return True

    def move(
        self,
        grid: Sequence[str],
        fps: float,
        animation: WalkAnimation,
        bonus: bool = False,
    ) -> None:
        """Walk according to the held keys, scaled to the frame rate."""
        diagonal = self.moved_x != 0 and self.moved_y != 0
        animation.speed = 1 if diagonal else 2
        if fps <= 0:
            return
        speed = MOVESPEED * (_REFERENCE_FPS / fps)
        if diagonal:
            speed /= 2
        steps = (
            (self.moved_y == 1, self.dir_x, self.dir_y),
            (self.moved_y == -1, -self.dir_x, -self.dir_y),
            (self.moved_x == 1, self.dir_y, -self.dir_x),
            (self.moved_x == -1, -self.dir_y, self.dir_x),
        )
        for active, dx, dy in steps:
            if not active:
                continue
            new_x = self.pos_x + dx * speed
            new_y = self.pos_y + dy * speed
            if self._walkable(grid, new_x, new_y, bonus):
                animation.step()
                self.pos_x, self.pos_y = new_x, new_y

    @staticmethod
    def _walkable(grid: Sequence[str], x: float, y: float, bonus: bool) -> bool:
        i, j = int(x), int(y)
        if i < 0 or j < 0 or i >= len(grid) or j >= len(grid[i]):
            return False
        cell = grid[i][j]
        return cell != "1" and not (bonus and cell == "D")

    def key_down(self, key: int) -> None:
        """Record a pressed movement or camera key."""
        if key == Key.ARROW_LEFT:
            self.camera_left = True
        elif key == Key.ARROW_RIGHT:
            self.camera_right = True
        elif key == Key.W:
            self.moved_y += 1
        elif key == Key.S:
            self.moved_y -= 1
        elif key == Key.D:
            self.moved_x += 1
        elif key == Key.A:
            self.moved_x -= 1

    def key_up(self, key: int) -> None:
        """Undo what pressing ``key`` recorded."""
        if key == Key.ARROW_LEFT:
            self.camera_left = False
        elif key == Key.ARROW_RIGHT:
            self.camera_right = False
        elif key == Key.W:
            self.moved_y -= 1
        elif key == Key.S:
            self.moved_y += 1
        elif key == Key.D:
            self.moved_x -= 1
        elif key == Key.A:
            self.moved_x += 1