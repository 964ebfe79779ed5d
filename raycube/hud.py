"""The animated gun drawn in the lower right corner of the screen."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from raycube.framebuffer import FrameBuffer

IDLE = 0
SHOOT00 = 1
SHOOT01 = 2
SHOOT02 = 3
GUN_SIZE = 512
GUN_MASK = 0xFF000000
GUN_MARGIN = 50
GUN_SPRITES = (
    "./textures/gun_sprites/gun_idle.xpm",
    "./textures/gun_sprites/gun_shoot00.xpm",
    "./textures/gun_sprites/gun_shoot01.xpm",
    "./textures/gun_sprites/gun_shoot02.xpm",
)

# (first counter value, counter value past the end, sprite) of each shot phase
_PHASES = ((1, 4, SHOOT00), (4, 8, SHOOT01), (8, 12, SHOOT02))


class GunHud:
    """Four gun sprites and the counter that steps through a shot."""

    def __init__(
        self,
        frames: Sequence[Sequence[int]],
        width: int = GUN_SIZE,
        height: int = GUN_SIZE,
        mask_color: int = GUN_MASK,
    ) -> None:
        if len(frames) != len(GUN_SPRITES):
            raise ValueError(f"expected {len(GUN_SPRITES)} gun frames, got {len(frames)}")
        self.frames = [np.asarray(pixels, dtype=np.int64).ravel() for pixels in frames]
        for pixels in self.frames:
            if pixels.size != width * height:
                raise ValueError("gun frame size does not match its dimensions")
        self.width = width
        self.height = height
        self.mask_color = mask_color
        self.counter = 0

    def trigger(self) -> None:
        """Start the shooting animation."""
        self.counter = 1

    def current_frame(self) -> int:
        """Return the sprite the next draw will show."""
        for start, stop, sprite in _PHASES:
            if start <= self.counter < stop:
                return sprite
        return IDLE

    def draw(self, frame: FrameBuffer) -> int:
        """Draw the current sprite, advance the animation and return the sprite drawn."""
        sprite = self.current_frame()
        if sprite == IDLE:
            self.counter = 0
        else:
            self.counter += 1
        frame.blit_masked(
            self.frames[sprite],
            self.width,
            self.height,
            frame.width - self.width - GUN_MARGIN,
            frame.height - self.height,
            self.mask_color,
        )
        return sprite