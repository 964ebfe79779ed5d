"""The game: loading, the per-frame loop and the window."""

from __future__ import annotations

import math
import os
import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np
from PIL import Image

from raycube.framebuffer import FrameBuffer
from raycube.hud import GUN_SPRITES, GunHud
from raycube.mapfile import MapError
from raycube.minimap import Minimap
from raycube.parser import CubConfig, parse_map
from raycube.player import Key, Player, WalkAnimation
from raycube.raycast import DoorAim, render_scene, toggle_door

DOOR_PATH = "./textures/blackstone.xpm"
HEAD_PATH = "./textures/head.xpm"
TRANSPARENT = 0xFF000000
WHITE = 0xFFFFFF
DOOR_PROMPT = "press [E] to open/close"
HEAD_MARGIN = 30

Texture = tuple[np.ndarray, int, int]


def _now_ms() -> int:
    return int(time.monotonic() * 1000)


def load_texture(path: str | os.PathLike) -> Texture:
    """Load an image as row-major 0xRRGGBB pixels; transparent ones become 0xFF000000.

    Returns (pixels, width, height).
    """
    try:
        with Image.open(path) as image:
            rgba = np.asarray(image.convert("RGBA"), dtype=np.uint32)
    except (OSError, ValueError) as exc:
        raise MapError("Error, couldn't load texture.") from exc
    height, width = rgba.shape[:2]
    red, green, blue, alpha = (rgba[..., k] for k in range(4))
    pixels = (red << 16) | (green << 8) | blue
    pixels = np.where(alpha == 0, np.uint32(TRANSPARENT), pixels)
    return pixels.astype(np.int64).ravel(), width, height


@dataclass
class FpsCounter:
    """Frame rate measured from the time between two frames."""

    old_time: int
    fps: float = 0.0

    def tick(self, now_ms: int) -> float:
        """Record a frame finishing at ``now_ms`` and return the frame rate."""
        elapsed = now_ms - self.old_time
        self.fps = 1000.0 / elapsed if elapsed > 0 else math.inf
        self.old_time = now_ms
        return self.fps


class Game:
    """All the state of a running game and what one frame does to it."""

    def __init__(
        self,
        config: CubConfig,
        textures: Sequence[Sequence[int]],
        tex_size: int,
        hud: Optional[GunHud] = None,
        head: Optional[Texture] = None,
        bonus: bool = False,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        needed = 5 if bonus else 4
        if len(textures) < needed:
            raise ValueError(f"expected {needed} textures, got {len(textures)}")
        self.config = config
        self.grid = list(config.grid)
        self.textures = list(textures)
        self.tex_size = tex_size
        self.hud = hud
        self.head = head
        self.bonus = bonus
        self.clock = clock or _now_ms
        self.player = Player.from_grid(self.grid)
        self.animation = WalkAnimation()
        self.minimap = Minimap()
        self.frame = FrameBuffer()
        self.fps = FpsCounter(old_time=self.clock())
        self.aim = DoorAim()
        self.running = True

    def step(self) -> FrameBuffer:
        """Advance the game one frame and return the drawn frame."""
        self.player.apply_view()
        self.player.move(self.grid, self.fps.fps, self.animation, self.bonus)
        self.frame.clear()
        self.aim = render_scene(
            self.frame,
            self.grid,
            self.player,
            self.textures,
            self.tex_size,
            (self.config.floor, self.config.ceiling),
            self.animation.offset,
            self.bonus,
        )
        if self.bonus:
            self.minimap.draw(self.frame, self.grid, self.player)
            self.frame.draw_crosshair(WHITE, 5)
            self.frame.draw_crosshair(WHITE, 4)
            if self.hud is not None:
                self.hud.draw(self.frame)
            if self.head is not None:
                pixels, width, height = self.head
                corner = HEAD_MARGIN + self.minimap.draw_size // 2
                self.frame.blit_masked(pixels, width, height, corner, corner, TRANSPARENT)
        self.fps.tick(self.clock())
        return self.frame

    def handle_key_down(self, key: int) -> None:
        """React to a pressed key."""
        if key == Key.E:
            toggle_door(self.grid, self.aim)
        elif key == Key.ESCAPE:
            self.running = False
        else:
            self.player.key_down(key)

    def handle_key_up(self, key: int) -> None:
        """React to a released key."""
        self.player.key_up(key)

    def handle_mouse_motion(self, x: int) -> bool:
        """Turn with the pointer; True means the pointer should be recentred."""
        return self.player.mouse_motion(x)

    def handle_mouse_button(self, button: int) -> None:
        """Shoot on the left button."""
        if button == 1 and self.hud is not None:
            self.hud.trigger()

    def status_lines(self) -> list[tuple[int, int, str]]:
        """Return the (x, y, text) strings to show over the frame."""
        fps = int(self.fps.fps) if math.isfinite(self.fps.fps) else 0
        lines = [(930, 20, f"fps: {fps}")]
        if self.bonus and self.aim.show_prompt:
            lines.append((410, 600, DOOR_PROMPT))
        return lines


def _to_rgb(pixels: np.ndarray) -> np.ndarray:
    channels = [(pixels >> shift) & 0xFF for shift in (16, 8, 0)]
    return np.stack(channels, axis=-1).astype(np.uint8).transpose(1, 0, 2)


def _run(game: Game) -> None:
    os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
    import pygame

    keymap = {
        pygame.K_LEFT: Key.ARROW_LEFT,
        pygame.K_RIGHT: Key.ARROW_RIGHT,
        pygame.K_UP: Key.ARROW_UP,
        pygame.K_DOWN: Key.ARROW_DOWN,
        pygame.K_ESCAPE: Key.ESCAPE,
    }
    pygame.init()
    try:
        screen = pygame.display.set_mode((game.frame.width, game.frame.height))
        pygame.display.set_caption("CUB3D")
        pygame.mouse.set_visible(False)
        center = (game.frame.width // 2, game.frame.height // 2)
        pygame.mouse.set_pos(center)
        font = pygame.font.Font(None, 22)
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type == pygame.KEYDOWN:
                    game.handle_key_down(keymap.get(event.key, event.key))
                elif event.type == pygame.KEYUP:
                    game.handle_key_up(keymap.get(event.key, event.key))
                elif event.type == pygame.MOUSEMOTION:
                    if game.handle_mouse_motion(event.pos[0]):
                        pygame.mouse.set_pos(center)
                elif event.type == pygame.MOUSEBUTTONDOWN:
                    game.handle_mouse_button(event.button)
            if not game.running:
                break
            frame = game.step()
            pygame.surfarray.blit_array(screen, _to_rgb(frame.pixels))
            for x, y, text in game.status_lines():
                screen.blit(font.render(text, True, (255, 255, 255)), (x, y))
            pygame.display.flip()
    finally:
        pygame.quit()


def _load_game(path: str, bonus: bool) -> Game:
    config = parse_map(path, bonus)
    loaded = [load_texture(p) for p in config.texture_paths]
    if bonus:
        loaded.append(load_texture(DOOR_PATH))
    tex_size = loaded[-1][2]
    gun = [load_texture(p) for p in GUN_SPRITES]
    hud = GunHud([pixels for pixels, _, _ in gun], gun[0][1], gun[0][2])
    try:
        head: Optional[Texture] = load_texture(HEAD_PATH)
    except MapError:
        head = None
    return Game(
        config,
        [pixels for pixels, _, _ in loaded],
        tex_size,
        hud=hud,
        head=head,
        bonus=bonus,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the game on the map named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    bonus = "--bonus" in args
    args = [arg for arg in args if arg != "--bonus"]
    if len(args) != 1:
        print("Cub3d: Usage: cub3d [--bonus] <path_to_map>", file=sys.stderr)
        return 1
    try:
        game = _load_game(args[0], bonus)
    except MapError as exc:
        print(f"Cub3d: {exc}", file=sys.stderr)
        return 1
    _run(game)
    return 0