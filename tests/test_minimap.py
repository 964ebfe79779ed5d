import numpy as np
import pytest

from raycube.framebuffer import FrameBuffer
from raycube.minimap import (
    COLORS,
    OFFSET_X,
    OFFSET_Y,
    OUTSIDE,
    PLAYER_MARK,
    Minimap,
    map_height,
    map_width,
)
from raycube.player import Player

GRID = ["1111111", "1000001", "100N001", "1000001", "1111111"]


@pytest.fixture
def minimap():
    return Minimap()


def _player(facing=None):
    player = Player.from_grid(GRID)
    if facing is not None:
        player.face(facing)
    return player


def test_map_dimensions():
    ragged = ["111", "11111"]
    assert map_width(ragged) == len(ragged[0])
    assert map_height(ragged) == len(ragged)


def test_circle_matrix_shape(minimap):
    n, c = minimap.draw_size, minimap.center
    values = set(np.unique(minimap.circle[:n, :n]).tolist())
    assert values == {0, 1, 2}
    assert minimap.circle[c, c] == 1
    assert minimap.circle[0, 0] == 0


def test_build_coords_marks_player_and_outside(minimap):
    minimap.build_coords(GRID, _player())
    c = minimap.center
    assert minimap.coords[c, c] == PLAYER_MARK
    assert minimap.coords[0, 0] == OUTSIDE
    assert (minimap.coords == 1).any()


@pytest.mark.parametrize("facing", ["N", "S", "E", "W"])
def test_render_keeps_player_at_center(minimap, facing):
    player = _player(facing)
    minimap.build_coords(GRID, player)
    minimap.render(player)
    n, c = minimap.draw_size, minimap.center
    assert set(np.unique(minimap.rotated[:n, :n]).tolist()) <= {0, 4, 8, 16, 64}
    assert minimap.rotated[c - 1, c - 1] == 4
    assert minimap.rotated[0, 0] == 0


def test_paint_uses_minimap_colors(minimap):
    frame = FrameBuffer()
    player = _player()
    minimap.draw(frame, GRID, player)
    n = minimap.draw_size
    floor_x, floor_y = np.argwhere(minimap.rotated[:n, :n] == 4)[0]
    wall_x, wall_y = np.argwhere(minimap.rotated[:n, :n] == 8)[0]
    border_x, border_y = np.argwhere(minimap.rotated[:n, :n] == 64)[0]
    assert frame.get_pixel(floor_x + OFFSET_X, floor_y + OFFSET_Y) == COLORS[0]
    assert frame.get_pixel(wall_x + OFFSET_X, wall_y + OFFSET_Y) == COLORS[1]
    assert frame.get_pixel(border_x + OFFSET_X, border_y + OFFSET_Y) == COLORS[4]
    assert frame.get_pixel(OFFSET_X, OFFSET_Y) == 0


def test_draw_matches_separate_steps():
    player = _player("E")
    first, second = Minimap(), Minimap()
    frame_a, frame_b = FrameBuffer(), FrameBuffer()
    first.draw(frame_a, GRID, player)
    second.build_coords(GRID, player)
    second.render(player)
    second.paint(frame_b)
    assert np.array_equal(frame_a.pixels, frame_b.pixels)
    assert np.array_equal(first.rotated, second.rotated)