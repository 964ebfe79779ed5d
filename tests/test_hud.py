import pytest

from raycube.framebuffer import FrameBuffer
from raycube.hud import GUN_MASK, IDLE, SHOOT00, SHOOT01, SHOOT02, GunHud

SIZE = 4
COLORS = (0x111111, 0x222222, 0x333333, 0x444444)


def make_hud():
    frames = []
    for color in COLORS:
        pixels = [color] * (SIZE * SIZE)
        pixels[0] = GUN_MASK
        frames.append(pixels)
    return GunHud(frames, SIZE, SIZE)


def test_idle_without_trigger():
    hud = make_hud()
    frame = FrameBuffer(100, 100)
    assert hud.draw(frame) == IDLE
    assert hud.counter == 0


def test_trigger_sequence():
    hud = make_hud()
    hud.trigger()
    frame = FrameBuffer(100, 100)
    drawn = [hud.draw(frame) for _ in range(12)]
    assert drawn == [SHOOT00] * 3 + [SHOOT01] * 4 + [SHOOT02] * 4 + [IDLE]
    assert hud.counter == 0


def test_current_frame_does_not_advance():
    hud = make_hud()
    hud.trigger()
    assert hud.current_frame() == SHOOT00
    assert hud.current_frame() == SHOOT00
    assert hud.counter == 1


def test_draw_places_sprite_bottom_right_with_mask():
    hud = make_hud()
    frame = FrameBuffer(100, 100)
    hud.draw(frame)
    ox = frame.width - SIZE - 50
    oy = frame.height - SIZE
    assert frame.get_pixel(ox, oy) == 0
    assert frame.get_pixel(ox + 1, oy) == COLORS[IDLE]
    assert frame.get_pixel(ox + SIZE - 1, oy + SIZE - 1) == COLORS[IDLE]


def test_shooting_sprite_colour():
    hud = make_hud()
    hud.trigger()
    frame = FrameBuffer(100, 100)
    hud.draw(frame)
    ox = frame.width - SIZE - 50
    oy = frame.height - SIZE
    assert frame.get_pixel(ox + 2, oy + 2) == COLORS[SHOOT00]


def test_wrong_frame_count():
    with pytest.raises(ValueError):
        GunHud([[0] * 4] * 3, 2, 2)


def test_wrong_frame_size():
    with pytest.raises(ValueError):
        GunHud([[0] * 3] * 4, 2, 2)