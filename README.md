# raycube

raycube is a small first-person raycasting engine. It lets you walk through a grid world described by a `.cub` map file. Walls are textured, and the floor and ceiling are drawn in flat colours. Bonus mode adds several extras: doors, a rotating circular minimap, a crosshair and an animated gun.

## Installation

```
pip install .
```

pygame draws the window. Pillow loads the textures.

## Running

```
raycube path/to/level.cub
raycube --bonus path/to/level.cub
```

Run the command from a directory that contains these files:

- `./textures/gun_sprites/gun_idle.xpm`
- `./textures/gun_sprites/gun_shoot00.xpm`
- `./textures/gun_sprites/gun_shoot01.xpm`
- `./textures/gun_sprites/gun_shoot02.xpm`

In bonus mode the directory must also contain the door texture `./textures/blackstone.xpm`. The picture `./textures/head.xpm` is optional. When it is present, bonus mode draws it next to the minimap.

The wall textures should be square and all the same size.

### Controls

| Key / input        | Action                                      |
|--------------------|---------------------------------------------|
| `W` / `S`          | move forward / backward                     |
| `A` / `D`          | strafe                                      |
| Left / Right arrow | turn the camera                             |
| Mouse movement     | turn the camera; the pointer is recentred   |
| Left mouse button  | fire (gun animation, bonus mode)            |
| `E`                | open or close the door in front (bonus mode)|
| `Escape`           | quit                                        |

Closing the window also quits.

Movement speed is scaled to the measured frame rate. The view bobs up and down while you walk.

An FPS counter is shown near the top-right corner. In bonus mode, a hint saying `press [E] to open/close` appears when you are close to a door and aiming at it.

If the map is invalid, or a texture cannot be loaded, raycube prints `Cub3d: <reason>` to standard error. It then exits with status 1.

## Map format

A `.cub` file starts with the texture and colour lines, which may be separated by blank lines. The map grid comes after them:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm

F 220,100,0
C 225,30,0

111111
100101
101001
1100N1
111111
```

- `NO`, `SO`, `WE` and `EA` each name a wall texture. Each must appear exactly once. The file it names must be readable and its name must end in `.xpm`.
- `F` and `C` give the floor and ceiling colours. Each is three comma-separated numbers from 0 to 255.
- None of these identifiers may appear after the first line of the map.
- In the grid, `1` is a wall, `0` is open floor and a space is void. Exactly one of `N`, `S`, `E` or `W` must appear. It marks where the player starts and which way the player faces. In bonus mode, `D` marks a closed door.
- Every floor cell and the player cell must be surrounded on all eight sides by non-void cells inside the map.
- A map row made entirely of void is rejected as a second map.

## Using the pieces from Python

```python
from raycube.parser import parse_map
from raycube.player import Player
from raycube.framebuffer import FrameBuffer
from raycube.raycast import render_scene
from raycube.app import load_texture

config = parse_map("level.cub", bonus=False)
player = Player.from_grid(config.grid)
textures = [load_texture(path) for path in config.texture_paths]
frame = FrameBuffer()
render_scene(
    frame,
    config.grid,
    player,
    [pixels for pixels, _, _ in textures],
    textures[0][2],
    (config.floor, config.ceiling),
)
```

These are the main pieces:

- `raycube.parser.parse_map(path, bonus)` returns a `CubConfig`, which holds `grid`, `texture_paths`, `floor` and `ceiling`. It raises `raycube.mapfile.MapError` when the file is invalid.
- `raycube.raycast.cast_ray` casts a single ray.
- `raycube.raycast.render_scene` draws a full view into a `raycube.framebuffer.FrameBuffer` and returns a `DoorAim`.
- `raycube.raycast.toggle_door` opens or closes the door that the `DoorAim` points at.
- `raycube.minimap.Minimap` draws the circular minimap.
- `raycube.hud.GunHud` draws the gun animation.
- `raycube.app.Game` holds a whole running game. `Game.step()` renders one frame. Its `handle_*` methods take input.

## What it does not do

Firing only plays the gun animation. Nothing is hit or damaged, and there are no enemies or other sprites.

## Tests

```
pip install .[test]
pytest
```