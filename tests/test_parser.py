import pytest

from raycube.mapfile import MapError
from raycube.parser import (
    CEILING,
    FLOOR,
    Wall,
    check_closed,
    check_multimap,
    check_one_player,
    check_texture_files,
    color_check,
    color_index,
    direction_index,
    extract_colors,
    extract_texture_paths,
    is_player_char,
    numbers_check,
    parse_color,
    parse_map,
)

MAP = ["111111", "100001", "10N001", "111111"]


@pytest.fixture
def textures(tmp_path):
    paths = {}
    for name in ("NO", "SO", "WE", "EA"):
        path = tmp_path / f"{name.lower()}.xpm"
        path.write_text("")
        paths[name] = str(path)
    return paths


def _header(textures, floor="F 220,100,0", ceiling="C 225,30,0"):
    return [f"{key} {value}" for key, value in textures.items()] + ["", floor, ceiling, ""]


def _write(tmp_path, lines, name="level.cub"):
    path = tmp_path / name
    path.write_text("\n".join(lines) + "\n")
    return path


def test_direction_index():
    assert direction_index("NO ./a.xpm") == Wall.NO
    assert direction_index("SO ./a.xpm") == Wall.SO
    assert direction_index("EA") == Wall.EA
    assert direction_index("XX ./a.xpm") is None


def test_color_index():
    assert color_index("F") == FLOOR
    assert color_index("C") == CEILING
    assert color_index("1") is None


def test_is_player_char():
    assert all(is_player_char(c) for c in "NSEW")
    assert not is_player_char("0")


def test_numbers_check_counts_digit_runs():
    for text in ("1,22, 333", "4,5", "7"):
        assert numbers_check(text) == len(text.split(","))


def test_color_check():
    assert color_check("220,100,0")
    assert color_check(" 1 , 2 , 3")
    assert not color_check("220,100")
    assert not color_check("1,2,3,4")
    assert not color_check("2a0,1,1")
    assert not color_check("1,,2,3")


def test_parse_color_packs_rgb():
    assert parse_color("F 220,100,0", 0) == 0xDC6400
    assert parse_color("C 255,255,255", 0) == 0xFFFFFF


def test_parse_color_rejects_out_of_range():
    with pytest.raises(MapError, match="colors"):
        parse_color("F 256,0,0", 0)


def test_extract_colors():
    lines = ["F 220,100,0", "111", "  C 255,255,255"]
    (floor, ceiling), remaining = extract_colors(lines)
    assert floor == parse_color("F 220,100,0", 0)
    assert ceiling == parse_color("  C 255,255,255", 2)
    assert remaining == ["111"]


def test_extract_colors_missing_ceiling():
    with pytest.raises(MapError):
        extract_colors(["F 1,2,3", "111"])


def test_extract_colors_bad_line():
    with pytest.raises(MapError):
        extract_colors(["F 1,2", "C 1,2,3"])


def test_extract_texture_paths():
    lines = ["NO a.xpm", "  SO b.xpm", "WE c.xpm", "EA d.xpm", "111"]
    paths, remaining = extract_texture_paths(lines)
    assert paths[Wall.NO] == "a.xpm"
    assert paths[Wall.SO] == "b.xpm"
    assert paths[Wall.WE] == "c.xpm"
    assert paths[Wall.EA] == "d.xpm"
    assert remaining == ["111"]


def test_extract_texture_paths_duplicate():
    with pytest.raises(MapError, match="texture"):
        extract_texture_paths(["NO a.xpm", "NO b.xpm", "WE c.xpm", "EA d.xpm"])


def test_extract_texture_paths_missing():
    with pytest.raises(MapError):
        extract_texture_paths(["NO a.xpm", "SO b.xpm", "WE c.xpm"])


def test_check_texture_files_missing(tmp_path):
    with pytest.raises(MapError):
        check_texture_files([str(tmp_path / "absent.xpm")])


def test_check_texture_files_wrong_suffix(tmp_path):
    path = tmp_path / "wall.png"
    path.write_text("")
    with pytest.raises(MapError):
        check_texture_files([str(path)])


def test_check_one_player_rejects_two_players():
    with pytest.raises(MapError, match="one player"):
        check_one_player(["111", "1NS1", "111"])


def test_check_one_player_rejects_no_player():
    with pytest.raises(MapError):
        check_one_player(["111", "101", "111"])


def test_check_one_player_rejects_unknown_char():
    with pytest.raises(MapError):
        check_one_player(["111", "1NX1", "111"])


def test_check_closed_rejects_open_map():
    grid = ["111111", "100002", "10N001", "111111"]
    with pytest.raises(MapError, match="not closed"):
        check_closed(grid)


def test_check_closed_rejects_floor_on_border():
    with pytest.raises(MapError):
        check_closed(["101", "1N1", "111"])


def test_check_multimap_rejects_void_row():
    with pytest.raises(MapError, match="Multimap"):
        check_multimap(["111", "1N1", "111", "222", "111"])


def test_parse_map(tmp_path, textures):
    path = _write(tmp_path, _header(textures) + MAP)
    config = parse_map(path)
    assert config.grid == MAP
    assert config.texture_paths[Wall.NO] == textures["NO"]
    assert config.texture_paths[Wall.EA] == textures["EA"]
    assert config.floor == parse_color("F 220,100,0", 0)
    assert config.ceiling == parse_color("C 225,30,0", 0)


def test_parse_map_pads_ragged_rows(tmp_path, textures):
    rows = ["  1111", "111001", "1N0011", "11111"]
    config = parse_map(_write(tmp_path, _header(textures) + rows))
    assert {len(row) for row in config.grid} == {len("111001")}
    assert config.grid[0].startswith("22")


def test_parse_map_door_needs_bonus(tmp_path, textures):
    rows = ["111111", "100001", "10ND01", "111111"]
    path = _write(tmp_path, _header(textures) + rows)
    with pytest.raises(MapError, match="not closed"):
        parse_map(path)
    config = parse_map(path, bonus=True)
    assert config.grid[2] == "10ND01"


def test_parse_map_wrong_order(tmp_path, textures):
    lines = _header(textures)[:4] + MAP + ["F 1,2,3", "C 1,2,3"]
    with pytest.raises(MapError, match="Wrong order"):
        parse_map(_write(tmp_path, lines))


def test_parse_map_multimap(tmp_path, textures):
    rows = ["1111", "1N01", "1111", "", "1111", "1001", "1111"]
    with pytest.raises(MapError, match="Multimap"):
        parse_map(_write(tmp_path, _header(textures) + rows))


def test_parse_map_bad_color(tmp_path, textures):
    lines = _header(textures, floor="F 300,0,0") + MAP
    with pytest.raises(MapError, match="colors"):
        parse_map(_write(tmp_path, lines))