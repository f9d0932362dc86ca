# solong

A small top-down puzzle game played on a tile map. Walk the player around
the board, pick up every mushroom, and step onto the exit once the gate has
opened. Guards wander the map at random; if one reaches you, the game is
lost.

## Installing

```
pip install .
```

For running the tests as well:

```
pip install ".[test]"
pytest
```

## Playing

```
solong path/to/map.ber
```

Arrow keys move the player. Releasing Escape, or closing the window, quits
and prints `Exited`. Each accepted move prints
`number of step done is N`; the same count is drawn near the bottom-right
corner of the window. When a guard catches the player, `You lost` is printed
and a banner is shown; reaching the exit with every mushroom collected shows
the winning banner. After either, further moves are ignored.

The command takes exactly one argument. Its exit status is:

| Status | Meaning                         |
|--------|---------------------------------|
| 0      | the game was played and closed  |
| 1      | the window could not be opened  |
| 2      | an image could not be loaded    |
| 3      | wrong number of arguments       |
| 4      | the map was rejected            |

Errors are printed as a line `Error` followed by the reason.

### Images

The game draws its tiles from XPM files in a directory named `xpms`, looked
up relative to the current working directory. These images are not part of
the package; the directory must contain:

```
wall_70.xpm                 background_linux_70.xpm
standing_man_linux.xpm      bob_up_70.xpm
walking_left_linux.xpm      walking_right_linux.xpm
gate_close_linux.xpm        gate_open_linux.xpm
close_gate_p_70.xpm         exit_open_p_70.xpm
background_try.xpm          you_won.xpm
you_lose.xpm                standing_enemy_linux.xpm
enemy_walking_left_linux.xpm
enemy_walking_right_linux.xpm
arresting_70.xpm
mushroom1_fix_71.xpm        mushroom_1_70.xpm
mushroom_2_70.xpm           mushroom_3_70.xpm
```

The size of `wall_70.xpm` sets the tile size, and so the window size. From
Python, `solong.app.run(map_path, asset_dir)` plays a level with images
from another directory.

## Map files

Maps are plain text files with the `.ber` extension. Every line is one row
of the board and all rows must have the same length. The characters are:

| Char | Meaning                    |
|------|----------------------------|
| `1`  | wall                       |
| `0`  | empty floor                |
| `P`  | player start (exactly one) |
| `E`  | exit (exactly one)         |
| `C`  | collectible (at least one) |

The map must be closed by walls on every side, and the exit and every
collectible must be reachable from the player's start. Any other character,
including a carriage return, makes the map invalid.

Example:

```
1111111
1P0C0E1
1111111
```

When the game starts, up to 100 random floor tiles are tried as guard
positions; a tile is taken only if no player or guard lies within three rows
and three columns of it. Guards keep walking in one direction and turn at
random when blocked by a wall, a collectible, the exit or another guard.

## Using it as a library

The map rules and game logic work without opening a window:

```python
import random

from solong.game import Direction, Game
from solong.mapfile import MapError, parse_level

level = parse_level("1111111\n1P0C0E1\n1111111\n")
game = Game(level, random.Random(0))
game.press(Direction.RIGHT)   # True if the player moved
print(game.moves, game.collected, game.won(), game.lost())
```

- `solong.mapfile`: `load_level(path)` and `parse_level(text)` return a
  validated `Level` (rows, `player`, `exit`, `collectibles` as `Coord`s) or
  raise `MapError`. The separate checks `check_extension`, `read_map`,
  `rectangular_width`, `check_walls`, `scan_characters` and
  `check_solvable` are available too.
- `solong.game`: `Game` holds the board and pieces; `press`, `can_move`,
  `move_enemy`, `advance_frame` and `tick(now_ms)` drive it, and
  `won`, `lost` and `finished` report its state. `next_position` and
  `mushroom_index` are small helpers.
- `solong.xpm`: `load_xpm(path)` and `parse_xpm(text)` decode XPM images
  into an `XpmImage` of 0xRRGGBB values (`TRANSPARENT` for `None`), read
  with `XpmImage.pixel(x, y)`; malformed data raises `XpmError`.
- `solong.colors`: `lookup_color(name)` resolves X11 colour names, and
  `parse_color(name, suffix)` reads an XPM colour specification.
- `solong.app`: `Assets.load(directory)`, `Renderer`, `xpm_to_surface`,
  `key_to_direction`, `run` and `main`.