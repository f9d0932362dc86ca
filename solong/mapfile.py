"""Loading and validation of .ber level maps."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Sequence

__all__ = [
    "FILE_EXTENSION",
    "MapError",
    "Coord",
    "Level",
    "check_extension",
    "read_map",
    "rectangular_width",
    "check_walls",
    "scan_characters",
    "check_solvable",
    "parse_level",
    "load_level",
]

FILE_EXTENSION = ".ber"

_STEPS = ((0, 1), (0, -1), (1, 0), (-1, 0))


class MapError(ValueError):
    """Raised when a map file cannot be read or is not a playable level."""


@dataclass(frozen=True, order=True)
class Coord:
    """A cell position on the map."""

    row: int
    col: int


@dataclass(frozen=True)
class Level:
    """A validated map together with the positions found on it."""

    rows: tuple[str, ...]
    player: Coord
    exit: Coord
    collectibles: tuple[Coord, ...]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0])


def check_extension(path: str | os.PathLike[str]) -> bool:
    """Tell whether the path names a .ber file."""
    return os.fspath(path).endswith(FILE_EXTENSION)


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def read_map(path: str | os.PathLike[str]) -> list[str]:
    """Read the lines of a map file without their line endings."""
    try:
        with open(path, encoding="latin-1", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise MapError(f"Cannot read map file {os.fspath(path)}: {exc.strerror}") from exc
    return _split_lines(text)


def rectangular_width(rows: Sequence[str]) -> int:
    """Return the common width of all rows; raise if they differ."""
    if not rows:
        raise MapError("The map is empty")
    width = len(rows[0])
    if any(len(row) != width for row in rows[1:]):
        raise MapError("The map is not rectangular")
    return width


def check_walls(rows: Sequence[str], width: int) -> None:
    """Raise unless the border of the map is made of walls only."""
    enclosed = (
        width > 0
        and not rows[0].strip("1")
        and not rows[-1].strip("1")
        and all(row[0] == "1" and row[width - 1] == "1" for row in rows)
    )
    if not enclosed:
        raise MapError("Map is not surrounded by walls")


def scan_characters(rows: Sequence[str]) -> Level:
    """Locate player, exit and collectibles, rejecting unknown characters."""
    player: Coord | None = None
    exit_: Coord | None = None
    collectibles: list[Coord] = []
    for row, line in enumerate(rows):
        for col, char in enumerate(line):
            here = Coord(row, col)
            if char == "E":
                if exit_ is not None:
                    raise MapError("There is more than one exit on the map")
                exit_ = here
            elif char == "P":
                if player is not None:
                    raise MapError("There is more than one player on the map")
                player = here
            elif char == "C":
                collectibles.append(here)
            elif char not in {"0", "1"}:
                raise MapError("Invalid character in the map")
    if exit_ is None:
        raise MapError("There is no exit point in the map")
    if player is None:
        raise MapError("There is no player position in the map")
    if not collectibles:
        raise MapError("There are no collectibles in the map")
    return Level(tuple(rows), player, exit_, tuple(collectibles))


def _reachable(level: Level) -> set[Coord]:
    seen = {level.player}
    stack = [level.player]
    while stack:
        here = stack.pop()
        for d_row, d_col in _STEPS:
            step = Coord(here.row + d_row, here.col + d_col)
            if (
                0 <= step.row < level.height
                and 0 <= step.col < level.width
                and step not in seen
                and level.rows[step.row][step.col] != "1"
            ):
                seen.add(step)
                stack.append(step)
    return seen


def check_solvable(level: Level) -> None:
    """Raise unless the exit and every collectible can be reached."""
    reachable = _reachable(level)
    if level.exit not in reachable:
        raise MapError("The map is not solvable, exit unreachable")
    if not reachable.issuperset(level.collectibles):
        raise MapError("The map is not solvable, some of collectibles are unreachable")


def _validate(rows: Sequence[str]) -> Level:
    width = rectangular_width(rows)
    check_walls(rows, width)
    level = scan_characters(rows)
    check_solvable(level)
    return level


def parse_level(text: str) -> Level:
    """Validate map text and return the level it describes."""
    return _validate(_split_lines(text))


def load_level(path: str | os.PathLike[str]) -> Level:
    """Read and validate a .ber map file."""
    if not check_extension(path):
        raise MapError("Wrong file extension, should be .ber file")
    return _validate(read_map(path))