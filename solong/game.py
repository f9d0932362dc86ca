"""Game state and rules: player moves, collectibles, wandering enemies."""

from __future__ import annotations

import random
from enum import Enum
from typing import Protocol

from solong.mapfile import Coord, Level

__all__ = [
    "FRAME_RATE_MS",
    "MAX_TRIES",
    "ENEMY_RADIUS",
    "MUSHROOM_IMAGES",
    "Direction",
    "Game",
    "next_position",
    "mushroom_index",
]

FRAME_RATE_MS = 15
MAX_TRIES = 100
ENEMY_RADIUS = 3
MUSHROOM_IMAGES = 4

FRAME_CYCLE = 180
ENEMY_STEP_FRAMES = 45
MUSHROOM_STEP_FRAMES = 15

WALL = "1"
FLOOR = "0"
PLAYER = "P"
COLLECTIBLE = "C"
EXIT = "E"
ENEMY = "N"

_ENEMY_BLOCKERS = frozenset({WALL, COLLECTIBLE, EXIT, ENEMY})


class _RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


class Direction(Enum):
    """A step on the map; values are the indices used when picking at random."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


_OFFSETS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


def next_position(coord: Coord, direction: Direction) -> Coord:
    """Return the cell one step from ``coord`` in ``direction``."""
    d_row, d_col = _OFFSETS[direction]
    return Coord(coord.row + d_row, coord.col + d_col)


def mushroom_index(frame_count: int) -> int:
    """Image index for the collectible animation: 0,1,2,3,2,1,0,1,..."""
    index = frame_count % 6
    return 6 - index if index > 3 else index


class Game:
    """The mutable state of one play-through of a level."""

    def __init__(self, level: Level, rng: _RandomSource | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.grid: list[list[str]] = [list(row) for row in level.rows]
        self.height = level.height
        self.width = level.width
        self.player = level.player
        self.player_last = level.player
        self.exit = level.exit
        self.collectibles: list[Coord | None] = list(level.collectibles)
        self.total_collectibles = len(level.collectibles)
        self.collected = 0
        self.moves = 0
        self.frame_count = 0
        self.last_measured_ms = 0
        self.mushroom = 0
        self.frame_rate_ms = FRAME_RATE_MS
        self.enemies: list[Coord] = []
        self.enemy_directions: list[Direction | None] = []
        self.spawn_enemies()

    def tile(self, coord: Coord) -> str:
        """Return the map character at ``coord``."""
        return self.grid[coord.row][coord.col]

    def _inside(self, coord: Coord) -> bool:
        return 0 <= coord.row < self.height and 0 <= coord.col < self.width

    @property
    def remaining_collectibles(self) -> list[Coord]:
        """Positions of the collectibles not yet picked up."""
        return [coord for coord in self.collectibles if coord is not None]

    def has_close_player_or_enemy(self, row: int, col: int) -> bool:
        """Tell whether a player or enemy lies within the enemy radius."""
        rows = range(max(row - ENEMY_RADIUS, 0), min(row + ENEMY_RADIUS + 1, self.height))
        cols = range(max(col - ENEMY_RADIUS, 0), min(col + ENEMY_RADIUS + 1, self.width))
        return any(self.grid[r][c] in (PLAYER, ENEMY) for r in rows for c in cols)

    def spawn_enemies(self) -> int:
        """Place enemies on random free cells; return how many were added."""
        spawned = 0
        for _ in range(MAX_TRIES):
            row = self.rng.randrange(self.height)
            col = self.rng.randrange(self.width)
            if self.grid[row][col] == FLOOR and not self.has_close_player_or_enemy(row, col):
                self.grid[row][col] = ENEMY
                spawned += 1
        self.enemies = [
            Coord(row, col)
            for row, line in enumerate(self.grid)
            for col, char in enumerate(line)
            if char == ENEMY
        ]
        self.enemy_directions = [None] * len(self.enemies)
        return spawned

    def won(self) -> bool:
        """All collectibles taken and the player stands on the exit."""
        return self.collected == self.total_collectibles and self.player == self.exit

    def lost(self) -> bool:
        """The player shares a cell with an enemy."""
        return self.tile(self.player) == ENEMY

    def finished(self) -> bool:
        """The game has been won or lost."""
        return self.won() or self.lost()

    def can_move(self, direction: Direction) -> bool:
        """Tell whether the player may step in ``direction``."""
        target = next_position(self.player, direction)
        return self._inside(target) and self.tile(target) != WALL

    def _pick_up(self) -> None:
        here = self.player
        self.grid[here.row][here.col] = FLOOR
        self.collected += 1
        for index, coord in enumerate(self.collectibles):
            if coord == here:
                self.collectibles[index] = None
                break

    def press(self, direction: Direction) -> bool:
        """Move the player one step; return whether the move was made."""
        if self.finished() or not self.can_move(direction):
            return False
        self.player_last = self.player
        self.player = next_position(self.player, direction)
        if self.tile(self.player) == COLLECTIBLE:
            self._pick_up()
        self.moves += 1
        return True

    def _enemy_can_enter(self, coord: Coord) -> bool:
        return self._inside(coord) and self.tile(coord) not in _ENEMY_BLOCKERS

    def _random_direction(self) -> Direction:
        return Direction(self.rng.randrange(len(Direction)))

    def move_enemy(self, index: int) -> bool:
        """Step an enemy onward, turning at random once if blocked.

        Returns whether the enemy changed cell.
        """
        if self.finished():
            return False
        here = self.enemies[index]
        direction = self.enemy_directions[index]
        target = here if direction is None else next_position(here, direction)
        if not self._enemy_can_enter(target):
            direction = self._random_direction()
            self.enemy_directions[index] = direction
            target = next_position(here, direction)
            if not self._enemy_can_enter(target):
                return False
        self.grid[here.row][here.col] = FLOOR
        self.enemies[index] = target
        self.grid[target.row][target.col] = ENEMY
        return True

    def advance_frame(self) -> int | None:
        """Advance the animation by one frame.

        Enemies move every 45 frames. Every 15 frames the collectible image
        changes; its new index is returned, otherwise None.
        """
        self.frame_count = (self.frame_count + 1) % FRAME_CYCLE
        if self.frame_count % ENEMY_STEP_FRAMES == 0:
            for index, direction in enumerate(self.enemy_directions):
                if direction is None:
                    self.enemy_directions[index] = self._random_direction()
                self.move_enemy(index)
        if self.frame_count % MUSHROOM_STEP_FRAMES == 0:
            self.mushroom = mushroom_index(self.frame_count // MUSHROOM_STEP_FRAMES)
            return self.mushroom
        return None

    def tick(self, now_ms: int) -> bool:
        """Advance a frame if enough time has passed; return whether it did."""
        if self.finished():
            return False
        if now_ms - self.last_measured_ms < self.frame_rate_ms:
            return False
        self.last_measured_ms = now_ms
        self.advance_frame()
        return True