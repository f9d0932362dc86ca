import random

import pytest

from solong.game import (
    ENEMY_RADIUS,
    FRAME_RATE_MS,
    Direction,
    Game,
    mushroom_index,
    next_position,
)
from solong.mapfile import Coord, parse_level


class ScriptedRng:
    """Returns queued values, then zeros."""

    def __init__(self, values=()):
        self.values = list(values)

    def randrange(self, stop):
        value = self.values.pop(0) if self.values else 0
        assert 0 <= value < stop
        return value


CORRIDOR = "1111111\n1P0C0E1\n1111111\n"

FIELD = "\n".join(
    [
        "111111111111",
        "1PC000000001",
        "100000000001",
        "100000000001",
        "1E0000000001",
        "111111111111",
    ]
)


def corridor_game():
    return Game(parse_level(CORRIDOR), ScriptedRng())


def field_game():
    # (2,3) is too close to the player, (4,8) is free, (4,9) is next to (4,8).
    return Game(parse_level(FIELD), ScriptedRng([2, 3, 4, 8, 4, 9]))


def test_direction_values_follow_source_order():
    assert [d.value for d in Direction] == [0, 1, 2, 3]
    assert Direction(0) is Direction.UP
    assert Direction(3) is Direction.RIGHT


def test_next_position_steps():
    start = Coord(2, 2)
    assert next_position(start, Direction.UP) == Coord(1, 2)
    assert next_position(start, Direction.DOWN) == Coord(3, 2)
    assert next_position(start, Direction.LEFT) == Coord(2, 1)
    assert next_position(start, Direction.RIGHT) == Coord(2, 3)


@pytest.mark.parametrize(
    "there, back",
    [(Direction.UP, Direction.DOWN), (Direction.LEFT, Direction.RIGHT)],
)
def test_next_position_opposites_return(there, back):
    start = Coord(5, 7)
    assert next_position(next_position(start, there), back) == start


def test_mushroom_index_sequence():
    assert [mushroom_index(n) for n in range(7)] == [0, 1, 2, 3, 2, 1, 0]


def test_mushroom_index_is_periodic():
    assert all(mushroom_index(n) == mushroom_index(n + 6) for n in range(30))


def test_no_enemies_when_rng_hits_walls():
    game = corridor_game()
    assert game.enemies == []
    assert game.spawn_enemies() == 0


def test_press_moves_player_and_counts():
    game = corridor_game()
    assert game.press(Direction.RIGHT) is True
    assert game.player == Coord(1, 2)
    assert game.player_last == Coord(1, 1)
    assert game.moves == 1


def test_press_into_wall_is_refused():
    game = corridor_game()
    assert game.can_move(Direction.UP) is False
    assert game.press(Direction.UP) is False
    assert game.moves == 0
    assert game.player == Coord(1, 1)


def test_collecting_and_winning():
    game = corridor_game()
    game.press(Direction.RIGHT)
    game.press(Direction.RIGHT)
    assert game.collected == 1
    assert game.tile(Coord(1, 3)) == "0"
    assert game.collectibles == [None]
    assert game.remaining_collectibles == []
    game.press(Direction.RIGHT)
    game.press(Direction.RIGHT)
    assert game.player == game.exit
    assert game.won() and game.finished()
    assert game.press(Direction.LEFT) is False
    assert game.moves == 4


def test_exit_without_collectibles_is_not_a_win():
    game = Game(parse_level("1111111\n1PE0C01\n1111111\n"), ScriptedRng())
    game.press(Direction.RIGHT)
    assert game.player == game.exit
    assert game.won() is False
    assert game.press(Direction.RIGHT) is True


def test_has_close_player_or_enemy():
    game = Game(parse_level(FIELD), ScriptedRng())
    assert game.has_close_player_or_enemy(1 + ENEMY_RADIUS, 1 + ENEMY_RADIUS) is True
    assert game.has_close_player_or_enemy(1 + ENEMY_RADIUS, 2 + ENEMY_RADIUS) is False


def test_spawn_respects_distance():
    game = field_game()
    assert game.enemies == [Coord(4, 8)]
    assert game.enemy_directions == [None]
    assert game.tile(Coord(4, 8)) == "N"
    assert game.tile(Coord(4, 9)) == "0"
    assert game.tile(Coord(2, 3)) == "0"


def test_random_spawn_invariants():
    rows = ["1" * 20] + ["1P" + "0" * 16 + "C1"] + ["1" + "0" * 18 + "1"] * 12
    rows += ["1" + "0" * 17 + "E1", "1" * 20]
    game = Game(parse_level("\n".join(rows)), random.Random(7))
    cells = [
        Coord(r, c)
        for r, line in enumerate(game.grid)
        for c, char in enumerate(line)
        if char == "N"
    ]
    assert cells == game.enemies
    for i, a in enumerate(game.enemies):
        assert max(abs(a.row - 1), abs(a.col - 1)) > ENEMY_RADIUS
        for b in game.enemies[i + 1:]:
            assert max(abs(a.row - b.row), abs(a.col - b.col)) > ENEMY_RADIUS


def test_enemy_moves_in_its_direction():
    game = field_game()
    game.enemy_directions[0] = Direction.RIGHT
    assert game.move_enemy(0) is True
    assert game.enemies[0] == Coord(4, 9)
    assert game.tile(Coord(4, 8)) == "0"
    assert game.tile(Coord(4, 9)) == "N"


def test_blocked_enemy_turns_at_random():
    game = field_game()
    game.enemy_directions[0] = Direction.DOWN
    game.rng.values.append(Direction.LEFT.value)
    assert game.move_enemy(0) is True
    assert game.enemy_directions[0] is Direction.LEFT
    assert game.enemies[0] == Coord(4, 7)


def test_enemy_stays_when_both_tries_blocked():
    game = field_game()
    game.enemy_directions[0] = Direction.DOWN
    game.rng.values.append(Direction.DOWN.value)
    assert game.move_enemy(0) is False
    assert game.enemies[0] == Coord(4, 8)
    assert game.enemy_directions[0] is Direction.DOWN


def test_enemy_cannot_enter_exit():
    level = parse_level(FIELD)
    game = Game(level, ScriptedRng([4, 5]))
    assert game.enemies == [Coord(4, 5)]
    for _ in range(3):
        game.enemy_directions[0] = Direction.LEFT
        game.move_enemy(0)
    assert game.enemies[0] == Coord(4, 2)
    game.enemy_directions[0] = Direction.LEFT
    game.rng.values.append(Direction.DOWN.value)
    assert game.move_enemy(0) is False
    assert game.tile(level.exit) == "E"


def walk_above_enemy(game):
    for direction in [Direction.DOWN] * 2 + [Direction.RIGHT] * 7:
        assert game.press(direction)
    assert game.player == Coord(3, 8)


def test_player_walking_into_enemy_loses():
    game = field_game()
    walk_above_enemy(game)
    assert game.finished() is False
    game.press(Direction.DOWN)
    assert game.lost() and game.finished()
    assert game.press(Direction.UP) is False


def test_enemy_catching_player_loses():
    game = field_game()
    walk_above_enemy(game)
    game.enemy_directions[0] = Direction.UP
    assert game.move_enemy(0) is True
    assert game.lost()
    assert game.move_enemy(0) is False


def test_advance_frame_moves_enemies_and_animates():
    game = field_game()
    game.frame_count = 44
    game.rng.values.append(Direction.RIGHT.value)
    shown = game.advance_frame()
    assert game.frame_count == 45
    assert game.enemy_directions[0] is Direction.RIGHT
    assert game.enemies[0] == Coord(4, 9)
    assert shown == mushroom_index(3)
    assert game.mushroom == shown


def test_advance_frame_between_steps_changes_nothing():
    game = field_game()
    assert game.advance_frame() is None
    assert game.frame_count == 1
    assert game.enemies == [Coord(4, 8)]
    assert game.enemy_directions == [None]


def test_frame_count_wraps():
    game = corridor_game()
    game.frame_count = 179
    assert game.advance_frame() == 0
    assert game.frame_count == 0


def test_tick_waits_for_frame_rate():
    game = corridor_game()
    assert game.tick(FRAME_RATE_MS - 1) is False
    assert game.frame_count == 0
    assert game.tick(FRAME_RATE_MS) is True
    assert game.frame_count == 1
    assert game.last_measured_ms == FRAME_RATE_MS
    assert game.tick(FRAME_RATE_MS + 1) is False


def test_tick_stops_after_game_ends():
    game = corridor_game()
    for _ in range(4):
        game.press(Direction.RIGHT)
    assert game.tick(10_000) is False
    assert game.frame_count == 0