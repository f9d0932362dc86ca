"""Window, images and event loop of the game."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from enum import IntEnum
from pathlib import Path

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from solong.game import FRAME_RATE_MS, Direction, Game, next_position  # noqa: E402
from solong.mapfile import MapError, load_level  # noqa: E402
from solong.xpm import TRANSPARENT, XpmError, XpmImage, load_xpm  # noqa: E402

__all__ = [
    "DEFAULT_ASSET_DIR",
    "Assets",
    "Renderer",
    "xpm_to_surface",
    "key_to_direction",
    "run",
    "main",
]

DEFAULT_ASSET_DIR = "xpms"
WINDOW_TITLE = "So Long"
COUNTER_COLOR = (0xFF, 0x14, 0x93)
COUNTER_LABEL = "moves :"
FONT_SIZE = 20


class _ExitCode(IntEnum):
    OK = 0
    MLX_ERROR = 1
    IMAGE_ERROR = 2
    ARG_ERROR = 3
    MAP_ERROR = 4
    ALLOC_ERROR = 5


_KEYS = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
}


def _report(message: str) -> None:
    print("Error")
    print(message)


def xpm_to_surface(image: XpmImage) -> pygame.Surface:
    """Turn a decoded XPM image into a surface with per-pixel alpha."""
    surface = pygame.Surface((image.width, image.height), pygame.SRCALPHA, 32)
    for y, row in enumerate(image.pixels):
        for x, colour in enumerate(row):
            if colour == TRANSPARENT:
                surface.set_at((x, y), (0, 0, 0, 0))
            else:
                surface.set_at(
                    (x, y),
                    ((colour >> 16) & 0xFF, (colour >> 8) & 0xFF, colour & 0xFF, 0xFF),
                )
    return surface


def key_to_direction(key: int) -> Direction | None:
    """Map an arrow key to a direction; other keys give None."""
    return _KEYS.get(key)


@dataclass(frozen=True)
class Assets:
    """Every image the game draws."""

    wall: pygame.Surface
    background: pygame.Surface
    player_down: pygame.Surface
    player_up: pygame.Surface
    player_left: pygame.Surface
    player_right: pygame.Surface
    gate_close: pygame.Surface
    gate_open: pygame.Surface
    gate_close_with_man: pygame.Surface
    gate_open_with_man: pygame.Surface
    stats_background: pygame.Surface
    you_won: pygame.Surface
    you_lose: pygame.Surface
    enemy: pygame.Surface
    enemy_left: pygame.Surface
    enemy_right: pygame.Surface
    arrest: pygame.Surface
    mushrooms: tuple

    FILES = {
        "wall": "wall_70.xpm",
        "background": "background_linux_70.xpm",
        "player_down": "standing_man_linux.xpm",
        "player_up": "bob_up_70.xpm",
        "player_left": "walking_left_linux.xpm",
        "player_right": "walking_right_linux.xpm",
        "gate_close": "gate_close_linux.xpm",
        "gate_open": "gate_open_linux.xpm",
        "gate_close_with_man": "close_gate_p_70.xpm",
        "gate_open_with_man": "exit_open_p_70.xpm",
        "stats_background": "background_try.xpm",
        "you_won": "you_won.xpm",
        "you_lose": "you_lose.xpm",
        "enemy": "standing_enemy_linux.xpm",
        "enemy_left": "enemy_walking_left_linux.xpm",
        "enemy_right": "enemy_walking_right_linux.xpm",
        "arrest": "arresting_70.xpm",
    }
    MUSHROOM_FILES = (
        "mushroom1_fix_71.xpm",
        "mushroom_1_70.xpm",
        "mushroom_2_70.xpm",
        "mushroom_3_70.xpm",
    )

    @classmethod
    def load(cls, directory: str | os.PathLike[str] = DEFAULT_ASSET_DIR) -> Assets:
        """Load all images from ``directory``; raise XpmError if one fails."""
        base = Path(directory)

        def read(name: str) -> pygame.Surface:
            try:
                return xpm_to_surface(load_xpm(base / name))
            except XpmError as exc:
                raise XpmError(f"Load image error: {exc}") from exc

        images = {field: read(name) for field, name in cls.FILES.items()}
        mushrooms = tuple(read(name) for name in cls.MUSHROOM_FILES)
        expected = {f.name for f in fields(cls)} - {"mushrooms"}
        if set(images) != expected:
            raise XpmError("Load image error: incomplete image list")
        return cls(mushrooms=mushrooms, **images)


def _centre(total: int, size: int) -> int:
    return int((total - size) / 2)


class Renderer:
    """Draws the whole scene of a game onto a surface."""

    def __init__(self, assets: Assets) -> None:
        self.assets = assets
        self.tile_width, self.tile_height = assets.wall.get_size()
        self._font: pygame.font.Font | None = None

    def window_size(self, game: Game) -> tuple[int, int]:
        """Pixel size of a window showing the whole map."""
        return game.width * self.tile_width, game.height * self.tile_height

    def counter_text(self, game: Game) -> str:
        """The move counter as shown on screen."""
        return f"{COUNTER_LABEL} {game.moves}"

    def _at(self, row: int, col: int) -> tuple[int, int]:
        return col * self.tile_width, row * self.tile_height

    def _player_image(self, game: Game) -> pygame.Surface:
        images = {
            Direction.UP: self.assets.player_up,
            Direction.DOWN: self.assets.player_down,
            Direction.LEFT: self.assets.player_left,
            Direction.RIGHT: self.assets.player_right,
        }
        for direction, image in images.items():
            if next_position(game.player_last, direction) == game.player:
                return image
        return self.assets.player_down

    def _enemy_image(self, direction: Direction | None) -> pygame.Surface:
        if direction is Direction.LEFT:
            return self.assets.enemy_left
        if direction is Direction.RIGHT:
            return self.assets.enemy_right
        return self.assets.enemy

    def _font_for_text(self) -> pygame.font.Font:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, FONT_SIZE)
        return self._font

    def _put_string(self, surface: pygame.Surface, x: int, y: int, text: str) -> None:
        font = self._font_for_text()
        rendered = font.render(text, True, COUNTER_COLOR)
        surface.blit(rendered, (x, y - (font.get_height() * 3) // 4))

    def _draw_counter(self, surface: pygame.Surface, game: Game) -> None:
        left = (game.width - 2) * self.tile_width
        top = (game.height - 1) * self.tile_height
        surface.blit(self.assets.stats_background, (left, top + 10))
        self._put_string(surface, left + 5, top + 30, COUNTER_LABEL)
        self._put_string(surface, left + 70, top + 30, str(game.moves))

    def _draw_banner(self, surface: pygame.Surface, game: Game, image: pygame.Surface) -> None:
        width, height = self.window_size(game)
        surface.blit(
            image,
            (_centre(width, image.get_width()), _centre(height, image.get_height())),
        )

    def draw(self, surface: pygame.Surface, game: Game) -> None:
        """Draw map, pieces, counter and any end-of-game banner."""
        assets = self.assets
        for row, line in enumerate(game.grid):
            for col, char in enumerate(line):
                position = self._at(row, col)
                surface.blit(assets.background, position)
                if char == "1":
                    surface.blit(assets.wall, position)

        all_collected = game.collected == game.total_collectibles
        gate = assets.gate_open if all_collected else assets.gate_close
        surface.blit(gate, self._at(game.exit.row, game.exit.col))

        mushroom = assets.mushrooms[game.mushroom]
        for coord in game.remaining_collectibles:
            surface.blit(mushroom, self._at(coord.row, coord.col))

        for coord, direction in zip(game.enemies, game.enemy_directions):
            surface.blit(self._enemy_image(direction), self._at(coord.row, coord.col))

        player_at = self._at(game.player.row, game.player.col)
        banner = None
        if game.lost():
            surface.blit(assets.arrest, player_at)
            banner = assets.you_lose
        elif game.player == game.exit:
            if all_collected:
                surface.blit(assets.gate_open_with_man, player_at)
                banner = assets.you_won
            else:
                surface.blit(assets.gate_close_with_man, player_at)
        else:
            surface.blit(self._player_image(game), player_at)

        self._draw_counter(surface, game)
        if banner is not None:
            self._draw_banner(surface, game, banner)


def run(map_path: str | os.PathLike[str], asset_dir: str | os.PathLike[str] = DEFAULT_ASSET_DIR) -> int:
    """Play the level at ``map_path``; return the process exit status."""
    try:
        level = load_level(map_path)
    except MapError as exc:
        _report(str(exc))
        return _ExitCode.MAP_ERROR
    try:
        assets = Assets.load(asset_dir)
    except XpmError:
        _report("Load image error")
        return _ExitCode.IMAGE_ERROR

    pygame.init()
    try:
        game = Game(level)
        renderer = Renderer(assets)
        try:
            window = pygame.display.set_mode(renderer.window_size(game))
        except pygame.error as exc:
            _report(str(exc))
            return _ExitCode.MLX_ERROR
        pygame.display.set_caption(WINDOW_TITLE)
        clock = pygame.time.Clock()
        loss_announced = False
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    direction = key_to_direction(event.key)
                    if direction is not None and game.press(direction):
                        print(f"number of step done is {game.moves}")
                elif event.type == pygame.KEYUP and event.key == pygame.K_ESCAPE:
                    running = False
            game.tick(pygame.time.get_ticks())
            if game.lost() and not loss_announced:
                print("You lost")
                loss_announced = True
            renderer.draw(window, game)
            pygame.display.flip()
            clock.tick(max(1, 4000 // FRAME_RATE_MS))
        print("Exited")
        return _ExitCode.OK
    finally:
        pygame.quit()


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``solong <path_to_ber_map>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "solong"
        print(f"Usage: {prog} <path_to_ber_map>")
        return _ExitCode.ARG_ERROR
    return int(run(args[0]))


if __name__ == "__main__":
    sys.exit(main())