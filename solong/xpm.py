"""Reading of XPM images into plain pixel grids."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from solong.colors import parse_color

__all__ = [
    "TRANSPARENT",
    "XpmError",
    "XpmImage",
    "strip_comments",
    "quoted_strings",
    "parse_xpm_lines",
    "parse_xpm",
    "load_xpm",
]

# Pixel value used for the colour "None"; the alpha byte marks transparency.
TRANSPARENT = 0xFF000000

_QUOTED = r'"[^"]*(?:"|\Z)'
_BLOCK_COMMENTS = re.compile(_QUOTED + r"|/\*.*?(?:\*/|\Z)", re.DOTALL)
_LINE_COMMENTS = re.compile(_QUOTED + r"|//[^\n]*\n?")
_STRINGS = re.compile(r'"([^"]*)"')
_WORD_SEPARATOR = re.compile(r"[ \t]+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class XpmError(ValueError):
    """Raised when XPM data cannot be read or is malformed."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded image: rows of 0xRRGGBB values, TRANSPARENT where empty."""

    width: int
    height: int
    pixels: tuple[tuple[int, ...], ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at column ``x`` of row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y][x]


def _blank_comment(match: re.Match[str]) -> str:
    found = match.group()
    return found if found.startswith('"') else " " * len(found)


def strip_comments(text: str) -> str:
    """Replace C-style comments outside quoted strings with spaces.

    Block comments are removed first, then line comments; the length of the
    text is kept so positions stay the same.
    """
    without_blocks = _BLOCK_COMMENTS.sub(_blank_comment, text)
    return _LINE_COMMENTS.sub(_blank_comment, without_blocks)


def quoted_strings(text: str) -> Iterator[str]:
    """Yield the contents of each double-quoted string, in order."""
    for match in _STRINGS.finditer(text):
        yield match.group(1)


def _words(text: str) -> list[str]:
    return [word for word in _WORD_SEPARATOR.split(text) if word]


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_xpm_lines(lines: Iterable[str]) -> XpmImage:
    """Decode an image from its XPM strings: header, colours, then pixel rows."""
    source = iter(lines)

    def take(what: str) -> str:
        try:
            return next(source)
        except StopIteration:
            raise XpmError(f"XPM data ends before the {what}") from None

    header = _words(take("header"))
    if len(header) < 4:
        raise XpmError("XPM header needs width, height, colours and characters per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError("XPM header values must be positive")

    # Short keys overwrite earlier definitions; longer keys keep the first one.
    last_wins = cpp <= 2
    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = take("colour definitions")
        words = _words(line[cpp:])
        try:
            at = words.index("c") + 1
        except ValueError:
            raise XpmError(f"colour definition without a 'c' entry: {line!r}") from None
        if at >= len(words):
            raise XpmError(f"colour definition without a colour: {line!r}")
        suffix = words[at + 1] if at + 1 < len(words) else None
        key = line[:cpp]
        if last_wins or key not in palette:
            palette[key] = parse_color(words[at], suffix)

    rows = []
    for _ in range(height):
        line = take("pixel rows")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row shorter than {width} pixels: {line!r}")
        row = []
        for start in range(0, width * cpp, cpp):
            colour = palette.get(line[start:start + cpp], 0)
            row.append(TRANSPARENT if colour == -1 else colour)
        rows.append(tuple(row))
    return XpmImage(width, height, tuple(rows))


def parse_xpm(text: str) -> XpmImage:
    """Decode the text of an XPM file."""
    return parse_xpm_lines(quoted_strings(strip_comments(text)))


def load_xpm(path: str | os.PathLike[str]) -> XpmImage:
    """Read and decode an XPM file."""
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {os.fspath(path)}: {exc.strerror}") from exc
    return parse_xpm(text)