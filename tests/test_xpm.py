import pytest

from solong.colors import lookup_color, parse_color
from solong.xpm import (
    TRANSPARENT,
    XpmError,
    load_xpm,
    parse_xpm,
    parse_xpm_lines,
    quoted_strings,
    strip_comments,
)

SAMPLE = """/* XPM */
static char *img[] = {
/* columns rows colors chars-per-pixel */
"3 2 3 1 ",
"  c None",
". c #FF0000",
"x c red",
" .x",
".x ",
};
"""


def test_parse_sample_dimensions():
    image = parse_xpm(SAMPLE)
    assert (image.width, image.height) == (3, 2)
    assert len(image.pixels) == image.height
    assert all(len(row) == image.width for row in image.pixels)


def test_parse_sample_pixels():
    image = parse_xpm(SAMPLE)
    assert image.pixel(0, 0) == TRANSPARENT
    assert image.pixel(1, 0) == parse_color("#FF0000")
    assert image.pixel(2, 0) == lookup_color("red")
    assert image.pixel(0, 1) == parse_color("#FF0000")
    assert image.pixel(1, 1) == lookup_color("red")
    assert image.pixel(2, 1) == TRANSPARENT


def test_pixel_out_of_range():
    image = parse_xpm(SAMPLE)
    with pytest.raises(IndexError):
        image.pixel(3, 0)
    with pytest.raises(IndexError):
        image.pixel(0, -1)


def test_two_characters_per_pixel():
    image = parse_xpm_lines(["2 1 2 2", "aa c #000001", "bb c #000002", "bbaa"])
    assert image.pixels == ((parse_color("#000002"), parse_color("#000001")),)


def test_short_keys_last_definition_wins():
    image = parse_xpm_lines(["1 1 2 1", "a c #000001", "a c #000002", "a"])
    assert image.pixel(0, 0) == parse_color("#000002")


def test_long_keys_first_definition_wins():
    image = parse_xpm_lines(["1 1 2 3", "abc c #000001", "abc c #000002", "abc"])
    assert image.pixel(0, 0) == parse_color("#000001")


def test_two_word_colour_name():
    image = parse_xpm_lines(["1 1 1 1", "a c dark red", "a"])
    assert image.pixel(0, 0) == lookup_color("dark red")


def test_undefined_key_is_black():
    image = parse_xpm_lines(["2 1 1 1", "a c white", "ab"])
    assert image.pixel(0, 0) == lookup_color("white")
    assert image.pixel(1, 0) == lookup_color("black")


def test_strip_comments_keeps_length_and_strings():
    text = 'a /* gone */ "keep /* this */" // tail\nb'
    stripped = strip_comments(text)
    assert len(stripped) == len(text)
    assert "gone" not in stripped
    assert "tail" not in stripped
    assert '"keep /* this */"' in stripped
    assert stripped.endswith("b")


def test_quoted_strings_in_order():
    assert list(quoted_strings('x "one" y "two" "')) == ["one", "two"]


@pytest.mark.parametrize(
    "lines",
    [
        ["0 1 1 1", "a c red", "a"],
        ["1 1 1"],
        ["x 1 1 1", "a c red", "a"],
        ["1 1 1 1", "a red", "a"],
        ["1 1 1 1", "a c", "a"],
        ["1 2 1 1", "a c red", "a"],
        ["2 1 1 1", "a c red", "a"],
        [],
    ],
)
def test_malformed_data(lines):
    with pytest.raises(XpmError):
        parse_xpm_lines(lines)


def test_load_xpm_from_file(tmp_path):
    path = tmp_path / "image.xpm"
    path.write_text(SAMPLE)
    assert load_xpm(path) == parse_xpm(SAMPLE)


def test_load_missing_file(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(tmp_path / "absent.xpm")