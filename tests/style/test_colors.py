import pytest

from vecfig.engine.style.colors import NAMED_COLORS, Color, parse_color, parse_hex_color_str

# What this tests
# - 名前/Hex/タプル（0..1 と 0..255）の正規化と "none"。
# - 不正指定は ValueError。


def test_named_colors_follow_palette():
    assert parse_color("red") == Color((238, 0, 0), "red")
    assert parse_color("Grey") == Color((136, 136, 136), "gray")
    assert parse_color("white").hex == "#eeeeee"
    assert len(NAMED_COLORS) == 19


def test_hex_and_tuples():
    assert parse_color("#FF8000") == Color((255, 128, 0))
    assert parse_color("0x00ff00ff") == Color((0, 255, 0))
    assert parse_color((1.0, 0.5, 0.0)) == Color((255, 128, 0))
    assert parse_color([0, 128, 255]) == Color((0, 128, 255))
    assert parse_color("none") is None
    assert parse_color(None) is None


@pytest.mark.parametrize(
    "value",
    ["#12345", "#gg0000", "#ff000080", "chartreuse-ish", (1, 2), (300, 0, 0), (True, 0, 0), 3],
)
def test_invalid_colors(value):
    with pytest.raises(ValueError):
        parse_color(value)


def test_parse_hex_accepts_prefixes():
    assert parse_hex_color_str("  abcdef ") == (0xAB, 0xCD, 0xEF)
