import pytest

from vecfig.common.errors import ErrorKind, StyleError
from vecfig.engine.style.colors import Color
from vecfig.engine.style.options import (
    BUILTIN_DEFAULTS,
    OPTIONS,
    normalize_option_name,
    validate_intent,
)
from vecfig.engine.style.resolver import ResolvedStyle

# What this tests
# - 閉じたスキーマ: 未知名は UnrecognizedOption、不正値は InvalidValue。
# - 名前の正規化（ハイフン/空白/キャメル）と値の正規化。
# - 組込み既定値が全オプションを埋め、ResolvedStyle のフィールドと一致すること。


@pytest.mark.parametrize("name", ["line-width", "line width", "LineWidth", "line_width", " line_width "])
def test_name_normalization(name):
    assert normalize_option_name(name) == "line_width"


@pytest.mark.parametrize("name", ["glow", "", 3, "linewidth"])
def test_unknown_names(name):
    with pytest.raises(StyleError) as ei:
        normalize_option_name(name)
    assert ei.value.kind is ErrorKind.UNRECOGNIZED_OPTION


def test_validate_intent_normalizes_values():
    intent = validate_intent(
        {"fill": "red", "line-width": 2, "line_style": "dash-dot", "z_order": 3.0, "label": 5}
    )
    assert intent == {
        "fill": Color((238, 0, 0), "red"),
        "line_width": 2.0,
        "line_style": "dash_dot",
        "z_order": 3,
        "label": "5",
    }
    with pytest.raises(TypeError):
        intent["fill"] = "blue"  # type: ignore[index]


@pytest.mark.parametrize(
    "intent",
    [
        {"line_width": -1},
        {"line_width": "thick"},
        {"opacity": 1.5},
        {"line_style": "wavy"},
        {"arrows": "=>"},
        {"z_order": 1.5},
        {"z_order": True},
        {"marker_size": 0},
        {"color": "#zzzzzz"},
        {"label_anchor": "north"},
        {"shading": "linear"},
    ],
)
def test_invalid_values(intent):
    with pytest.raises(StyleError) as ei:
        validate_intent(intent)
    assert ei.value.kind is ErrorKind.INVALID_VALUE


def test_duplicate_after_normalization_and_non_mapping():
    with pytest.raises(StyleError) as ei:
        validate_intent({"line_width": 1, "line-width": 2})
    assert ei.value.kind is ErrorKind.INVALID_VALUE
    with pytest.raises(StyleError):
        validate_intent([("fill", "red")])  # type: ignore[arg-type]


def test_unknown_option_in_intent():
    with pytest.raises(StyleError) as ei:
        validate_intent({"glow": True})
    assert ei.value.kind is ErrorKind.UNRECOGNIZED_OPTION


def test_builtin_defaults_cover_schema():
    assert set(BUILTIN_DEFAULTS) == set(OPTIONS)
    assert set(BUILTIN_DEFAULTS) == set(ResolvedStyle.__dataclass_fields__)
    assert BUILTIN_DEFAULTS["color"] == Color((0, 0, 0), "black")
    assert BUILTIN_DEFAULTS["fill"] is None
    assert BUILTIN_DEFAULTS["line_width"] == 1.0


def test_dialect_support_flags():
    assert OPTIONS["line_width"].supported_by("anything")
    assert OPTIONS["shading"].supported_by("tikz")
    assert not OPTIONS["shading"].supported_by("svg")
    assert not OPTIONS["shading"].droppable_in("svg")
    assert OPTIONS["rounded_corners"].droppable_in("svg")
    assert OPTIONS["css_class"].droppable_in("tikz")
