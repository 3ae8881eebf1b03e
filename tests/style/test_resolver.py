import pytest

from vecfig.engine.style.colors import Color
from vecfig.engine.style.options import BUILTIN_DEFAULTS, validate_intent
from vecfig.engine.style.resolver import (
    ResolvedStyle,
    StyleResolver,
    effective_z_order_mode,
    order_objects,
    unsupported_options,
)

# What this tests
# - 組込み < 図の既定 < グループ < オブジェクト のキー単位の疎マージ。
# - 解決結果は常に全オプションが埋まった不変値。
# - 組込み既定値は明示的に差し替え可能（大域状態なし）。
# - z 順（insertion / explicit の安定ソート、明示があれば insertion でも並べ替え）と方言非対応オプションの抽出。

RED = Color((238, 0, 0), "red")
BLUE = Color((0, 0, 238), "blue")


def test_sparse_merge_precedence():
    r = StyleResolver()
    s = r.resolve(
        {"fill": "blue"},
        group={"fill": "red", "opacity": 0.5},
        figure_default={"line_width": 2, "opacity": 0.25, "fill": "green"},
    )
    assert s.fill == BLUE
    assert s.opacity == 0.5
    assert s.line_width == 2.0
    assert s.color == BUILTIN_DEFAULTS["color"]


def test_resolved_style_is_dense_and_frozen():
    s = StyleResolver().resolve()
    assert s.as_dict() == dict(BUILTIN_DEFAULTS)
    with pytest.raises(AttributeError):
        s.fill = RED  # type: ignore[misc]


def test_custom_builtin_defaults_are_explicit():
    custom = dict(BUILTIN_DEFAULTS)
    custom["line_width"] = 0.4
    r = StyleResolver(custom)
    assert r.resolve().line_width == 0.4
    assert StyleResolver().resolve().line_width == 1.0
    with pytest.raises(ValueError):
        StyleResolver({"line_width": 1.0})


def _styles(*z: int) -> list[ResolvedStyle]:
    r = StyleResolver()
    return [r.resolve({"z_order": v}) for v in z]


def test_order_insertion_ignores_z_order():
    objs = ["a", "b", "c"]
    out = order_objects(objs, _styles(5, 0, -1), "insertion")
    assert [o for o, _ in out] == ["a", "b", "c"]


def test_order_explicit_is_stable_ascending():
    objs = ["a", "b", "c", "d"]
    out = order_objects(objs, _styles(2, 0, 2, -1), "explicit")
    assert [o for o, _ in out] == ["d", "b", "a", "c"]


def test_order_explicit_without_z_keeps_insertion():
    objs = ["a", "b", "c"]
    out = order_objects(objs, _styles(0, 0, 0), "explicit")
    assert [o for o, _ in out] == objs


def test_effective_mode_switches_when_any_intent_sets_z_order():
    plain = validate_intent({"color": "red"})
    assert effective_z_order_mode("insertion", [plain, None, {}]) == "insertion"
    assert effective_z_order_mode("insertion", [plain, None, validate_intent({"z-order": 0})]) == "explicit"
    assert effective_z_order_mode("explicit", []) == "explicit"


def test_order_errors():
    with pytest.raises(ValueError):
        order_objects(["a"], [], "insertion")
    with pytest.raises(ValueError):
        order_objects(["a"], _styles(0), "random")  # type: ignore[arg-type]


def test_unsupported_options_split():
    r = StyleResolver()
    s = r.resolve({"shading": "ball", "rounded_corners": 2, "css_class": "edge"})
    assert unsupported_options(s, "tikz") == (["css_class"], [])
    assert unsupported_options(s, "svg") == (["rounded_corners"], ["shading"])
    # 既定値のままなら問題にしない
    assert unsupported_options(r.resolve(), "svg") == ([], [])
