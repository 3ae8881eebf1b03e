import math

import numpy as np
import pytest

from vecfig.engine.core.bbox import BoundingBox
from vecfig.engine.core.geometry import Group, Path, PathBuilder, Point
from vecfig.engine.core.placement import (
    align_to,
    fit_into,
    pivot_of,
    reflect,
    rotate,
    scale,
    transform_combined,
)
from vecfig.engine.core.primitives import rectangle

# What this tests
# - 変換の中心は既定で厳密な境界の中心（Group・曲線の極値を含む）、auto_center=False で pivot。
# - transform_combined は変換前の中心で スケール → 回転 → 移動。
# - fit_into は縦横比を保って中央へ、幅 0 の方向は倍率を決めない。
# - align_to はアンカー名の表記ゆれを吸収し、未知の名前は ValueError。


def test_pivot_is_bbox_center_including_curve_extrema():
    arc_like = PathBuilder((0, 0)).quad_to((1, 2), (2, 0)).build()
    assert pivot_of(arc_like) == pytest.approx((1.0, 0.5, 0.0))
    assert pivot_of(arc_like, auto_center=False, pivot=(3, 4, 0)) == (3.0, 4.0, 0.0)


def test_group_rotates_about_its_own_bounds():
    g = Group([Path.line((10, 0), (12, 0)), Point(11, 2)])
    out = rotate(g, math.pi)
    assert BoundingBox.of(out).lo == pytest.approx(BoundingBox.of(g).lo)
    np.testing.assert_allclose(out.items[1].as_array(), [11, 0, 0], atol=1e-12)
    about_origin = rotate(g, math.pi, auto_center=False)
    np.testing.assert_allclose(about_origin.items[1].as_array(), [-11, -2, 0], atol=1e-12)
    with pytest.raises(ValueError):
        rotate(g, 1.0, axis="w")


def test_scale_and_reflect_keep_center():
    r = rectangle((2, 2), (6, 4))
    big = scale(r, 2)
    box = BoundingBox.of(big)
    assert box.lo[:2] == pytest.approx((0, 1)) and box.hi[:2] == pytest.approx((8, 5))
    flipped = reflect(Path.line((0, 0), (4, 2)), "x")
    np.testing.assert_allclose(flipped.coords[:, :2], [[4, 0], [0, 2]])


def test_transform_combined_uses_pre_transform_pivot():
    p = Path.line((0, 0), (2, 0))
    out = transform_combined(p, scale_factors=(2, 2, 1), rotate_angles=(0, 0, math.pi / 2), translate=(10, 0, 0))
    np.testing.assert_allclose(out.coords[:, :2], [[11, -2], [11, 2]], atol=1e-12)
    assert transform_combined(p) == p


def test_fit_into_keeps_aspect_and_centers():
    r = rectangle((0, 0), (4, 2))
    out = fit_into(r, (0, 0), (10, 10))
    box = BoundingBox.of(out)
    assert box.lo[:2] == pytest.approx((0, 2.5)) and box.hi[:2] == pytest.approx((10, 7.5))
    stretched = BoundingBox.of(fit_into(r, (0, 0), (10, 10), keep_aspect=False, margin=1))
    assert stretched.lo[:2] == pytest.approx((1, 1)) and stretched.hi[:2] == pytest.approx((9, 9))


def test_fit_into_flat_shapes_and_empty_target():
    flat = fit_into(Path.line((0, 0), (2, 0)), (0, 0), (4, 8))
    np.testing.assert_allclose(flat.coords[:, :2], [[0, 4], [4, 4]])
    assert fit_into(Point(1, 1), (0, 0), (4, 4)) == Point(2, 2)
    with pytest.raises(ValueError):
        fit_into(flat, (0, 0), (2, 2), margin=1)


@pytest.mark.parametrize(
    "anchor, lo",
    [("south west", (5, 5)), ("North-East", (1, 3)), ("center", (3, 4)), ("west", (5, 4))],
)
def test_align_to_anchor(anchor, lo):
    out = align_to(rectangle((0, 0), (4, 2)), anchor, (5, 5))
    assert BoundingBox.of(out).lo[:2] == pytest.approx(lo)


def test_align_to_rejects_unknown_anchor():
    with pytest.raises(ValueError):
        align_to(Point(0, 0), "top", (0, 0))
