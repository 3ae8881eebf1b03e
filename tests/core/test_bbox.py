import numpy as np
import pytest

from vecfig.engine.core.bbox import BoundingBox
from vecfig.engine.core.geometry import Group, Path, PathBuilder, Point
from vecfig.engine.core.primitives import circle

# What this tests
# - 曲線の境界は制御多角形ではなく曲線そのもの（導関数の根）で決まる。
# - union / contains / intersects / center / size。


def test_bbox_of_polyline_and_point():
    b = BoundingBox.of(Path.polyline([(0, 1), (3, -2), (1, 4)]))
    assert b.lo == (0.0, -2.0, 0.0)
    assert b.hi == (3.0, 4.0, 0.0)
    assert BoundingBox.of(Point(1, 2, 3)).size == (0.0, 0.0, 0.0)


def test_bbox_of_quadratic_uses_curve_extremum():
    # 制御点 (1, 2) だが曲線の頂点は y=1
    p = PathBuilder((0, 0)).quad_to((1, 2), (2, 0)).build()
    b = BoundingBox.of(p)
    assert b.hi[1] == pytest.approx(1.0)
    assert b.lo[1] == pytest.approx(0.0)


def test_bbox_of_circle_is_tight():
    b = BoundingBox.of(circle((1, 1), 2))
    np.testing.assert_allclose(b.lo[:2], (-1, -1), atol=1e-9)
    np.testing.assert_allclose(b.hi[:2], (3, 3), atol=1e-9)


def test_cubic_extrema():
    p = PathBuilder((0, 0)).cubic_to((0, 1), (1, 1), (1, 0)).build()
    # B(0.5).y = 0.75
    assert BoundingBox.of(p).hi[1] == pytest.approx(0.75)


def test_union_contains_intersects():
    a = BoundingBox.of(Path.line((0, 0), (1, 1)))
    b = BoundingBox.of(Path.line((2, 2), (3, 3)))
    u = a.union(b)
    assert u.lo == (0.0, 0.0, 0.0) and u.hi == (3.0, 3.0, 0.0)
    assert u.center == (1.5, 1.5, 0.0)
    assert not a.intersects(b)
    assert a.intersects(BoundingBox((1, 1, 0), (2, 2, 0)))
    assert u.contains(Point(3, 0))
    assert not u.contains((3.1, 0, 0))
    assert u.contains((3.1, 0, 0), tol=0.2)
    assert BoundingBox.of(Group([Point(0, 0), Point(5, -1)])).hi == (5.0, 0.0, 0.0)


def test_invalid_bbox():
    with pytest.raises(ValueError):
        BoundingBox((1, 0, 0), (0, 0, 0))
    with pytest.raises(ValueError):
        BoundingBox.from_points(np.zeros((0, 3)))
