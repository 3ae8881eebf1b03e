import numpy as np
import pytest

from vecfig.common.errors import ErrorKind, ProjectionError
from vecfig.engine.core.geometry import Path, Point
from vecfig.engine.projection.canvas import AxisRange, CanvasMap, resolve_ranges, view_extents
from vecfig.engine.projection.view import ViewProjection

# What this tests
# - 退化した軸範囲は必ず ProjectionError(DegenerateAxis)（0 除算や NaN を出さない）。
# - uniform / stretch の写像と逆写像。
# - 未設定の軸範囲の自動決定と、3D の 8 隅射影による範囲。


@pytest.mark.parametrize("lo, hi", [(1.0, 1.0), (0.0, float("nan")), (float("inf"), 2.0)])
def test_degenerate_axis_range(lo, hi):
    with pytest.raises(ProjectionError) as ei:
        AxisRange(lo, hi)
    assert ei.value.kind is ErrorKind.DEGENERATE_AXIS


def test_inverted_axis_range_is_value_error():
    with pytest.raises(ValueError):
        AxisRange(2, 1)


def test_uniform_preserves_aspect_and_anchors_origin():
    m = CanvasMap(np.array([0, 0]), np.array([20, 10]), (1.0, 1.0), "uniform")
    uv = m.forward(np.array([[0, 0], [20, 10], [10, 5]]))
    np.testing.assert_allclose(uv, [[0, 0], [1.0, 0.5], [0.5, 0.25]])


def test_stretch_fills_canvas():
    m = CanvasMap(np.array([0, 0]), np.array([20, 10]), (4.0, 2.0), "stretch")
    np.testing.assert_allclose(m.forward(np.array([[20, 10]])), [[4.0, 2.0]])


@pytest.mark.parametrize("mode", ["uniform", "stretch"])
def test_inverse_round_trip(mode):
    m = CanvasMap(np.array([-3, 2]), np.array([5, 9]), (3.0, 2.0), mode)
    xy = np.array([[-3, 2], [0.25, 7.5], [5, 9]])
    np.testing.assert_allclose(m.inverse(m.forward(xy)), xy)


def test_canvas_map_rejects_zero_span_and_unknown_mode():
    with pytest.raises(ProjectionError):
        CanvasMap(np.array([0, 0]), np.array([1, 0]))
    with pytest.raises(ValueError):
        CanvasMap(np.array([0, 0]), np.array([1, 1]), mode="fit")  # type: ignore[arg-type]


def test_resolve_ranges_from_geometry():
    shapes = [Path.line((1, 2), (3, 6)), Point(-1, 4)]
    out = resolve_ranges({"x": None, "y": AxisRange(0, 10)}, shapes, 2)
    assert out["x"] == AxisRange(-1, 3)
    assert out["y"] == AxisRange(0, 10)


def test_resolve_ranges_empty_scene_uses_unit_range():
    out = resolve_ranges({"x": None, "y": None}, [], 2)
    assert out == {"x": AxisRange(0, 1), "y": AxisRange(0, 1)}


def test_resolve_ranges_zero_span_geometry_fails():
    with pytest.raises(ProjectionError) as ei:
        resolve_ranges({"x": None, "y": None}, [Path.line((0, 1), (5, 1))], 2)
    assert ei.value.kind is ErrorKind.DEGENERATE_AXIS


def test_view_extents_3d_uses_projected_corners():
    ranges = {"x": AxisRange(0, 1), "y": AxisRange(0, 2), "z": AxisRange(0, 3)}
    front = ViewProjection.orthographic(elevation=0, azimuth=-90)
    lo, hi = view_extents(ranges, 3, front)
    np.testing.assert_allclose(lo, [0, 0], atol=1e-12)
    np.testing.assert_allclose(hi, [1, 3], atol=1e-12)
    lo2, hi2 = view_extents(ranges, 2, None)
    np.testing.assert_allclose(hi2, [1, 2])
