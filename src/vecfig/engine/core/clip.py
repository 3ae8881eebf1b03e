"""
どこで: `vecfig.engine.core.clip`
何を: 点とパスの包含判定、パス同士の交差判定/交点列挙、軸範囲に対する点ごとの内外フラグ。
なぜ: 投影エンジンが範囲外フラグを付け、コーデックがクリップ方針を決めるための純粋な判定を提供するため。

実装メモ:
- 包含/交差は Shapely（`Polygon`/`LineString`）で XY 平面上に判定する（z は無視）。
- 曲線区間は `Path.flatten(samples)` で折れ線近似してから判定する。
- 範囲フラグは NumPy のベクトル演算のみで計算する。
"""

from __future__ import annotations

import numpy as np
import shapely
from shapely.geometry import LineString, Polygon
from shapely.geometry import Point as _SPoint
from shapely.geometry.base import BaseGeometry

from .geometry import Path, Point, PointLike, as_vec3

_FLATTEN_SAMPLES = 32


def _as_line_geometry(path: Path, samples: int) -> BaseGeometry:
    xy = path.flatten(samples)[:, :2]
    if path.closed:
        return LineString(np.vstack([xy, xy[:1]]))
    return LineString(xy)


def _as_area_geometry(path: Path, samples: int) -> Polygon:
    xy = path.flatten(samples)[:, :2]
    poly = Polygon(xy)
    if not poly.is_valid:
        # 自己交差リングは偶奇規則に近い形へ正規化
        poly = shapely.make_valid(poly)
    return poly


def point_in_path(
    point: PointLike,
    path: Path,
    *,
    tol: float = 1e-9,
    samples: int = _FLATTEN_SAMPLES,
) -> bool:
    """点がパスに含まれるかを判定する。

    - 閉路: 内部または境界上なら True（曲線から自動で閉じたパスも閉路扱い）。
    - 開路: パス上（距離 `tol` 以内）なら True。
    """
    v = as_vec3(point)
    sp = _SPoint(float(v[0]), float(v[1]))
    closes_itself = np.allclose(path.coords[0, :2], path.coords[-1, :2]) and path.n_vertices >= 4
    if path.closed or closes_itself:
        area = _as_area_geometry(path, samples)
        return bool(area.covers(sp) or area.distance(sp) <= tol)
    return bool(_as_line_geometry(path, samples).distance(sp) <= tol)


def paths_intersect(a: Path, b: Path, *, samples: int = _FLATTEN_SAMPLES) -> bool:
    """2 本のパス（の線としての軌跡）が交差/接触するか。"""
    return bool(_as_line_geometry(a, samples).intersects(_as_line_geometry(b, samples)))


def intersection_points(
    a: Path, b: Path, *, samples: int = _FLATTEN_SAMPLES
) -> list[tuple[float, float]]:
    """2 本のパスの交点（XY）を決定的な順序（x, y 昇順）で返す。

    重なり区間がある場合はその区間の端点を返す。
    """
    inter = _as_line_geometry(a, samples).intersection(_as_line_geometry(b, samples))
    if inter.is_empty:
        return []
    coords = shapely.get_coordinates(inter)
    uniq = {(float(x), float(y)) for x, y in np.round(coords, 12)}
    return sorted(uniq)


def inside_mask(
    coords: np.ndarray,
    lo: np.ndarray | tuple[float, ...],
    hi: np.ndarray | tuple[float, ...],
    tol: float = 0.0,
) -> np.ndarray:
    """各点が [lo, hi]（各軸、許容誤差込み）に収まるかの bool 配列を返す。

    Parameters
    ----------
    coords : np.ndarray
        形状 (N, D)。
    lo, hi : array-like
        長さ D の下限/上限。
    """
    arr = np.asarray(coords, dtype=np.float64)
    lo_a = np.asarray(lo, dtype=np.float64) - tol
    hi_a = np.asarray(hi, dtype=np.float64) + tol
    return np.all((arr >= lo_a) & (arr <= hi_a), axis=1)


def point_inside_box(point: Point, lo: tuple[float, ...], hi: tuple[float, ...], tol: float = 0.0) -> bool:
    """単一点版の `inside_mask`。"""
    dims = len(lo)
    return bool(inside_mask(as_vec3(point)[np.newaxis, :dims], lo, hi, tol)[0])


__all__ = [
    "point_in_path",
    "paths_intersect",
    "intersection_points",
    "inside_mask",
    "point_inside_box",
]
