"""
どこで: `vecfig.engine.core.placement`。
何を: 形状を図の中へ置くための変換（境界中心まわりの回転・拡大縮小・鏡映、合成変換、
      目標矩形へのはめ込み `fit_into`、境界アンカーでの位置合わせ `align_to`）。
なぜ: `Shape` のメソッドは原点（または明示 pivot）基準のみのため、Group を含む形状を
      自身の境界を基準に扱う操作をここへ集約するため。

pivot の選び方:
- `auto_center=True`（既定）: 厳密な境界（ベジェの極値込み）の中心。
- `auto_center=False`: `pivot` をそのまま使う。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from vecfig.common.types import Vec3

from .bbox import BoundingBox
from .geometry import Shape, as_vec3

_AXES = {"x": 0, "y": 1, "z": 2}

# 境界上の基準点（TikZ のアンカー名、(u, v) は 2D 境界内の比率）
ANCHORS: dict[str, tuple[float, float]] = {
    "center": (0.5, 0.5),
    "north": (0.5, 1.0),
    "south": (0.5, 0.0),
    "east": (1.0, 0.5),
    "west": (0.0, 0.5),
    "north east": (1.0, 1.0),
    "north west": (0.0, 1.0),
    "south east": (1.0, 0.0),
    "south west": (0.0, 0.0),
}


def pivot_of(shape: Shape, *, auto_center: bool = True, pivot: Vec3 = (0.0, 0.0, 0.0)) -> Vec3:
    """変換の中心を返す。"""
    if auto_center:
        return BoundingBox.of(shape).center
    x, y, z = (float(v) for v in as_vec3(pivot))
    return (x, y, z)


def rotate(
    shape: Shape,
    angle_rad: float,
    *,
    axis: str = "z",
    auto_center: bool = True,
    pivot: Vec3 = (0.0, 0.0, 0.0),
) -> Shape:
    """1 軸まわりの回転。2D 図形は既定の z 軸を使う。"""
    if axis not in _AXES:
        raise ValueError(f"axis は x/y/z のいずれか: got {axis!r}")
    center = pivot_of(shape, auto_center=auto_center, pivot=pivot)
    return shape.rotate(**{axis: angle_rad}, center=center)


def scale(
    shape: Shape,
    sx: float,
    sy: float | None = None,
    sz: float | None = None,
    *,
    auto_center: bool = True,
    pivot: Vec3 = (0.0, 0.0, 0.0),
) -> Shape:
    """拡大縮小（`sy/sz` 省略時は `sx` で等方）。"""
    center = pivot_of(shape, auto_center=auto_center, pivot=pivot)
    return shape.scale(sx, sy, sz, center)


def reflect(shape: Shape, axis: str = "x", *, auto_center: bool = True, pivot: Vec3 = (0.0, 0.0, 0.0)) -> Shape:
    """`axis` の座標を pivot を通る面で反転する（"x" なら左右反転）。"""
    if axis not in _AXES:
        raise ValueError(f"axis は x/y/z のいずれか: got {axis!r}")
    factors = [1.0, 1.0, 1.0]
    factors[_AXES[axis]] = -1.0
    center = pivot_of(shape, auto_center=auto_center, pivot=pivot)
    return shape.scale(factors[0], factors[1], factors[2], center)


def transform_combined(
    shape: Shape,
    *,
    scale_factors: Vec3 = (1.0, 1.0, 1.0),
    rotate_angles: Vec3 = (0.0, 0.0, 0.0),
    translate: Vec3 = (0.0, 0.0, 0.0),
    auto_center: bool = True,
    pivot: Vec3 = (0.0, 0.0, 0.0),
) -> Shape:
    """pivot まわりにスケール → 回転し、最後に平行移動する。

    pivot は変換前の形状で 1 度だけ決める（回転の中心がスケールでずれない）。
    恒等変換の成分は適用しない。
    """
    center = pivot_of(shape, auto_center=auto_center, pivot=pivot)
    result = shape
    sx, sy, sz = scale_factors
    if (sx, sy, sz) != (1.0, 1.0, 1.0):
        result = result.scale(sx, sy, sz, center)
    rx, ry, rz = rotate_angles
    if rx or ry or rz:
        result = result.rotate(rx, ry, rz, center)
    dx, dy, dz = translate
    if dx or dy or dz:
        result = result.translate(dx, dy, dz)
    return result


def fit_into(
    shape: Shape,
    lo: Sequence[float],
    hi: Sequence[float],
    *,
    keep_aspect: bool = True,
    margin: float = 0.0,
) -> Shape:
    """xy 境界が矩形 `[lo, hi]`（内側に `margin`）へ収まるよう拡大縮小し、中央へ置く。

    幅 0 の方向は倍率を決めない。`keep_aspect=False` では各軸を独立に合わせる。
    z は変えない。
    """
    t_lo = np.asarray(lo, dtype=np.float64)[:2] + margin
    t_hi = np.asarray(hi, dtype=np.float64)[:2] - margin
    if not np.all(t_hi > t_lo):
        raise ValueError(f"はめ込み先の矩形が空です: lo={tuple(lo)}, hi={tuple(hi)}, margin={margin}")
    box = BoundingBox.of(shape)
    span = np.array(box.size[:2])
    target = t_hi - t_lo
    ratio = np.divide(target, span, out=np.full(2, np.inf), where=span > 0.0)
    if keep_aspect:
        k = float(ratio.min())
        factors = np.array([k, k]) if np.isfinite(k) else np.ones(2)
    else:
        factors = np.where(np.isfinite(ratio), ratio, 1.0)
    cx, cy, _ = box.center
    out = shape.scale(float(factors[0]), float(factors[1]), 1.0, (cx, cy, 0.0))
    goal = (t_lo + t_hi) / 2.0
    return out.translate(float(goal[0] - cx), float(goal[1] - cy), 0.0)


def align_to(shape: Shape, anchor: str, target: Sequence[float]) -> Shape:
    """境界の `anchor`（"north east" など）が `target` の xy に来るよう平行移動する。"""
    key = " ".join(anchor.lower().replace("-", " ").replace("_", " ").split())
    if key not in ANCHORS:
        raise ValueError(f"未知のアンカー: {anchor!r}（{sorted(ANCHORS)}）")
    u, v = ANCHORS[key]
    box = BoundingBox.of(shape)
    ax = box.lo[0] + u * box.size[0]
    ay = box.lo[1] + v * box.size[1]
    return shape.translate(float(target[0]) - ax, float(target[1]) - ay, 0.0)


__all__ = [
    "ANCHORS",
    "pivot_of",
    "rotate",
    "scale",
    "reflect",
    "transform_combined",
    "fit_into",
    "align_to",
]
