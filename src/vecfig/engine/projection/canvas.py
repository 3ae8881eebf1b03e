"""
どこで: `vecfig.engine.projection.canvas`
何を: 軸範囲 `AxisRange`、ビュー平面 → キャンバスの線形写像 `CanvasMap`、範囲の自動決定。
なぜ: `(x - min) / (max - min)` をキャンバス寸法へ伸縮する処理を 1 か所に集め、
      ゼロ幅の範囲を黙って割り算しないことを保証するため。

スケールモード:
- uniform: 両軸に共通の倍率 `min(W / span_x, H / span_y)`。原点 (0, 0) を基準に配置。
- stretch: 各軸を独立にキャンバス幅/高さへ合わせる。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Mapping

import numpy as np

from vecfig.common.errors import ErrorKind, ProjectionError
from vecfig.common.types import ScaleMode
from vecfig.engine.core.bbox import BoundingBox
from vecfig.engine.core.geometry import Shape

from .view import ViewProjection

AXES_2D = ("x", "y")
AXES_3D = ("x", "y", "z")


@dataclass(frozen=True)
class AxisRange:
    """1 軸分のシーン座標範囲 [lo, hi]。"""

    lo: float
    hi: float

    def __post_init__(self) -> None:
        lo, hi = float(self.lo), float(self.hi)
        if not (math.isfinite(lo) and math.isfinite(hi)):
            raise ProjectionError(ErrorKind.DEGENERATE_AXIS, f"軸範囲が非有限です: [{lo}, {hi}]")
        if lo > hi:
            raise ValueError(f"軸範囲は lo <= hi で指定してください: [{lo}, {hi}]")
        if lo == hi:
            raise ProjectionError(ErrorKind.DEGENERATE_AXIS, f"軸範囲の幅が 0 です: [{lo}, {hi}]")
        object.__setattr__(self, "lo", lo)
        object.__setattr__(self, "hi", hi)

    @property
    def span(self) -> float:
        return self.hi - self.lo


UNIT_RANGE = AxisRange(0.0, 1.0)


def resolve_ranges(
    explicit: Mapping[str, AxisRange | None],
    shapes: Iterable[Shape],
    dims: int,
) -> dict[str, AxisRange]:
    """未設定の軸範囲を幾何の境界から補い、全軸の範囲を返す。

    - 明示された軸はそのまま使う。
    - 未設定の軸は全形状の和集合境界から決める（幅 0 なら DegenerateAxis）。
    - 形状が 1 つもない場合は [0, 1]。
    """
    axes = AXES_3D if dims == 3 else AXES_2D
    missing = [a for a in axes if explicit.get(a) is None]
    out: dict[str, AxisRange] = {a: explicit[a] for a in axes if explicit.get(a) is not None}  # type: ignore[misc]
    if not missing:
        return out

    box: BoundingBox | None = None
    for s in shapes:
        b = BoundingBox.of(s)
        box = b if box is None else box.union(b)

    for a in missing:
        if box is None:
            out[a] = UNIT_RANGE
            continue
        i = AXES_3D.index(a)
        lo, hi = box.lo[i], box.hi[i]
        if lo == hi:
            raise ProjectionError(
                ErrorKind.DEGENERATE_AXIS,
                f"{a} 軸の範囲を幾何から決められません（幅 0: {lo}）。set_axis_range で指定してください",
            )
        out[a] = AxisRange(lo, hi)
    return out


def view_extents(
    ranges: Mapping[str, AxisRange], dims: int, view: ViewProjection | None
) -> tuple[np.ndarray, np.ndarray]:
    """ビュー平面上の範囲（lo, hi の (2,) 配列）を返す。

    2D は x/y 範囲そのもの。3D は x/y/z 範囲の直方体の 8 隅を射影した 2D 境界。
    """
    if dims == 2:
        lo = np.array([ranges["x"].lo, ranges["y"].lo])
        hi = np.array([ranges["x"].hi, ranges["y"].hi])
        return lo, hi
    if view is None:
        raise ValueError("3D の範囲計算には ViewProjection が必要です")
    rx, ry, rz = ranges["x"], ranges["y"], ranges["z"]
    corners = np.array(
        [[x, y, z] for x in (rx.lo, rx.hi) for y in (ry.lo, ry.hi) for z in (rz.lo, rz.hi)],
        dtype=np.float64,
    )
    uv = view.apply(corners)
    return uv.min(axis=0), uv.max(axis=0)


class CanvasMap:
    """ビュー平面座標 ↔ キャンバス座標のアフィン写像（不変）。"""

    __slots__ = ("lo", "scale", "canvas_size", "mode")

    def __init__(
        self,
        lo: np.ndarray,
        hi: np.ndarray,
        canvas_size: tuple[float, float] = (1.0, 1.0),
        mode: ScaleMode = "uniform",
    ) -> None:
        lo_a = np.asarray(lo, dtype=np.float64).reshape(2)
        hi_a = np.asarray(hi, dtype=np.float64).reshape(2)
        span = hi_a - lo_a
        for name, s in zip(AXES_2D, span):
            if not (math.isfinite(s) and s > 0.0):
                raise ProjectionError(
                    ErrorKind.DEGENERATE_AXIS, f"キャンバスへ写す {name} 方向の幅が 0 です"
                )
        size = np.asarray(canvas_size, dtype=np.float64).reshape(2)
        if mode == "uniform":
            s = float(np.min(size / span))
            scale = np.array([s, s])
        elif mode == "stretch":
            scale = size / span
        else:
            raise ValueError(f"未知の scale_mode: {mode!r}")
        lo_a.setflags(write=False)
        scale.setflags(write=False)
        self.lo = lo_a
        self.scale = scale
        self.canvas_size = (float(size[0]), float(size[1]))
        self.mode = mode

    def forward(self, xy: np.ndarray) -> np.ndarray:
        """(N, 2) ビュー平面座標 → キャンバス座標。"""
        return (np.asarray(xy, dtype=np.float64) - self.lo) * self.scale

    def inverse(self, uv: np.ndarray) -> np.ndarray:
        """(N, 2) キャンバス座標 → ビュー平面座標。"""
        return np.asarray(uv, dtype=np.float64) / self.scale + self.lo


__all__ = [
    "AxisRange",
    "UNIT_RANGE",
    "CanvasMap",
    "resolve_ranges",
    "view_extents",
    "AXES_2D",
    "AXES_3D",
]
