"""
どこで: `vecfig.engine.projection.projector`
何を: 1 回の描画パスで使う `Projector`。形状をキャンバス座標の `Projected*` 値へ写し、
      各点/各区間の範囲内フラグを付ける。結果はパス内でのみオブジェクト ID ごとにキャッシュする。
なぜ: 射影は (幾何, 射影設定) の純関数であり、同一パス内の再計算を避けつつ、
      図の変更をまたいだキャッシュ（古い座標の出力）を構造的に起こさないため。

流れ:
    シーン座標 (N,3) ──ViewProjection──▶ ビュー平面 (N,2) ──CanvasMap──▶ キャンバス (N,2)
    範囲内フラグはシーン座標で軸範囲（許容誤差込み）と比較して求める。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Protocol, Union

import numpy as np

from vecfig.common import settings as _settings
from vecfig.common.config import RenderConfig
from vecfig.engine.core.clip import inside_mask
from vecfig.engine.core.geometry import Group, Path, Point, Shape, bezier_points

from .canvas import AXES_2D, AXES_3D, AxisRange, CanvasMap, resolve_ranges, view_extents
from .view import DEFAULT_3D_VIEW, ViewProjection

logger = logging.getLogger(__name__)

_SEGMENT_SAMPLES = np.linspace(0.0, 1.0, 9)


class _Projectable(Protocol):
    id: int
    geometry: Shape


@dataclass(frozen=True)
class ProjectedPoint:
    """キャンバス上の点。"""

    xy: tuple[float, float]
    inside: bool


@dataclass(frozen=True, eq=False)
class ProjectedPath:
    """キャンバス上のパス。

    属性:
        coords: (N, 2) キャンバス座標（読み取り専用）。
        controls: 区間ごとの制御点 `None` / (k, 2)。
        closed: 閉路か。
        inside: (N,) 各頂点の範囲内フラグ。
        segment_inside: 各区間（閉路の閉じる区間を含む）の範囲内フラグ。
    """

    coords: np.ndarray
    controls: tuple[np.ndarray | None, ...]
    closed: bool
    inside: np.ndarray
    segment_inside: tuple[bool, ...]

    @property
    def all_inside(self) -> bool:
        return bool(np.all(self.inside)) and all(self.segment_inside)

    @property
    def any_inside(self) -> bool:
        return bool(np.any(self.inside)) or any(self.segment_inside)

    @property
    def n_outside(self) -> int:
        return int(np.count_nonzero(~self.inside))


@dataclass(frozen=True)
class ProjectedGroup:
    items: tuple["ProjectedShape", ...]

    @property
    def all_inside(self) -> bool:
        return all(_all_inside(it) for it in self.items)


ProjectedShape = Union[ProjectedPoint, ProjectedPath, ProjectedGroup]


def _all_inside(p: ProjectedShape) -> bool:
    if isinstance(p, ProjectedPoint):
        return p.inside
    return p.all_inside


def count_outside(p: ProjectedShape) -> int:
    """範囲外の頂点数（ログ/診断用）。"""
    if isinstance(p, ProjectedPoint):
        return 0 if p.inside else 1
    if isinstance(p, ProjectedPath):
        return p.n_outside
    return sum(count_outside(it) for it in p.items)


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


class Projector:
    """描画パス 1 回分の射影器。

    Parameters
    ----------
    ranges : Mapping[str, AxisRange]
        全軸の確定済み範囲（2D は x/y、3D は x/y/z）。
    dims : int
        2 または 3。
    view : ViewProjection | None
        3D 用の射影。2D では無視され、3D で None なら既定ビュー（仰角 30 度、方位角 -60 度）。
    config : RenderConfig
        キャンバス寸法・スケールモード・範囲判定の許容誤差を使う。
    cache : bool | None
        ID ごとのキャッシュを使うか。None なら `settings.PROJECTION_CACHE_ENABLED`。
    """

    def __init__(
        self,
        ranges: Mapping[str, AxisRange],
        dims: int,
        view: ViewProjection | None,
        config: RenderConfig,
        *,
        cache: bool | None = None,
    ) -> None:
        if dims not in (2, 3):
            raise ValueError(f"dims は 2 か 3: got {dims}")
        axes = AXES_3D if dims == 3 else AXES_2D
        self.dims = dims
        self.ranges = {a: ranges[a] for a in axes}
        self.view = ViewProjection.identity() if dims == 2 else (view or DEFAULT_3D_VIEW)
        lo, hi = view_extents(self.ranges, dims, self.view)
        self.canvas = CanvasMap(lo, hi, config.canvas_size, config.scale_mode)
        self._extents = (lo, hi)
        self._lo = np.array([self.ranges[a].lo for a in axes])
        self._hi = np.array([self.ranges[a].hi for a in axes])
        self._tol = config.bounds_tolerance
        self._cache_enabled = _settings.get().PROJECTION_CACHE_ENABLED if cache is None else cache
        self._cache: dict[int, ProjectedShape] = {}
        self.cache_hits = 0

    @classmethod
    def for_scene(
        cls,
        explicit_ranges: Mapping[str, AxisRange | None],
        shapes: Iterable[Shape],
        dims: int,
        view: ViewProjection | None,
        config: RenderConfig,
        *,
        cache: bool | None = None,
    ) -> "Projector":
        """未設定の軸範囲を幾何から補ってから射影器を作る。"""
        ranges = resolve_ranges(explicit_ranges, shapes, dims)
        return cls(ranges, dims, view, config, cache=cache)

    # ── 座標の写像 ───────────────────
    def forward(self, coords: np.ndarray) -> np.ndarray:
        """(N, 3) シーン座標 → (N, 2) キャンバス座標。"""
        return self.canvas.forward(self.view.apply(coords))

    def inverse(self, uv: np.ndarray) -> np.ndarray:
        """(N, 2) キャンバス座標 → (N, 2) シーン座標（2D 図のみ）。"""
        if self.dims != 2:
            raise ValueError("逆写像は 2D 図でのみ定義されます")
        return self.canvas.inverse(uv)

    @property
    def canvas_box(self) -> tuple[float, float, float, float]:
        """軸範囲が写るキャンバス上の矩形 `(x0, y0, x1, y1)`（クリップ用）。"""
        uv = self.canvas.forward(np.vstack(self._extents))
        return (float(uv[0, 0]), float(uv[0, 1]), float(uv[1, 0]), float(uv[1, 1]))

    def _inside(self, coords: np.ndarray) -> np.ndarray:
        return inside_mask(coords[:, : self.dims], self._lo, self._hi, self._tol)

    # ── 形状の射影 ───────────────────
    def project_shape(self, shape: Shape) -> ProjectedShape:
        """キャッシュを使わずに形状を射影する（純関数）。"""
        if isinstance(shape, Point):
            row = shape.as_array()[np.newaxis, :]
            uv = self.forward(row)[0]
            return ProjectedPoint((float(uv[0]), float(uv[1])), bool(self._inside(row)[0]))
        if isinstance(shape, Path):
            return self._project_path(shape)
        if isinstance(shape, Group):
            return ProjectedGroup(tuple(self.project_shape(it) for it in shape.items))
        raise TypeError(f"射影できない型です: {type(shape).__name__}")

    def _project_path(self, path: Path) -> ProjectedPath:
        coords = _readonly(self.forward(path.coords))
        inside = _readonly(self._inside(path.coords))
        controls: list[np.ndarray | None] = []
        seg_inside: list[bool] = []
        for i, ctrl in enumerate(path.controls):
            ends_in = bool(inside[i] and inside[i + 1])
            if ctrl is None:
                controls.append(None)
                seg_inside.append(ends_in)
                continue
            controls.append(_readonly(self.forward(ctrl)))
            poly = np.vstack([path.coords[i], ctrl, path.coords[i + 1]])
            seg_inside.append(ends_in and bool(np.all(self._inside(bezier_points(poly, _SEGMENT_SAMPLES)))))
        if path.closed:
            seg_inside.append(bool(inside[-1] and inside[0]))
        return ProjectedPath(coords, tuple(controls), path.closed, inside, tuple(seg_inside))

    def project(self, obj: _Projectable) -> ProjectedShape:
        """オブジェクト（`id` と `geometry` を持つ）を射影する。同一パス内では ID でキャッシュ。"""
        if self._cache_enabled:
            hit = self._cache.get(obj.id)
            if hit is not None:
                self.cache_hits += 1
                return hit
        out = self.project_shape(obj.geometry)
        if self._cache_enabled:
            self._cache[obj.id] = out
        n_out = count_outside(out)
        if n_out:
            logger.debug("object %d: %d point(s) outside the axis range", obj.id, n_out)
        return out


__all__ = [
    "Projector",
    "ProjectedPoint",
    "ProjectedPath",
    "ProjectedGroup",
    "ProjectedShape",
    "count_outside",
]
