"""
どこで: `vecfig.engine.core.primitives`
何を: 矩形・円・楕円・円弧・正多角形を `Path` として生成する関数群。
なぜ: 上位（Drawable 層）が頻用する基本図形を、曲線メタデータ付きの正確な形で提供するため。

円/楕円/円弧は 90 度以下の区間ごとに 3 次ベジェで表す
（制御点の長さ係数 k = 4/3 * tan(θ/4)）。
"""

from __future__ import annotations

import math

import numpy as np

from vecfig.common.errors import ErrorKind, GeometryError

from .geometry import Path, PointLike, as_vec3


def _require_positive(name: str, value: float) -> float:
    v = float(value)
    if not math.isfinite(v) or v <= 0.0:
        raise GeometryError(ErrorKind.DEGENERATE_SHAPE, f"{name} は正の有限値である必要があります: {value}")
    return v


def rectangle(p0: PointLike, p1: PointLike) -> Path:
    """対角 2 点から軸平行の矩形（閉路）を作る。z は p0 のものを使う。"""
    a = as_vec3(p0)
    b = as_vec3(p1)
    if a[0] == b[0] or a[1] == b[1]:
        raise GeometryError(ErrorKind.DEGENERATE_SHAPE, "矩形の幅または高さが 0 です")
    z = a[2]
    pts = [(a[0], a[1], z), (b[0], a[1], z), (b[0], b[1], z), (a[0], b[1], z)]
    return Path(pts, closed=True)


def _elliptic_arc(
    center: np.ndarray, rx: float, ry: float, start: float, end: float
) -> tuple[list[np.ndarray], list[np.ndarray]]:
    sweep = end - start
    n = max(1, int(math.ceil(abs(sweep) / (math.pi / 2.0) - 1e-12)))
    step = sweep / n
    k = 4.0 / 3.0 * math.tan(step / 4.0)

    def at(theta: float) -> np.ndarray:
        return center + np.array([rx * math.cos(theta), ry * math.sin(theta), 0.0])

    def tangent(theta: float) -> np.ndarray:
        return np.array([-rx * math.sin(theta), ry * math.cos(theta), 0.0])

    pts = [at(start)]
    ctrls: list[np.ndarray] = []
    for i in range(n):
        t0 = start + i * step
        t1 = t0 + step
        p0, p1 = at(t0), at(t1)
        c1 = p0 + k * tangent(t0)
        c2 = p1 - k * tangent(t1)
        ctrls.append(np.stack([c1, c2]))
        pts.append(p1)
    return pts, ctrls


def ellipse(center: PointLike, rx: float, ry: float) -> Path:
    """中心と半径 (rx, ry) の楕円。4 本の 3 次ベジェからなる閉じた 5 頂点パス。"""
    c = as_vec3(center)
    rx = _require_positive("rx", rx)
    ry = _require_positive("ry", ry)
    pts, ctrls = _elliptic_arc(c, rx, ry, 0.0, 2.0 * math.pi)
    # 終点は始点と一致させる（数値誤差を除去）
    pts[-1] = pts[0].copy()
    return Path(np.stack(pts), controls=ctrls)


def circle(center: PointLike, r: float) -> Path:
    """中心と半径の円。"""
    return ellipse(center, r, r)


def arc(center: PointLike, r: float, start: float, end: float) -> Path:
    """円弧（開路）。

    Parameters
    ----------
    center : PointLike
        中心。
    r : float
        半径（> 0）。
    start, end : float
        開始/終了角（度）。`end < start` なら時計回り。
    """
    c = as_vec3(center)
    r = _require_positive("r", r)
    if start == end:
        raise GeometryError(ErrorKind.DEGENERATE_SHAPE, "円弧の角度幅が 0 です")
    pts, ctrls = _elliptic_arc(c, r, r, math.radians(start), math.radians(end))
    return Path(np.stack(pts), controls=ctrls)


def regular_polygon(center: PointLike, r: float, n: int, *, rotation: float = 90.0) -> Path:
    """正 n 角形（閉路）。`rotation` は最初の頂点の角度（度、既定は真上）。"""
    if n < 3:
        raise GeometryError(ErrorKind.DEGENERATE_SHAPE, f"正多角形には 3 頂点以上が必要です: n={n}")
    c = as_vec3(center)
    r = _require_positive("r", r)
    theta = np.radians(rotation) + np.arange(n) * (2.0 * np.pi / n)
    pts = np.column_stack(
        [c[0] + r * np.cos(theta), c[1] + r * np.sin(theta), np.full(n, c[2])]
    )
    return Path(pts, closed=True)


__all__ = ["rectangle", "circle", "ellipse", "arc", "regular_polygon"]
