"""
どこで: `vecfig.engine.core.bbox`
何を: 軸平行バウンディングボックス `BoundingBox` と、形状からの厳密な境界計算。
なぜ: 軸範囲の自動決定・クリップ判定・ラベル配置の基礎。オブジェクトには保持せず都度計算する。

ベジェ区間は制御多角形ではなく曲線そのものの極値（導関数の根）で境界を求める。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from vecfig.common.types import Vec3

from .geometry import Group, Path, Point, Shape, bezier_points


def _quadratic_extrema_t(p0: np.ndarray, q: np.ndarray, p1: np.ndarray) -> np.ndarray:
    denom = p0 - 2.0 * q + p1
    ts: list[float] = []
    for axis in range(3):
        if abs(denom[axis]) > 1e-15:
            t = (p0[axis] - q[axis]) / denom[axis]
            if 0.0 < t < 1.0:
                ts.append(float(t))
    return np.array(ts, dtype=np.float64)


def _cubic_extrema_t(p0: np.ndarray, c1: np.ndarray, c2: np.ndarray, p1: np.ndarray) -> np.ndarray:
    # B'(t)/3 = a t^2 + b t + c
    a = -p0 + 3.0 * c1 - 3.0 * c2 + p1
    b = 2.0 * (p0 - 2.0 * c1 + c2)
    c = c1 - p0
    ts: list[float] = []
    for axis in range(3):
        aa, bb, cc = float(a[axis]), float(b[axis]), float(c[axis])
        if abs(aa) < 1e-15:
            if abs(bb) > 1e-15:
                ts.append(-cc / bb)
            continue
        disc = bb * bb - 4.0 * aa * cc
        if disc < 0.0:
            continue
        sq = disc**0.5
        ts.append((-bb + sq) / (2.0 * aa))
        ts.append((-bb - sq) / (2.0 * aa))
    return np.array([t for t in ts if 0.0 < t < 1.0], dtype=np.float64)


def path_extreme_points(path: Path) -> np.ndarray:
    """頂点と曲線区間の極値点をまとめた (K, 3) 配列を返す。"""
    chunks: list[np.ndarray] = [path.coords]
    for i in range(path.n_segments):
        ctrl = path.controls[i]
        if ctrl is None:
            continue
        p0, p1 = path.coords[i], path.coords[i + 1]
        if ctrl.shape[0] == 1:
            ts = _quadratic_extrema_t(p0, ctrl[0], p1)
        else:
            ts = _cubic_extrema_t(p0, ctrl[0], ctrl[1], p1)
        if ts.size:
            chunks.append(bezier_points(np.vstack([p0, ctrl, p1]), ts))
    return np.vstack(chunks)


@dataclass(frozen=True)
class BoundingBox:
    """軸平行境界（min/max の 2 隅）。"""

    lo: Vec3
    hi: Vec3

    def __post_init__(self) -> None:
        lo = tuple(float(v) for v in self.lo)
        hi = tuple(float(v) for v in self.hi)
        if len(lo) != 3 or len(hi) != 3:
            raise ValueError("BoundingBox は 3 次元の隅を取ります")
        if any(a > b for a, b in zip(lo, hi)):
            raise ValueError(f"lo <= hi である必要があります: lo={lo}, hi={hi}")
        object.__setattr__(self, "lo", lo)
        object.__setattr__(self, "hi", hi)

    @classmethod
    def from_points(cls, pts: np.ndarray) -> "BoundingBox":
        arr = np.asarray(pts, dtype=np.float64).reshape(-1, 3)
        if arr.shape[0] == 0:
            raise ValueError("空の点集合から BoundingBox は作れません")
        lo = arr.min(axis=0)
        hi = arr.max(axis=0)
        return cls((float(lo[0]), float(lo[1]), float(lo[2])), (float(hi[0]), float(hi[1]), float(hi[2])))

    @classmethod
    def of(cls, shape: Shape) -> "BoundingBox":
        """形状の厳密な境界を計算する。"""
        if isinstance(shape, Point):
            p = (shape.x, shape.y, shape.z)
            return cls(p, p)
        if isinstance(shape, Path):
            return cls.from_points(path_extreme_points(shape))
        if isinstance(shape, Group):
            boxes = [cls.of(it) for it in shape.items]
            out = boxes[0]
            for b in boxes[1:]:
                out = out.union(b)
            return out
        raise TypeError(f"BoundingBox.of は Shape を取ります: got {type(shape).__name__}")

    @property
    def size(self) -> Vec3:
        return (self.hi[0] - self.lo[0], self.hi[1] - self.lo[1], self.hi[2] - self.lo[2])

    @property
    def center(self) -> Vec3:
        return (
            (self.lo[0] + self.hi[0]) / 2.0,
            (self.lo[1] + self.hi[1]) / 2.0,
            (self.lo[2] + self.hi[2]) / 2.0,
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        lo = tuple(min(a, b) for a, b in zip(self.lo, other.lo))
        hi = tuple(max(a, b) for a, b in zip(self.hi, other.hi))
        return BoundingBox(lo, hi)  # type: ignore[arg-type]

    def contains(self, p: Point | Vec3, tol: float = 0.0) -> bool:
        """点が境界内（境界上を含む）にあるか。"""
        xyz = (p.x, p.y, p.z) if isinstance(p, Point) else tuple(p)
        return all(lo - tol <= v <= hi + tol for v, lo, hi in zip(xyz, self.lo, self.hi))

    def intersects(self, other: "BoundingBox") -> bool:
        """2 つの境界が重なる（接触を含む）か。"""
        return all(
            a_lo <= b_hi and b_lo <= a_hi
            for a_lo, a_hi, b_lo, b_hi in zip(self.lo, self.hi, other.lo, other.hi)
        )


__all__ = ["BoundingBox", "path_extreme_points"]
