"""
どこで: `vecfig.engine.projection.view`
何を: 3D シーン座標を 2D のビュー平面へ写す `ViewProjection`（正射影/透視/任意行列）。
なぜ: 3D 図形を軸範囲の線形写像（canvas.py）より前に平面化するため。

表現:
- 内部は 3x4 の同次行列 `M`。行 0/1 がビュー平面の (u, v)、行 2 が同次座標 w。
- `[u, v, w] = M @ [x, y, z, 1]`。透視（w 行が [0,0,0,1] でない）なら (u/w, v/w)。
- w <= 0 はカメラ背面の点として `ProjectionError(InvalidProjection)`。

角度の約束（度）:
- elevation: 水平面からの仰角。90 で真上から見下ろす。
- azimuth: z 軸回りの方位角。elevation=90, azimuth=-90 で (u, v) = (x, y)。
"""

from __future__ import annotations

import math

import numpy as np

from vecfig.common.errors import ErrorKind, ProjectionError

_AFFINE_W = np.array([0.0, 0.0, 0.0, 1.0])


def _invalid(msg: str) -> ProjectionError:
    return ProjectionError(ErrorKind.INVALID_PROJECTION, msg)


def _view_axes(elevation: float, azimuth: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    e = math.radians(elevation)
    a = math.radians(azimuth)
    right = np.array([-math.sin(a), math.cos(a), 0.0])
    up = np.array([-math.sin(e) * math.cos(a), -math.sin(e) * math.sin(a), math.cos(e)])
    toward_viewer = np.array([math.cos(e) * math.cos(a), math.cos(e) * math.sin(a), math.sin(e)])
    return right, up, toward_viewer


class ViewProjection:
    """3D → 2D の射影（不変）。"""

    __slots__ = ("matrix", "kind")

    matrix: np.ndarray
    kind: str

    def __init__(self, matrix: np.ndarray, kind: str = "matrix") -> None:
        m = np.array(matrix, dtype=np.float64)
        if m.shape != (3, 4):
            raise _invalid(f"内部行列は 3x4 である必要があります: {m.shape}")
        if not np.all(np.isfinite(m)):
            raise _invalid("射影行列に非有限値が含まれています")
        m.setflags(write=False)
        self.matrix = m
        self.kind = kind

    # ── ファクトリ ───────────────────
    @classmethod
    def identity(cls) -> "ViewProjection":
        """z を捨てる射影（真上からの正射影と同じ）。"""
        m = np.array([[1.0, 0.0, 0.0, 0.0], [0.0, 1.0, 0.0, 0.0], _AFFINE_W])
        return cls(m, "identity")

    @classmethod
    def orthographic(cls, elevation: float = 30.0, azimuth: float = -60.0) -> "ViewProjection":
        """仰角/方位角（度）による正射影。"""
        right, up, _ = _view_axes(elevation, azimuth)
        m = np.vstack([np.append(right, 0.0), np.append(up, 0.0), _AFFINE_W])
        return cls(m, "orthographic")

    @classmethod
    def perspective(
        cls, elevation: float = 30.0, azimuth: float = -60.0, distance: float = 10.0
    ) -> "ViewProjection":
        """原点を注視する透視射影。カメラは原点から視線方向へ `distance` 離れた位置。

        投影面は原点を通る（原点付近の大きさは正射影と一致する）。
        """
        d = float(distance)
        if not math.isfinite(d) or d <= 0.0:
            raise _invalid(f"distance は正の有限値である必要があります: {distance}")
        right, up, toward = _view_axes(elevation, azimuth)
        w_row = np.append(-toward / d, 1.0)
        m = np.vstack([np.append(right, 0.0), np.append(up, 0.0), w_row])
        return cls(m, "perspective")

    @classmethod
    def from_matrix(cls, matrix: object) -> "ViewProjection":
        """任意行列から生成する。

        受理する形状:
        - 2x3: 線形写像 (u, v) = M @ (x, y, z)
        - 3x3: 線形写像。先頭 2 行を (u, v) に使い、3 行目（奥行き）は捨てる
        - 3x4: 同次行列 [u, v, w]
        - 4x4: 同次行列。行 0/1/3 を [u, v, w] に使い、行 2（奥行き）は捨てる
        """
        try:
            m = np.asarray(matrix, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise _invalid("射影行列を数値配列として解釈できません") from e
        if m.shape in ((2, 3), (3, 3)):
            lin = np.hstack([m[:2], np.zeros((2, 1))])
            return cls(np.vstack([lin, _AFFINE_W]), "matrix")
        if m.shape == (3, 4):
            return cls(m, "matrix")
        if m.shape == (4, 4):
            return cls(m[[0, 1, 3]], "matrix")
        raise _invalid(f"未対応の射影行列の形状です: {m.shape}")

    # ── 適用 ─────────────────────
    @property
    def is_affine(self) -> bool:
        return bool(np.array_equal(self.matrix[2], _AFFINE_W))

    def apply(self, coords: np.ndarray) -> np.ndarray:
        """(N, 3) のシーン座標を (N, 2) のビュー平面座標へ写す。

        Raises
        ------
        ProjectionError
            透視射影でカメラ背面（w <= 0）の点がある場合（InvalidProjection）。
        """
        pts = np.asarray(coords, dtype=np.float64).reshape(-1, 3)
        homo = np.hstack([pts, np.ones((pts.shape[0], 1))])
        out = homo @ self.matrix.T
        if self.is_affine:
            return out[:, :2].copy()
        w = out[:, 2]
        if np.any(w <= 1e-12):
            raise _invalid("カメラの背面にある点は透視射影できません")
        return out[:, :2] / w[:, np.newaxis]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ViewProjection):
            return NotImplemented
        return np.array_equal(self.matrix, other.matrix)

    def __hash__(self) -> int:
        return hash(self.matrix.tobytes())

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"ViewProjection(kind={self.kind!r})"


DEFAULT_3D_VIEW = ViewProjection.orthographic(30.0, -60.0)

__all__ = ["ViewProjection", "DEFAULT_3D_VIEW"]
