"""
どこで: `vecfig.engine.projection`（投影エンジン）。
何を: シーン座標 → キャンバス座標（3D ビュー射影 + 軸範囲の線形写像）と範囲外フラグ付け。
なぜ: 射影を決定的な純関数として切り出し、出力コーデックから幾何計算を分離するため。
"""

from .canvas import AxisRange, CanvasMap, resolve_ranges, view_extents
from .projector import (
    ProjectedGroup,
    ProjectedPath,
    ProjectedPoint,
    ProjectedShape,
    Projector,
    count_outside,
)
from .view import DEFAULT_3D_VIEW, ViewProjection

__all__ = [
    "AxisRange",
    "CanvasMap",
    "resolve_ranges",
    "view_extents",
    "ViewProjection",
    "DEFAULT_3D_VIEW",
    "Projector",
    "ProjectedPoint",
    "ProjectedPath",
    "ProjectedGroup",
    "ProjectedShape",
    "count_outside",
]
