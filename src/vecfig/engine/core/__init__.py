"""
どこで: `vecfig.engine.core`（幾何カーネル）。
何を: 不変の幾何値型（Point/Path/Group）と純粋な幾何演算（変換・境界・包含/交差・単純化）。
なぜ: スタイルや I/O を持たない最下層として、投影/モデル/出力から共通に使うため。
"""

from .bbox import BoundingBox
from .clip import inside_mask, intersection_points, paths_intersect, point_in_path
from .geometry import Group, Path, PathBuilder, Point, Shape, validate_shape
from .placement import align_to, fit_into
from .primitives import arc, circle, ellipse, rectangle, regular_polygon
from .simplify import simplify_path, simplify_shape

__all__ = [
    "Point",
    "Path",
    "Group",
    "Shape",
    "PathBuilder",
    "validate_shape",
    "BoundingBox",
    "point_in_path",
    "paths_intersect",
    "intersection_points",
    "inside_mask",
    "simplify_path",
    "simplify_shape",
    "rectangle",
    "circle",
    "ellipse",
    "arc",
    "regular_polygon",
    "fit_into",
    "align_to",
]
