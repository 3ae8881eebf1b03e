"""
どこで: `vecfig.engine.core.simplify`
何を: 近接重複頂点の統合（epsilon 以内の連続頂点を 1 つにまとめる）。
なぜ: 出力の冗長な `-- (x,y)` を減らし、ゼロ長区間による描画の乱れを防ぐため。

注意:
- 曲線区間の端点は統合しない（制御点との整合を保つ）。
- 閉路で終点が始点に一致する場合、終点を落として閉じる区間に任せる。
"""

from __future__ import annotations

import numpy as np

from vecfig.common import settings as _settings
from vecfig.common.errors import ErrorKind, GeometryError

from .geometry import Group, Path, Point, Shape


def simplify_path(path: Path, epsilon: float | None = None) -> Path:
    """連続する近接頂点（直線区間のみ）を統合した新しい `Path` を返す。

    Parameters
    ----------
    path : Path
        入力パス。
    epsilon : float | None
        統合距離。None の場合は `settings.SIMPLIFY_EPSILON`。

    Raises
    ------
    GeometryError
        統合の結果、頂点数が Path の下限を割った場合（DegenerateShape）。
    """
    eps = _settings.get().SIMPLIFY_EPSILON if epsilon is None else float(epsilon)
    if eps < 0.0:
        raise ValueError("epsilon は 0 以上である必要があります")

    kept: list[np.ndarray] = [path.coords[0]]
    kept_ctrl: list[np.ndarray | None] = []
    for i in range(1, path.n_vertices):
        ctrl = path.controls[i - 1]
        if ctrl is None and float(np.linalg.norm(path.coords[i] - kept[-1])) <= eps:
            continue
        kept.append(path.coords[i])
        kept_ctrl.append(ctrl)

    if path.closed and len(kept) >= 2 and kept_ctrl[-1] is None:
        if float(np.linalg.norm(kept[-1] - kept[0])) <= eps:
            kept.pop()
            kept_ctrl.pop()

    need = 3 if path.closed else 2
    if len(kept) < need:
        raise GeometryError(
            ErrorKind.DEGENERATE_SHAPE,
            f"epsilon={eps} の統合で頂点が {len(kept)} 個になり退化しました",
        )
    return Path(np.stack(kept), closed=path.closed, controls=kept_ctrl)


def simplify_shape(shape: Shape, epsilon: float | None = None) -> Shape:
    """Shape 全体に `simplify_path` を適用する（Point はそのまま）。"""
    if isinstance(shape, Point):
        return shape
    if isinstance(shape, Path):
        return simplify_path(shape, epsilon)
    return Group(simplify_shape(it, epsilon) for it in shape.items)


__all__ = ["simplify_path", "simplify_shape"]
