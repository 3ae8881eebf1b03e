"""
どこで: `vecfig.engine.export.base`。
何を: 出力コーデックの共通インタフェース `Codec`、描画文脈 `RenderContext`、
      1 オブジェクト分の入力 `RenderItem`、数値整形 `NumberFormat`、ラベル位置の計算。
なぜ: 方言ごとの実装（TikZ/SVG/…）を継承ではなく能力（begin/emit_object/end）で揃え、
      図モデルに触れずに方言を追加できるようにするため。

コーデックの約束:
- すべてのメソッドはテキスト断片のリストを返す純関数（状態を持たない）。
- 断片を順に連結したものが、その方言で構文的に正しい本文になる（文書ラッパは含まない）。
- 座標は `RenderContext.fmt` の固定小数で出力する（実行ごとにバイト単位で同一）。
- スタイル値は `RenderContext.style_num`（固定 6 桁、末尾の 0 は落とす）で出力する。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

from vecfig.common.config import RenderConfig
from vecfig.common.types import ObjectId
from vecfig.engine.projection.projector import (
    ProjectedGroup,
    ProjectedPath,
    ProjectedPoint,
    ProjectedShape,
)
from vecfig.engine.style.options import OPTIONS
from vecfig.engine.style.resolver import ResolvedStyle

PT_PER_CM = 28.3464567


@dataclass(frozen=True)
class NumberFormat:
    """固定小数の数値整形。`-0` は `0` に正規化する。"""

    precision: int = 4

    def num(self, v: float) -> str:
        s = f"{float(v):.{self.precision}f}"
        if s.startswith("-") and float(s) == 0.0:
            s = s[1:]
        return s

    def compact(self, v: float) -> str:
        """末尾の 0 と小数点を落とした表記（オプション値の長さ用）。"""
        s = self.num(v)
        if "." in s:
            s = s.rstrip("0").rstrip(".")
        return s

    def pair(self, x: float, y: float, sep: str = ",") -> str:
        return f"{self.num(x)}{sep}{self.num(y)}"


# スタイル値（pt・不透明度）は座標精度に依存させない
STYLE_FORMAT = NumberFormat(6)


@dataclass(frozen=True)
class RenderContext:
    """1 回の描画パスで全コーデック呼び出しに共通の文脈。

    `fmt` は座標用（`decimal_precision` に従う）、`style_fmt` は線幅・不透明度・
    文字サイズなどスタイル値用で、座標の精度とは独立した固定精度。
    `clip_box` は軸範囲が写るキャンバス上の矩形 `(x0, y0, x1, y1)`。
    """

    dialect: str
    config: RenderConfig
    fmt: NumberFormat
    clip_box: tuple[float, float, float, float] = (0.0, 0.0, 1.0, 1.0)
    style_fmt: NumberFormat = STYLE_FORMAT

    @property
    def canvas_size(self) -> tuple[float, float]:
        return self.config.canvas_size

    @property
    def clip(self) -> bool:
        return self.config.clip_out_of_bounds

    def style_num(self, v: float) -> str:
        return self.style_fmt.compact(v)

    @classmethod
    def create(
        cls,
        dialect: str,
        config: RenderConfig,
        clip_box: tuple[float, float, float, float] | None = None,
    ) -> "RenderContext":
        """`clip_box` を省略するとキャンバス全体をクリップ矩形とする。"""
        if clip_box is None:
            w, h = config.canvas_size
            clip_box = (0.0, 0.0, float(w), float(h))
        return cls(dialect, config, NumberFormat(config.decimal_precision), clip_box)


@dataclass(frozen=True)
class RenderItem:
    """射影・スタイル解決済みの 1 オブジェクト。"""

    object_id: ObjectId
    index: int
    shape: ProjectedShape
    style: ResolvedStyle


class Codec(Protocol):
    """出力方言の能力インタフェース。"""

    dialect: str

    def begin(self, ctx: RenderContext) -> list[str]: ...

    def emit_object(self, item: RenderItem, ctx: RenderContext) -> list[str]: ...

    def end(self, ctx: RenderContext) -> list[str]: ...


def supports(dialect: str, option: str) -> bool:
    """方言がオプションを表現できるか（スキーマ由来）。"""
    return OPTIONS[option].supported_by(dialect)


def is_optional(dialect: str, option: str) -> bool:
    """方言でオプションを黙って落としてよいか（dialect-optional）。"""
    return OPTIONS[option].droppable_in(dialect)


# ── 形状ヘルパ ───────────────────
def iter_leaves(shape: ProjectedShape):
    """ProjectedGroup を展開して点/パスを順に列挙する。"""
    if isinstance(shape, ProjectedGroup):
        for it in shape.items:
            yield from iter_leaves(it)
    else:
        yield shape


def _leaf_vertices(shape: ProjectedShape) -> np.ndarray:
    rows: list[np.ndarray] = []
    for leaf in iter_leaves(shape):
        if isinstance(leaf, ProjectedPoint):
            rows.append(np.array([leaf.xy]))
        elif isinstance(leaf, ProjectedPath):
            rows.append(leaf.coords)
    return np.vstack(rows)


def label_position(shape: ProjectedShape, anchor: str) -> tuple[float, float]:
    """ラベルの基準点（キャンバス座標）。

    頂点の 2D 境界の中心を基準に、above は上辺中央、below は下辺中央、
    left は左辺中央、right は右辺中央、center は中心を返す。点なら点そのもの。
    """
    if isinstance(shape, ProjectedPoint):
        return shape.xy
    pts = _leaf_vertices(shape)
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    cx = float((lo[0] + hi[0]) / 2.0)
    cy = float((lo[1] + hi[1]) / 2.0)
    if anchor == "above":
        return (cx, float(hi[1]))
    if anchor == "below":
        return (cx, float(lo[1]))
    if anchor == "left":
        return (float(lo[0]), cy)
    if anchor == "right":
        return (float(hi[0]), cy)
    return (cx, cy)


def elevate_quadratic(p0: np.ndarray, q: np.ndarray, p1: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """2 次ベジェの制御点を 3 次の 2 制御点へ昇格する。"""
    c1 = p0 + (2.0 / 3.0) * (q - p0)
    c2 = p1 + (2.0 / 3.0) * (q - p1)
    return c1, c2


__all__ = [
    "Codec",
    "RenderContext",
    "RenderItem",
    "NumberFormat",
    "STYLE_FORMAT",
    "PT_PER_CM",
    "supports",
    "is_optional",
    "iter_leaves",
    "label_position",
    "elevate_quadratic",
]
