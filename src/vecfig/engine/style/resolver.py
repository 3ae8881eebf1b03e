"""
どこで: `vecfig.engine.style.resolver`。
何を: 組込み既定 < 図の既定 < グループ < オブジェクト の順でキー単位に疎マージし、
      完全に埋まった不変の `ResolvedStyle` を作る。z 順の並べ替えと方言非対応オプションの抽出も担う。
なぜ: 優先順位を 1 か所で定義し、描画パスごとに再計算できる純粋な解決器にするため
      （プロセス全体の可変な既定値レジストリは持たない）。

例:
    group  = {"fill": "red"}
    object = {"fill": "blue"}
    → fill=blue、line_width は図の既定（なければ組込み既定）
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Iterable, Mapping, Sequence, TypeVar

from vecfig.common.types import ZOrderMode

from .colors import Color
from .options import BUILTIN_DEFAULTS, OPTIONS, StyleIntent, validate_intent

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ResolvedStyle:
    """全オプションが具体値を持つ解決済みスタイル（不変）。`None` の色は「なし」。"""

    color: Color | None
    fill: Color | None
    line_width: float
    opacity: float
    fill_opacity: float
    line_style: str
    line_cap: str
    arrows: str
    marker_size: float
    label: str
    label_anchor: str
    font_size: float
    z_order: int
    shading: str
    rounded_corners: float
    css_class: str

    def as_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in _FIELD_NAMES}


_FIELD_NAMES = tuple(f.name for f in fields(ResolvedStyle))


class StyleResolver:
    """スタイル解決器。

    Parameters
    ----------
    builtin : Mapping[str, Any]
        組込み既定値。全オプションを含む必要がある（既定は `BUILTIN_DEFAULTS`）。
        テストや用途ごとに別の既定値を明示的に渡せる。
    """

    def __init__(self, builtin: Mapping[str, Any] = BUILTIN_DEFAULTS) -> None:
        base = dict(validate_intent(builtin))
        missing = sorted(set(OPTIONS) - set(base))
        if missing:
            raise ValueError(f"組込み既定値に不足があります: {missing}")
        self.builtin: Mapping[str, Any] = base

    def merge(self, *layers: StyleIntent | None) -> dict[str, Any]:
        """組込み既定に layers を左から順に重ねた辞書を返す（後ろほど優先）。"""
        merged = dict(self.builtin)
        for layer in layers:
            if layer:
                merged.update(layer)
        return merged

    def resolve(
        self,
        intent: StyleIntent | None = None,
        *,
        group: StyleIntent | None = None,
        figure_default: StyleIntent | None = None,
    ) -> ResolvedStyle:
        """オブジェクトの最終スタイルを解決する。

        各 intent は `validate_intent` 済みであることを前提にする（未検証の mapping も受理し、その場で検証する）。
        """
        layers = [validate_intent(x) if x is not None else None for x in (figure_default, group, intent)]
        merged = self.merge(*layers)
        return ResolvedStyle(**{name: merged[name] for name in _FIELD_NAMES})


def order_objects(
    objects: Sequence[T],
    styles: Sequence[ResolvedStyle],
    mode: ZOrderMode = "insertion",
) -> list[tuple[T, ResolvedStyle]]:
    """描画順に並べた (オブジェクト, スタイル) の組を返す。

    - insertion: 入力順（図の追加順）をそのまま使う（`effective_z_order_mode` を参照）。
    - explicit: `z_order` 昇順の安定ソート（同値は入力順）。
    """
    if len(objects) != len(styles):
        raise ValueError("objects と styles の長さが一致しません")
    pairs = list(zip(objects, styles))
    if mode == "insertion":
        return pairs
    if mode == "explicit":
        order = sorted(range(len(pairs)), key=lambda i: (pairs[i][1].z_order, i))
        return [pairs[i] for i in order]
    raise ValueError(f"未知の z_order_mode: {mode!r}")


def effective_z_order_mode(mode: ZOrderMode, intents: Iterable[StyleIntent | None]) -> ZOrderMode:
    """実際に使う並べ方を返す。

    `insertion` でも、スタイル連鎖のどこか（図の既定・グループ・オブジェクト）が
    `z_order` を明示していれば `explicit` として扱う。明示がなければ追加順のまま。
    """
    if mode == "insertion" and any(intent and "z_order" in intent for intent in intents):
        return "explicit"
    return mode


def unsupported_options(
    style: ResolvedStyle,
    dialect: str,
    builtin: Mapping[str, Any] = BUILTIN_DEFAULTS,
) -> tuple[list[str], list[str]]:
    """方言で表現できない（かつ既定値から変更された）オプションを返す。

    Returns
    -------
    (droppable, fatal)
        droppable は dialect-optional として黙って落とせるもの、fatal はそれ以外。
    """
    droppable: list[str] = []
    fatal: list[str] = []
    values = style.as_dict()
    for name, spec in OPTIONS.items():
        if spec.supported_by(dialect):
            continue
        if values[name] == builtin.get(name, spec.parse(spec.default)):
            continue
        (droppable if spec.droppable_in(dialect) else fatal).append(name)
    return droppable, fatal


__all__ = [
    "ResolvedStyle",
    "StyleResolver",
    "order_objects",
    "effective_z_order_mode",
    "unsupported_options",
]
