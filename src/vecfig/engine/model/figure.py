"""
どこで: `vecfig.engine.model.figure`（図オブジェクトモデル）。
何を: 図 `Figure` と、その唯一の構成要素 `FigureObject`（幾何 + 疎なスタイル指定 + ID + 追加順）。
なぜ: シーンの正本を 1 か所に置き、構築 API（Drawable 層から呼ばれる）と描画パスの読み取りを分けるため。

不変条件:
- ID は正の整数で、図の寿命の間は一意（削除/クリア後も再利用しない）。
- 追加順は安定。並べ替えは描画時の explicit z 順だけで、図の中身は並べ替えない。
- FigureObject は不変。作成後の変更は `replace_object`（同じ ID・同じ位置に新しいオブジェクト）のみ。
- 変更のたびに `revision` が進む。描画パスは `snapshot()` の一貫した状態だけを読む。

単一書き手を前提とする（構築中の並行変更は非対応）。完成した図の読み取りは並行に行ってよい。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from vecfig.common.errors import ErrorKind, GeometryError, ModelError
from vecfig.common.types import ObjectId
from vecfig.engine.core.geometry import Shape, max_abs_z, validate_shape
from vecfig.engine.projection.canvas import AXES_2D, AXES_3D, AxisRange
from vecfig.engine.projection.view import ViewProjection
from vecfig.engine.style.options import StyleIntent, validate_intent

logger = logging.getLogger(__name__)

_KEEP: Any = object()


@dataclass(frozen=True)
class FigureObject:
    """図オブジェクト（不変）。

    属性:
        id: 図内で一意な ID。
        index: 追加順の通し番号（置換しても変わらない）。
        geometry: 検証済みの Shape。
        style: 検証済みの疎なスタイル指定（読み取り専用）。
        group: 所属グループ名（なければ None）。
    """

    id: ObjectId
    index: int
    geometry: Shape
    style: StyleIntent
    group: str | None = None


@dataclass(frozen=True)
class FigureSnapshot:
    """描画パスが読む図の一貫した状態。"""

    dims: int
    objects: tuple[FigureObject, ...]
    default_style: StyleIntent
    group_styles: Mapping[str, StyleIntent]
    axis_ranges: Mapping[str, AxisRange | None]
    projection: ViewProjection | None
    revision: int

    def group_style(self, name: str | None) -> StyleIntent | None:
        if name is None:
            return None
        return self.group_styles.get(name)


class ObjectsView:
    """図オブジェクトの再開可能な遅延ビュー。

    反復を開始した時点の並びを複製して返すため、反復中の図の変更は観測しない。
    """

    __slots__ = ("_figure",)

    def __init__(self, figure: "Figure") -> None:
        self._figure = figure

    def __iter__(self) -> Iterator[FigureObject]:
        snapshot = tuple(self._figure._objects)
        return iter(snapshot)

    def __len__(self) -> int:
        return len(self._figure._objects)


def _check_group(group: object) -> str | None:
    if group is None:
        return None
    if not isinstance(group, str) or not group.strip():
        raise ValueError(f"グループ名は空でない文字列である必要があります: {group!r}")
    return group


class Figure:
    """キャンバス/文脈。図オブジェクトを追加順に保持する。

    Parameters
    ----------
    dims : int
        2（既定）または 3。2D 図は z != 0 の幾何を受理しない。
    default_style : Mapping | None
        図全体の既定スタイル（組込み既定の次に弱い）。
    projection : ViewProjection | None
        3D 図のビュー射影。None なら描画時に既定ビューを使う。
    """

    def __init__(
        self,
        dims: int = 2,
        default_style: Mapping[str, Any] | None = None,
        projection: ViewProjection | None = None,
    ) -> None:
        if dims not in (2, 3):
            raise ValueError(f"dims は 2 か 3: got {dims}")
        self.dims = dims
        self._objects: list[FigureObject] = []
        self._by_id: dict[ObjectId, FigureObject] = {}
        self._next_id: ObjectId = 1
        self._next_index = 0
        self._default_style: StyleIntent = validate_intent(default_style)
        self._group_styles: dict[str, StyleIntent] = {}
        axes = AXES_3D if dims == 3 else AXES_2D
        self._ranges: dict[str, AxisRange | None] = {a: None for a in axes}
        self._projection: ViewProjection | None = None
        self.revision = 0
        if projection is not None:
            self.set_projection(projection)

    # ── 内部 ───────────────────
    def _touch(self) -> None:
        self.revision += 1

    def _validate_geometry(self, geometry: object) -> Shape:
        try:
            shape = validate_shape(geometry)
        except GeometryError as e:
            raise ModelError(ErrorKind.INVALID_GEOMETRY, f"幾何が不正です: {e.message}") from e
        if self.dims == 2 and max_abs_z(shape) != 0.0:
            raise ModelError(ErrorKind.INVALID_GEOMETRY, "2D 図に z != 0 の幾何は追加できません")
        return shape

    def _require(self, object_id: ObjectId) -> FigureObject:
        obj = self._by_id.get(object_id)
        if obj is None:
            raise ModelError(ErrorKind.UNKNOWN_OBJECT, "存在しない ID です", object_id=object_id)
        return obj

    def _position(self, object_id: ObjectId) -> int:
        for pos, obj in enumerate(self._objects):
            if obj.id == object_id:
                return pos
        raise ModelError(ErrorKind.UNKNOWN_OBJECT, "存在しない ID です", object_id=object_id)

    def _check_axis(self, axis: str) -> str:
        if axis not in self._ranges:
            raise ValueError(f"{self.dims}D 図の軸は {tuple(self._ranges)} のいずれか: got {axis!r}")
        return axis

    # ── 構築 API ───────────────────
    def add_object(
        self,
        geometry: object,
        style: Mapping[str, Any] | None = None,
        group: str | None = None,
    ) -> ObjectId:
        """図オブジェクトを末尾に追加し、新しい ID を返す。

        検証（幾何 → スタイル → グループ名）がすべて通ってから状態を変更する。

        Raises
        ------
        ModelError
            幾何が不正（InvalidGeometry）。
        StyleError
            未知のオプション（UnrecognizedOption）や不正値（InvalidValue）。
        """
        shape = self._validate_geometry(geometry)
        intent = validate_intent(style)
        grp = _check_group(group)

        obj = FigureObject(self._next_id, self._next_index, shape, intent, grp)
        self._next_id += 1
        self._next_index += 1
        self._objects.append(obj)
        self._by_id[obj.id] = obj
        self._touch()
        logger.debug("added object %d (group=%s)", obj.id, grp)
        return obj.id

    def remove_object(self, object_id: ObjectId) -> FigureObject:
        """ID で削除し、削除したオブジェクトを返す。"""
        obj = self._require(object_id)
        del self._objects[self._position(object_id)]
        del self._by_id[object_id]
        self._touch()
        logger.debug("removed object %d", object_id)
        return obj

    def replace_object(
        self,
        object_id: ObjectId,
        *,
        geometry: object = _KEEP,
        style: Mapping[str, Any] | None = _KEEP,
        group: str | None = _KEEP,
    ) -> FigureObject:
        """同じ ID・同じ位置に新しいオブジェクトを置く。省略した項目は元の値を引き継ぐ。"""
        old = self._require(object_id)
        shape = old.geometry if geometry is _KEEP else self._validate_geometry(geometry)
        intent = old.style if style is _KEEP else validate_intent(style)
        grp = old.group if group is _KEEP else _check_group(group)

        new = FigureObject(old.id, old.index, shape, intent, grp)
        self._objects[self._position(object_id)] = new
        self._by_id[object_id] = new
        self._touch()
        logger.debug("replaced object %d", object_id)
        return new

    def set_default_style(self, intent: Mapping[str, Any] | None) -> None:
        """図全体の既定スタイルを置き換える（None で空に戻す）。"""
        self._default_style = validate_intent(intent)
        self._touch()

    def set_group_style(self, name: str, intent: Mapping[str, Any] | None) -> None:
        """名前付きグループのスタイルを設定する（None で削除）。"""
        key = _check_group(name)
        assert key is not None
        if intent is None:
            self._group_styles.pop(key, None)
        else:
            self._group_styles[key] = validate_intent(intent)
        self._touch()

    def set_axis_range(self, axis: str, lo: float, hi: float) -> None:
        """軸範囲を設定する。

        Raises
        ------
        ProjectionError
            lo == hi（DegenerateAxis）。
        ValueError
            未知の軸名や lo > hi。
        """
        self._ranges[self._check_axis(axis)] = AxisRange(lo, hi)
        self._touch()

    def clear_axis_range(self, axis: str) -> None:
        """軸範囲を未設定（幾何からの自動決定）に戻す。"""
        self._ranges[self._check_axis(axis)] = None
        self._touch()

    def set_projection(self, view: ViewProjection | None) -> None:
        """3D 図のビュー射影を設定する（None で既定ビュー）。"""
        if self.dims != 3 and view is not None:
            raise ValueError("ビュー射影は 3D 図でのみ設定できます")
        if view is not None and not isinstance(view, ViewProjection):
            raise TypeError(f"ViewProjection が必要です: got {type(view).__name__}")
        self._projection = view
        self._touch()

    def clear(self) -> None:
        """全オブジェクトを破棄する（ID は再利用しない。スタイル/範囲は保持）。"""
        self._objects.clear()
        self._by_id.clear()
        self._touch()

    # ── 参照 API ───────────────────
    def objects(self) -> ObjectsView:
        return ObjectsView(self)

    def get(self, object_id: ObjectId) -> FigureObject:
        return self._require(object_id)

    @property
    def default_style(self) -> StyleIntent:
        return self._default_style

    def group_style(self, name: str) -> StyleIntent | None:
        return self._group_styles.get(name)

    def axis_range(self, axis: str) -> AxisRange | None:
        return self._ranges[self._check_axis(axis)]

    @property
    def projection(self) -> ViewProjection | None:
        return self._projection

    def snapshot(self) -> FigureSnapshot:
        """現在の状態の一貫したコピーを返す（描画パス用）。"""
        return FigureSnapshot(
            dims=self.dims,
            objects=tuple(self._objects),
            default_style=self._default_style,
            group_styles=MappingProxyType(dict(self._group_styles)),
            axis_ranges=MappingProxyType(dict(self._ranges)),
            projection=self._projection,
            revision=self.revision,
        )

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, object_id: object) -> bool:
        return object_id in self._by_id

    def __iter__(self) -> Iterator[FigureObject]:
        return iter(self.objects())

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"Figure(dims={self.dims}, objects={len(self._objects)}, revision={self.revision})"


__all__ = ["Figure", "FigureObject", "FigureSnapshot", "ObjectsView"]
