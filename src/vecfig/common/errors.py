"""
どこで: `vecfig.common.errors`
何を: 幾何/投影/スタイル/モデル/コーデックの各層が送出する例外型と、その種別 `ErrorKind`。
なぜ: 呼び出し側（CLI 等）が「種別」と「対象オブジェクト ID」を一様に取り出せるようにするため。

方針:
- どの層の例外も直近の呼び出し元へ伝播させる（握りつぶさない）。
- 下位層の例外を包み直す場合は `raise ... from err` で原因を保持する。
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """エラー種別。値は表示/ログ用の CamelCase 名。"""

    DEGENERATE_SHAPE = "DegenerateShape"
    DEGENERATE_AXIS = "DegenerateAxis"
    INVALID_PROJECTION = "InvalidProjection"
    UNRECOGNIZED_OPTION = "UnrecognizedOption"
    INVALID_VALUE = "InvalidValue"
    INVALID_GEOMETRY = "InvalidGeometry"
    UNKNOWN_OBJECT = "UnknownObject"
    UNSUPPORTED_STYLE_FOR_DIALECT = "UnsupportedStyleForDialect"
    UNKNOWN_DIALECT = "UnknownDialect"


class VecfigError(Exception):
    """全エラーの基底。

    属性:
        kind: エラー種別。
        object_id: 問題のあった FigureObject の ID（特定できる場合のみ）。
    """

    allowed_kinds: frozenset[ErrorKind] = frozenset()

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        object_id: int | None = None,
    ) -> None:
        if self.allowed_kinds and kind not in self.allowed_kinds:
            raise TypeError(f"{type(self).__name__} は kind={kind.value} を取れません")
        self.kind = kind
        self.message = message
        self.object_id = object_id
        super().__init__(self._format())

    def _format(self) -> str:
        prefix = f"[{self.kind.value}]"
        if self.object_id is not None:
            prefix += f" object {self.object_id}:"
        return f"{prefix} {self.message}"

    def with_object(self, object_id: int) -> "VecfigError":
        """`object_id` を付与した同型の例外を返す（原因チェーンは呼び出し側で付ける）。"""
        return type(self)(self.kind, self.message, object_id=object_id)


class GeometryError(VecfigError):
    allowed_kinds = frozenset({ErrorKind.DEGENERATE_SHAPE})


class ProjectionError(VecfigError):
    allowed_kinds = frozenset({ErrorKind.DEGENERATE_AXIS, ErrorKind.INVALID_PROJECTION})


class StyleError(VecfigError):
    allowed_kinds = frozenset({ErrorKind.UNRECOGNIZED_OPTION, ErrorKind.INVALID_VALUE})


class ModelError(VecfigError):
    allowed_kinds = frozenset({ErrorKind.INVALID_GEOMETRY, ErrorKind.UNKNOWN_OBJECT})


class CodecError(VecfigError):
    allowed_kinds = frozenset(
        {ErrorKind.UNSUPPORTED_STYLE_FOR_DIALECT, ErrorKind.UNKNOWN_DIALECT}
    )


__all__ = [
    "ErrorKind",
    "VecfigError",
    "GeometryError",
    "ProjectionError",
    "StyleError",
    "ModelError",
    "CodecError",
]
