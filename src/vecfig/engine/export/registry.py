"""
どこで: `vecfig.engine.export` のレジストリ層（コーデッククラス専用）。
何を: `@codec` デコレータによる登録と取得/一覧/検査を提供（キーは正規化）。
なぜ: 出力方言を一貫 API で管理し、図モデルに触れずに方言を追加できるようにするため。

公開 API 概要:
- `codec`（デコレータ）: クラスを登録
- `get_codec(name)` / `list_codecs()` / `is_codec_registered(name)` / `unregister(name)`
- `get_registry()`: 読み取り専用ビュー（テスト/診断用）
"""

from __future__ import annotations

import inspect
from typing import Any, Mapping

from vecfig.common.base_registry import BaseRegistry
from vecfig.common.errors import CodecError, ErrorKind

from .base import Codec

# 共通レジストリ
_codec_registry = BaseRegistry()


def _key(name: str) -> str:
    # "TikZ" のような混在表記もキャメル分割せずに受理する
    return name.strip().lower() if isinstance(name, str) else name


def codec(arg: Any | None = None, /, name: str | None = None):
    """コーデッククラスを登録するデコレータ。

    使用例:
    - `@codec` / `@codec()`              → クラス属性 `dialect`（なければクラス名）で登録。
    - `@codec("tikz")` / `@codec(name="tikz")` → 明示名で登録。

    例外:
    - TypeError: クラス以外を登録しようとした場合。
    """

    def _register_checked(obj: Any, resolved_name: str | None = None):
        if not inspect.isclass(obj):
            raise TypeError(f"@codec はクラスのみ登録可能です: got {obj!r}")
        dialect = resolved_name or getattr(obj, "dialect", None) or obj.__name__
        return _codec_registry.register(_key(dialect))(obj)

    if inspect.isclass(arg) and name is None:
        return _register_checked(arg, None)

    if isinstance(arg, str) and name is None:

        def _decorator_named(obj: Any):
            return _register_checked(obj, arg)

        return _decorator_named

    def _decorator_generic(obj: Any):
        return _register_checked(obj, name)

    return _decorator_generic


def get_codec(name: str) -> Codec:
    """登録されたコーデックのインスタンスを返す。

    例外:
    - CodecError: 未登録の方言（UnknownDialect）。
    """
    try:
        cls = _codec_registry.get(_key(name))
    except (KeyError, TypeError, ValueError) as e:
        raise CodecError(ErrorKind.UNKNOWN_DIALECT, f"未登録の出力方言です: {name!r}") from e
    return cls()


def list_codecs() -> list[str]:
    """登録済み方言名をソートして返す。"""
    return sorted(_codec_registry.list_all())


def is_codec_registered(name: str) -> bool:
    """名前が登録済みかを返す。"""
    return _codec_registry.is_registered(_key(name))


def unregister(name: str) -> None:
    """名前を指定して登録を解除（存在しない場合は無視）。"""
    _codec_registry.unregister(_key(name))


def get_registry() -> Mapping[str, Any]:
    """読み取り専用ビューとしてレジストリ辞書を返す。"""
    return _codec_registry.registry


__all__ = [
    "codec",
    "get_codec",
    "list_codecs",
    "is_codec_registered",
    "unregister",
    "get_registry",
]
