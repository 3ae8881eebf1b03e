"""
どこで: `vecfig.common` パッケージ。
何を: 全層で共有する軽量基盤（エラー型・設定・環境変数・ロギング・レジストリ）。
なぜ: 依存の最も内側に置き、engine/api の双方から循環なく再利用するため。
"""

from .base_registry import BaseRegistry
from .errors import (
    CodecError,
    ErrorKind,
    GeometryError,
    ModelError,
    ProjectionError,
    StyleError,
    VecfigError,
)

__all__ = [
    "BaseRegistry",
    "ErrorKind",
    "VecfigError",
    "GeometryError",
    "ProjectionError",
    "StyleError",
    "ModelError",
    "CodecError",
]
