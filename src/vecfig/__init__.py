"""
vecfig: 抽象的な幾何シーンを TikZ / SVG などのテキスト形式ベクター図へ変換するライブラリ。

層構成（内側 → 外側）:
    common → engine.core → engine.projection / engine.style → engine.model → engine.export → api
"""

from vecfig.api import *  # noqa: F401,F403
from vecfig.api import __all__ as _api_all
from vecfig.common.errors import (
    CodecError,
    ErrorKind,
    GeometryError,
    ModelError,
    ProjectionError,
    StyleError,
    VecfigError,
)

__all__ = list(_api_all) + [
    "ErrorKind",
    "VecfigError",
    "GeometryError",
    "ProjectionError",
    "StyleError",
    "ModelError",
    "CodecError",
]

__version__ = "0.1.0"
