"""
どこで: `vecfig.engine.export`（出力コーデック層）。
何を: 方言ごとのコーデック（TikZ/SVG）の登録と、描画パス `emit()`。
なぜ: 図モデルから独立した方言実装を、レジストリ経由で差し替え/追加できるようにするため。
"""

from . import svg as _svg  # noqa: F401  (登録の副作用)
from . import tikz as _tikz  # noqa: F401  (登録の副作用)
from .base import Codec, NumberFormat, RenderContext, RenderItem
from .registry import codec, get_codec, is_codec_registered, list_codecs, unregister
from .service import emit

__all__ = [
    "Codec",
    "NumberFormat",
    "RenderContext",
    "RenderItem",
    "codec",
    "get_codec",
    "is_codec_registered",
    "list_codecs",
    "unregister",
    "emit",
]
