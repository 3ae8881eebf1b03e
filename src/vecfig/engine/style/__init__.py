"""
どこで: `vecfig.engine.style`（スタイル解決）。
何を: 閉じたオプションスキーマ、色の正規化、優先順位付きの疎マージ、z 順の決定。
なぜ: 図モデルと出力コーデックの双方が、同じ検証済みスタイルを共有するため。
"""

from .colors import NAMED_COLORS, Color, parse_color
from .options import (
    BUILTIN_DEFAULTS,
    OPTIONS,
    OptionSpec,
    StyleIntent,
    normalize_option_name,
    validate_intent,
    validate_option,
)
from .resolver import ResolvedStyle, StyleResolver, order_objects, unsupported_options

__all__ = [
    "Color",
    "NAMED_COLORS",
    "parse_color",
    "OptionSpec",
    "OPTIONS",
    "BUILTIN_DEFAULTS",
    "StyleIntent",
    "normalize_option_name",
    "validate_option",
    "validate_intent",
    "ResolvedStyle",
    "StyleResolver",
    "order_objects",
    "unsupported_options",
]
