"""
どこで: `vecfig.engine.style.options`。
何を: 認識するスタイルオプションの閉じたスキーマ（検証関数・組込み既定値・対応方言）と、
      疎なスタイル指定 `StyleIntent` の検証 `validate_intent()`。
なぜ: 動的なオプション袋をやめ、タイプミスや不正値を構築時の `StyleError` に変えるため。

対応方言の表し方:
- `dialects=None` は全方言（将来追加される方言を含む）で表現可能。
- `optional_in` に含まれる方言では、表現できなくても黙って落としてよい（dialect-optional）。
- どちらにも該当しない方言で既定値以外が指定されていれば、出力時に `CodecError` になる。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from vecfig.common.base_registry import BaseRegistry
from vecfig.common.errors import ErrorKind, StyleError

from .colors import parse_color

StyleIntent = Mapping[str, Any]


@dataclass(frozen=True)
class OptionSpec:
    """1 オプション分のスキーマ。"""

    name: str
    default: Any
    parse: Callable[[Any], Any]
    dialects: frozenset[str] | None = None
    optional_in: frozenset[str] = field(default_factory=frozenset)
    doc: str = ""

    def supported_by(self, dialect: str) -> bool:
        return self.dialects is None or dialect in self.dialects

    def droppable_in(self, dialect: str) -> bool:
        return dialect in self.optional_in


# ── 値の検証関数（ValueError を送出し、呼び出し側で StyleError に包む） ──
def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"数値が必要です: {value!r}")
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"有限値が必要です: {value!r}")
    return v


def _non_negative(value: Any) -> float:
    v = _number(value)
    if v < 0.0:
        raise ValueError(f"0 以上が必要です: {value!r}")
    return v


def _positive(value: Any) -> float:
    v = _number(value)
    if v <= 0.0:
        raise ValueError(f"正の値が必要です: {value!r}")
    return v


def _unit_interval(value: Any) -> float:
    v = _number(value)
    if not 0.0 <= v <= 1.0:
        raise ValueError(f"0..1 の値が必要です: {value!r}")
    return v


def _integer(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"整数が必要です: {value!r}")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValueError(f"整数が必要です: {value!r}")


def _text(value: Any) -> str:
    if isinstance(value, bool):
        raise ValueError(f"文字列が必要です: {value!r}")
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"文字列が必要です: {value!r}")


def _choice(*choices: str) -> Callable[[Any], str]:
    def parse(value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError(f"{choices} のいずれかが必要です: {value!r}")
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        if value.strip() in choices:
            return value.strip()
        if key in choices:
            return key
        raise ValueError(f"{choices} のいずれかが必要です: {value!r}")

    return parse


def _arrows(value: Any) -> str:
    if value is None or value is False:
        return "none"
    if isinstance(value, str) and value.strip() in ("none", "->", "<-", "<->"):
        return value.strip()
    raise ValueError(f"'none', '->', '<-', '<->' のいずれかが必要です: {value!r}")


_ALL_SPECS = (
    OptionSpec("color", "black", parse_color, doc="線の色（'none' で線なし）"),
    OptionSpec("fill", "none", parse_color, doc="塗りの色（'none' で塗りなし）"),
    OptionSpec("line_width", 1.0, _non_negative, doc="線幅 [pt]"),
    OptionSpec("opacity", 1.0, _unit_interval, doc="線（と全体）の不透明度"),
    OptionSpec("fill_opacity", 1.0, _unit_interval, doc="塗りの不透明度"),
    OptionSpec("line_style", "solid", _choice("solid", "dashed", "dotted", "dash_dot")),
    OptionSpec("line_cap", "butt", _choice("butt", "round", "square")),
    OptionSpec("arrows", "none", _arrows, doc="矢印（開路のみ有効）"),
    OptionSpec("marker_size", 1.5, _positive, doc="点マーカーの半径 [pt]"),
    OptionSpec("label", "", _text, doc="ラベル文字列（出力時にエスケープ）"),
    OptionSpec("label_anchor", "above", _choice("above", "below", "left", "right", "center")),
    OptionSpec("font_size", 10.0, _positive, doc="ラベルの文字サイズ [pt]"),
    OptionSpec("z_order", 0, _integer, doc="描画順（昇順、同値は追加順）。一つでも明示されれば insertion でも並べ替える"),
    OptionSpec(
        "shading",
        "none",
        _choice("none", "axis", "radial", "ball"),
        dialects=frozenset({"tikz"}),
        doc="TikZ のシェーディング",
    ),
    OptionSpec(
        "rounded_corners",
        0.0,
        _non_negative,
        dialects=frozenset({"tikz"}),
        optional_in=frozenset({"svg"}),
        doc="角丸半径 [pt]",
    ),
    OptionSpec(
        "css_class",
        "",
        _text,
        dialects=frozenset({"svg"}),
        optional_in=frozenset({"tikz"}),
        doc="SVG 要素の class 属性",
    ),
)

OPTIONS: Mapping[str, OptionSpec] = MappingProxyType({s.name: s for s in _ALL_SPECS})

BUILTIN_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {s.name: s.parse(s.default) for s in _ALL_SPECS}
)


def normalize_option_name(name: object) -> str:
    """オプション名を正規化する（"line-width" / "line width" / "LineWidth" → "line_width"）。

    Raises
    ------
    StyleError
        未知の名前（UnrecognizedOption）。
    """
    if not isinstance(name, str) or not name.strip():
        raise StyleError(ErrorKind.UNRECOGNIZED_OPTION, f"オプション名が不正です: {name!r}")
    key = BaseRegistry.normalize_key(name)
    if key not in OPTIONS:
        raise StyleError(ErrorKind.UNRECOGNIZED_OPTION, f"未知のスタイルオプション: {name!r}")
    return key


def validate_option(name: object, value: Any) -> tuple[str, Any]:
    """1 組の (名前, 値) を検証して正規化済みの組を返す。"""
    key = normalize_option_name(name)
    try:
        return key, OPTIONS[key].parse(value)
    except ValueError as e:
        raise StyleError(ErrorKind.INVALID_VALUE, f"{key}: {e}") from e


def validate_intent(intent: Mapping[str, Any] | None) -> StyleIntent:
    """疎なスタイル指定を検証し、正規化済みの読み取り専用マッピングを返す。

    - 未設定のキーは「継承」を意味する（ここでは補完しない）。
    - 正規化後に同じ名前になるキーが複数あれば `StyleError(InvalidValue)`。
    """
    if intent is None:
        return MappingProxyType({})
    if not isinstance(intent, Mapping):
        raise StyleError(
            ErrorKind.INVALID_VALUE, f"スタイル指定は mapping である必要があります: {type(intent).__name__}"
        )
    out: dict[str, Any] = {}
    for raw_key, raw_value in intent.items():
        key, value = validate_option(raw_key, raw_value)
        if key in out:
            raise StyleError(ErrorKind.INVALID_VALUE, f"オプション {key!r} が重複しています")
        out[key] = value
    return MappingProxyType(out)


__all__ = [
    "OptionSpec",
    "OPTIONS",
    "BUILTIN_DEFAULTS",
    "StyleIntent",
    "normalize_option_name",
    "validate_option",
    "validate_intent",
]
