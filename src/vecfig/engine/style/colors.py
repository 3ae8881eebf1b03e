"""
どこで: `vecfig.engine.style.colors`。
何を: 色指定（名前 / Hex / RGB タプル）の正規化と、名前付きパレット。
なぜ: 構築時に色を一度だけ検証し、出力コーデックは正規化済みの `Color` だけを扱えばよいようにするため。

受理仕様:
- 名前: `NAMED_COLORS` のキー（大文字小文字不問、"grey" は "gray" の別名）。
- Hex: "#RRGGBB", "0xRRGGBB", "RRGGBB"（"#RRGGBBAA" は AA=FF のときのみ。透明度は opacity で指定）。
- タプル/リスト: (r, g, b)。全要素が 0..1 なら 0..1 とみなし、そうでなければ 0..255。
- "none": 色なし（`None` を返す）。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

# xcolor 名と RGB（0..255）
NAMED_COLORS: dict[str, tuple[int, int, int]] = {
    "red": (238, 0, 0),
    "green": (0, 238, 0),
    "blue": (0, 0, 238),
    "cyan": (0, 238, 238),
    "magenta": (238, 0, 238),
    "yellow": (238, 238, 0),
    "black": (0, 0, 0),
    "gray": (136, 136, 136),
    "darkgray": (68, 68, 68),
    "lightgray": (187, 187, 187),
    "brown": (150, 75, 0),
    "lime": (191, 255, 0),
    "olive": (128, 128, 0),
    "orange": (255, 165, 0),
    "pink": (255, 105, 180),
    "purple": (179, 0, 179),
    "teal": (0, 154, 154),
    "violet": (238, 130, 238),
    "white": (238, 238, 238),
}

_ALIASES = {"grey": "gray", "darkgrey": "darkgray", "lightgrey": "lightgray"}


@dataclass(frozen=True)
class Color:
    """正規化済みの色。`name` は名前付きパレット由来のときのみ設定される。"""

    rgb: tuple[int, int, int]
    name: str | None = None

    @property
    def hex(self) -> str:
        r, g, b = self.rgb
        return f"#{r:02x}{g:02x}{b:02x}"


def parse_hex_color_str(s: str) -> tuple[int, int, int]:
    """Hex 文字列から RGB(0–255) を返す。"""
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
        a = int(t[6:8], 16) if len(t) == 8 else 255
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    if a != 255:
        raise ValueError(f"hex color alpha is not supported (use opacity): '{s}'")
    return (r, g, b)


def _rgb_from_sequence(seq: Sequence[object]) -> tuple[int, int, int]:
    if len(seq) != 3:
        raise ValueError("color tuple/list must be length 3")
    if any(isinstance(v, bool) for v in seq):
        raise ValueError(f"invalid color tuple/list: {tuple(seq)!r}")
    try:
        fseq = [float(v) for v in seq]  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {tuple(seq)!r}") from e
    if all(0.0 <= x <= 1.0 for x in fseq):
        return tuple(int(round(x * 255)) for x in fseq)  # type: ignore[return-value]
    if all(0.0 <= x <= 255.0 for x in fseq):
        return tuple(int(round(x)) for x in fseq)  # type: ignore[return-value]
    raise ValueError(f"color components must be within 0..1 or 0..255: {tuple(seq)!r}")


def parse_color(value: object) -> Color | None:
    """色指定を `Color` へ正規化する（"none" は `None`）。

    Raises
    ------
    ValueError
        解釈できない指定（呼び出し側で `StyleError(InvalidValue)` に包む）。
    """
    if value is None:
        return None
    if isinstance(value, Color):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key == "none":
            return None
        key = _ALIASES.get(key, key)
        if key in NAMED_COLORS:
            return Color(NAMED_COLORS[key], key)
        return Color(parse_hex_color_str(value))
    if isinstance(value, (list, tuple)):
        return Color(_rgb_from_sequence(value))
    raise ValueError(f"unsupported color type: {type(value)!r}")


__all__ = ["Color", "NAMED_COLORS", "parse_color", "parse_hex_color_str"]
