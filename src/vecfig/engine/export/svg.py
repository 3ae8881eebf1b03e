"""
どこで: `vecfig.engine.export.svg`。
何を: 射影・解決済みの図オブジェクトを SVG 要素（`<path>` / `<circle>` / `<text>`）へ整形する。
なぜ: 同じ図モデルから Web/文書向けの SVG 本文を決定的に生成するため。

座標系:
- `viewBox="0 0 W H"` はキャンバス単位（1 単位 = 1cm）。`width`/`height` は cm で出す。
- SVG は y 軸が下向きのため `y_svg = H - y` で反転する。
- pt 指定の長さ（線幅・マーカー・文字サイズ）は `/ 28.3464567` でキャンバス単位へ換算し、
  座標精度とは独立した固定精度で出す。
- ラベルと属性値は XML で使えない制御文字を落としてからエスケープする。

要素 ID は `vecfig-<object id>`。矢印はオブジェクトごとの `<marker>` 定義を直前に置く。
クリップ時は軸範囲が写る矩形の `<clipPath>` と、それを参照する `<g>` で全体を包む。
"""

from __future__ import annotations

import re
from html import escape

from vecfig.engine.projection.projector import ProjectedGroup, ProjectedPath, ProjectedPoint
from vecfig.engine.style.colors import Color
from vecfig.engine.style.options import BUILTIN_DEFAULTS
from vecfig.engine.style.resolver import ResolvedStyle

from .base import PT_PER_CM, RenderContext, RenderItem, iter_leaves, label_position
from .registry import codec

SVG_NS = "http://www.w3.org/2000/svg"
CLIP_ID = "vecfig-clip"

# TikZ の既定パターンに合わせた破線（pt）
_DASHES_PT = {"dashed": (3.0, 3.0), "dotted": (0.4, 2.0), "dash_dot": (3.0, 2.0, 0.4, 2.0)}
_TEXT_ANCHORS = {
    "above": ("middle", "text-after-edge"),
    "below": ("middle", "text-before-edge"),
    "left": ("end", "central"),
    "right": ("start", "central"),
    "center": ("middle", "central"),
}

# XML 1.0 で使えない C0 制御文字（タブ・改行・復帰以外）
_XML_INVALID = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def svg_color(c: Color | None) -> str:
    return "none" if c is None else c.hex


def _pt(ctx: RenderContext, value_pt: float) -> str:
    return ctx.style_num(value_pt / PT_PER_CM)


def xml_text(text: str, *, quote: bool = False) -> str:
    """XML で使えない制御文字を落としてからエスケープする。"""
    return escape(_XML_INVALID.sub("", text), quote=quote)


def _attrs(pairs: list[tuple[str, str]]) -> str:
    return "".join(f' {k}="{xml_text(v, quote=True)}"' for k, v in pairs)


class _Flip:
    """キャンバス座標 → SVG 座標（y 反転）の整形器。"""

    def __init__(self, ctx: RenderContext) -> None:
        self.ctx = ctx
        self.fmt = ctx.fmt
        self.height = ctx.canvas_size[1]

    def xy(self, p) -> str:
        return self.fmt.pair(float(p[0]), self.height - float(p[1]), sep=" ")


def _path_data(path: ProjectedPath, flip: _Flip) -> str:
    parts = [f"M {flip.xy(path.coords[0])}"]
    for i, ctrl in enumerate(path.controls):
        end = path.coords[i + 1]
        if ctrl is None:
            parts.append(f"L {flip.xy(end)}")
        elif ctrl.shape[0] == 1:
            parts.append(f"Q {flip.xy(ctrl[0])} {flip.xy(end)}")
        else:
            parts.append(f"C {flip.xy(ctrl[0])} {flip.xy(ctrl[1])} {flip.xy(end)}")
    if path.closed:
        parts.append("Z")
    return " ".join(parts)


def _marker_id(object_id: int) -> str:
    return f"vecfig-arrow-{object_id}"


def _marker_defs(item: RenderItem) -> str:
    color = svg_color(item.style.color)
    return (
        f'<defs><marker id="{_marker_id(item.object_id)}" viewBox="0 0 10 10" refX="10" refY="5"'
        ' markerWidth="6" markerHeight="6" markerUnits="strokeWidth" orient="auto-start-reverse">'
        f'<path d="M 0 0 L 10 5 L 0 10 z" fill="{color}"/></marker></defs>\n'
    )


def _stroke_attrs(style: ResolvedStyle, ctx: RenderContext) -> list[tuple[str, str]]:
    out = [("stroke", svg_color(style.color))]
    if style.color is None:
        return out
    out.append(("stroke-width", _pt(ctx, style.line_width)))
    if style.opacity != BUILTIN_DEFAULTS["opacity"]:
        out.append(("stroke-opacity", ctx.style_num(style.opacity)))
    if style.line_style in _DASHES_PT:
        out.append(("stroke-dasharray", " ".join(_pt(ctx, v) for v in _DASHES_PT[style.line_style])))
    if style.line_cap != BUILTIN_DEFAULTS["line_cap"]:
        out.append(("stroke-linecap", style.line_cap))
    return out


def _path_element(path: ProjectedPath, item: RenderItem, flip: _Flip, element_id: str | None) -> str:
    style = item.style
    ctx = flip.ctx
    attrs: list[tuple[str, str]] = []
    if element_id is not None:
        attrs.append(("id", element_id))
    if style.css_class and element_id is not None:
        attrs.append(("class", style.css_class))
    attrs.append(("d", _path_data(path, flip)))
    attrs.append(("fill", svg_color(style.fill)))
    if style.fill is not None and style.fill_opacity != BUILTIN_DEFAULTS["fill_opacity"]:
        attrs.append(("fill-opacity", ctx.style_num(style.fill_opacity)))
    attrs.extend(_stroke_attrs(style, ctx))
    ref = f"url(#{_marker_id(item.object_id)})"
    if style.color is not None and style.arrows in ("<-", "<->"):
        attrs.append(("marker-start", ref))
    if style.color is not None and style.arrows in ("->", "<->"):
        attrs.append(("marker-end", ref))
    return f"<path{_attrs(attrs)}/>\n"


def _point_element(point: ProjectedPoint, item: RenderItem, flip: _Flip, element_id: str | None) -> str | None:
    style = item.style
    color = style.fill if style.fill is not None else style.color
    if color is None:
        return None
    ctx = flip.ctx
    cx, cy = flip.xy(point.xy).split(" ")
    attrs: list[tuple[str, str]] = []
    if element_id is not None:
        attrs.append(("id", element_id))
    if style.css_class and element_id is not None:
        attrs.append(("class", style.css_class))
    attrs += [("cx", cx), ("cy", cy), ("r", _pt(ctx, style.marker_size)), ("fill", svg_color(color))]
    if style.opacity != BUILTIN_DEFAULTS["opacity"]:
        attrs.append(("fill-opacity", ctx.style_num(style.opacity)))
    return f"<circle{_attrs(attrs)}/>\n"


def _text_element(item: RenderItem, flip: _Flip) -> str:
    style = item.style
    x, y = flip.xy(label_position(item.shape, style.label_anchor)).split(" ")
    anchor, baseline = _TEXT_ANCHORS[style.label_anchor]
    color = style.color if style.color is not None else BUILTIN_DEFAULTS["color"]
    attrs = [
        ("x", x),
        ("y", y),
        ("font-size", _pt(flip.ctx, style.font_size)),
        ("text-anchor", anchor),
        ("dominant-baseline", baseline),
        ("fill", svg_color(color)),
    ]
    return f"<text{_attrs(attrs)}>{xml_text(style.label)}</text>\n"


@codec("svg")
class SvgCodec:
    """SVG 方言のコーデック。"""

    dialect = "svg"

    def begin(self, ctx: RenderContext) -> list[str]:
        w, h = ctx.canvas_size
        size = ctx.style_num
        root = _attrs(
            [
                ("xmlns", SVG_NS),
                ("width", f"{size(w)}cm"),
                ("height", f"{size(h)}cm"),
                ("viewBox", f"0 0 {size(w)} {size(h)}"),
            ]
        )
        out = [f"<svg{root}>\n"]
        if ctx.clip:
            fmt = ctx.fmt
            x0, y0, x1, y1 = ctx.clip_box
            rect = _attrs(
                [
                    ("x", fmt.num(x0)),
                    ("y", fmt.num(h - y1)),
                    ("width", fmt.num(x1 - x0)),
                    ("height", fmt.num(y1 - y0)),
                ]
            )
            out.append(f'<defs><clipPath id="{CLIP_ID}"><rect{rect}/></clipPath></defs>\n')
            out.append(f'<g clip-path="url(#{CLIP_ID})">\n')
        return out

    def emit_object(self, item: RenderItem, ctx: RenderContext) -> list[str]:
        flip = _Flip(ctx)
        element_id = f"vecfig-{item.object_id}"
        grouped = isinstance(item.shape, ProjectedGroup) or bool(item.style.label)

        out: list[str] = []
        if item.style.arrows != "none" and item.style.color is not None:
            out.append(_marker_defs(item))
        if grouped:
            attrs = [("id", element_id)]
            if item.style.css_class:
                attrs.append(("class", item.style.css_class))
            out.append(f"<g{_attrs(attrs)}>\n")
        leaf_id = None if grouped else element_id
        for leaf in iter_leaves(item.shape):
            if isinstance(leaf, ProjectedPath):
                out.append(_path_element(leaf, item, flip, leaf_id))
            elif isinstance(leaf, ProjectedPoint):
                el = _point_element(leaf, item, flip, leaf_id)
                if el is not None:
                    out.append(el)
        if item.style.label:
            out.append(_text_element(item, flip))
        if grouped:
            out.append("</g>\n")
        return out

    def end(self, ctx: RenderContext) -> list[str]:
        out: list[str] = []
        if ctx.clip:
            out.append("</g>\n")
        out.append("</svg>\n")
        return out


__all__ = ["SvgCodec", "svg_color", "xml_text"]
