r"""
どこで: `vecfig.engine.export.tikz`。
何を: 射影・解決済みの図オブジェクトを TikZ の文（`\draw` / `\fill` / `\filldraw` / `\path` / `\node`）へ整形する。
なぜ: 論文/文書向けの TikZ 本文を、決定的かつエスケープ済みで生成するため。

出力の形:

    \begin{tikzpicture}
    \draw[draw=black, line width=1pt] (0.0000,0.0000) -- (1.0000,1.0000);
    \end{tikzpicture}

- 座標は `(x,y)`（キャンバス単位 = cm、TikZ の既定単位）。
- 直線は `--`、曲線は `.. controls (c1) and (c2) ..`（2 次は 3 次へ昇格）、閉路は `-- cycle`。
- 点は `\fill (x,y) circle[radius=…pt];`、ラベルは `\node[anchor=…] at (x,y) {…};`。
- 色は xcolor の名前、それ以外は `{rgb,255:red,R;green,G;blue,B}`。
- `line width` と（線があれば）`draw=` は常に出し、他のオプションは既定値と異なるときのみ出す。
- 線幅・不透明度・文字サイズは座標精度と独立した固定精度で出す。
- クリップ時は `scope` 内で、軸範囲が写る矩形へ `\clip (x0,y0) rectangle (x1,y1);` を先に置く。
"""

from __future__ import annotations

from vecfig.engine.projection.projector import ProjectedPath, ProjectedPoint
from vecfig.engine.style.colors import Color
from vecfig.engine.style.options import BUILTIN_DEFAULTS
from vecfig.engine.style.resolver import ResolvedStyle

from .base import NumberFormat, RenderContext, RenderItem, elevate_quadratic, iter_leaves, label_position
from .registry import codec

_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "#": r"\#",
    "$": r"\$",
    "%": r"\%",
    "&": r"\&",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}

_LINE_STYLES = {"dashed": "dashed", "dotted": "dotted", "dash_dot": "dash dot"}
_LINE_CAPS = {"round": "line cap=round", "square": "line cap=rect"}
_ANCHORS = {"above": "south", "below": "north", "left": "east", "right": "west", "center": "center"}
_SHADING_COLOR_KEYS = {"ball": "ball color", "radial": "inner color", "axis": "top color"}


def escape_latex(text: str) -> str:
    """LaTeX の特殊文字をエスケープする（改行は空白に置換）。"""
    flat = text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return "".join(_LATEX_SPECIALS.get(ch, ch) for ch in flat)


def tikz_color(c: Color) -> str:
    if c.name is not None:
        return c.name
    r, g, b = c.rgb
    return f"{{rgb,255:red,{r};green,{g};blue,{b}}}"


def _coord(fmt: NumberFormat, xy) -> str:
    return f"({fmt.pair(float(xy[0]), float(xy[1]))})"


def _path_body(path: ProjectedPath, fmt: NumberFormat) -> str:
    parts = [_coord(fmt, path.coords[0])]
    for i, ctrl in enumerate(path.controls):
        end = path.coords[i + 1]
        if ctrl is None:
            parts.append(f"-- {_coord(fmt, end)}")
            continue
        if ctrl.shape[0] == 1:
            c1, c2 = elevate_quadratic(path.coords[i], ctrl[0], end)
        else:
            c1, c2 = ctrl[0], ctrl[1]
        parts.append(f".. controls {_coord(fmt, c1)} and {_coord(fmt, c2)} .. {_coord(fmt, end)}")
    if path.closed:
        parts.append("-- cycle")
    return " ".join(parts)


def _common_options(style: ResolvedStyle, ctx: RenderContext) -> list[str]:
    opts: list[str] = []
    if style.line_style in _LINE_STYLES:
        opts.append(_LINE_STYLES[style.line_style])
    if style.line_cap in _LINE_CAPS:
        opts.append(_LINE_CAPS[style.line_cap])
    if style.arrows != "none":
        opts.append(style.arrows)
    if style.opacity != BUILTIN_DEFAULTS["opacity"]:
        opts.append(f"opacity={ctx.style_num(style.opacity)}")
    if style.fill_opacity != BUILTIN_DEFAULTS["fill_opacity"]:
        opts.append(f"fill opacity={ctx.style_num(style.fill_opacity)}")
    if style.rounded_corners != BUILTIN_DEFAULTS["rounded_corners"]:
        opts.append(f"rounded corners={ctx.style_num(style.rounded_corners)}pt")
    return opts


def _path_statement(path: ProjectedPath, style: ResolvedStyle, ctx: RenderContext) -> str:
    stroke = style.color is not None and style.line_width > 0.0
    fill = style.fill is not None
    shaded = style.shading != "none"

    opts: list[str] = []
    if stroke:
        opts.append(f"draw={tikz_color(style.color)}")  # type: ignore[arg-type]
    if shaded:
        opts.append(f"shading={style.shading}")
        if fill:
            opts.append(f"{_SHADING_COLOR_KEYS[style.shading]}={tikz_color(style.fill)}")  # type: ignore[arg-type]
    elif fill:
        opts.append(f"fill={tikz_color(style.fill)}")  # type: ignore[arg-type]
    opts.append(f"line width={ctx.style_num(style.line_width)}pt")
    opts.extend(_common_options(style, ctx))

    if shaded:
        command = "\\shadedraw" if stroke else "\\shade"
    elif stroke and fill:
        command = "\\filldraw"
    elif fill:
        command = "\\fill"
    elif stroke:
        command = "\\draw"
    else:
        command = "\\path"
    return f"{command}[{', '.join(opts)}] {_path_body(path, ctx.fmt)};\n"


def _point_statement(point: ProjectedPoint, style: ResolvedStyle, ctx: RenderContext) -> str | None:
    color = style.fill if style.fill is not None else style.color
    if color is None:
        return None
    opts = [f"fill={tikz_color(color)}"]
    if style.opacity != BUILTIN_DEFAULTS["opacity"]:
        opts.append(f"opacity={ctx.style_num(style.opacity)}")
    radius = ctx.style_num(style.marker_size)
    return f"\\fill[{', '.join(opts)}] {_coord(ctx.fmt, point.xy)} circle[radius={radius}pt];\n"


def _label_statement(item: RenderItem, ctx: RenderContext) -> str:
    style = item.style
    opts = [f"anchor={_ANCHORS[style.label_anchor]}"]
    if style.color is not None and style.color != BUILTIN_DEFAULTS["color"]:
        opts.append(f"text={tikz_color(style.color)}")
    if style.font_size != BUILTIN_DEFAULTS["font_size"]:
        size = ctx.style_num(style.font_size)
        skip = ctx.style_num(style.font_size * 1.2)
        opts.append(f"font=\\fontsize{{{size}pt}}{{{skip}pt}}\\selectfont")
    at = label_position(item.shape, style.label_anchor)
    return f"\\node[{', '.join(opts)}] at {_coord(ctx.fmt, at)} {{{escape_latex(style.label)}}};\n"


@codec("tikz")
class TikzCodec:
    """TikZ 方言のコーデック。"""

    dialect = "tikz"

    def begin(self, ctx: RenderContext) -> list[str]:
        out = ["\\begin{tikzpicture}\n"]
        if ctx.clip:
            x0, y0, x1, y1 = ctx.clip_box
            out.append("\\begin{scope}\n")
            out.append(f"\\clip {_coord(ctx.fmt, (x0, y0))} rectangle {_coord(ctx.fmt, (x1, y1))};\n")
        return out

    def emit_object(self, item: RenderItem, ctx: RenderContext) -> list[str]:
        out: list[str] = []
        for leaf in iter_leaves(item.shape):
            if isinstance(leaf, ProjectedPath):
                out.append(_path_statement(leaf, item.style, ctx))
            elif isinstance(leaf, ProjectedPoint):
                stmt = _point_statement(leaf, item.style, ctx)
                if stmt is not None:
                    out.append(stmt)
        if item.style.label:
            out.append(_label_statement(item, ctx))
        return out

    def end(self, ctx: RenderContext) -> list[str]:
        out: list[str] = []
        if ctx.clip:
            out.append("\\end{scope}\n")
        out.append("\\end{tikzpicture}\n")
        return out


__all__ = ["TikzCodec", "escape_latex", "tikz_color"]
