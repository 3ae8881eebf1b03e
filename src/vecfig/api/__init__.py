"""
どこで: `vecfig.api` 入口（高レベル公開 API）。
何を: 図の構築に必要な型と描画入口を再輸出する。
なぜ: 利用者（Drawable 層を含む）が単一名前空間から構築 → 出力まで完結できるようにするため。

Usage:
    from vecfig.api import Figure, Path, render_text

    fig = Figure()
    fig.set_axis_range("x", 0, 10)
    fig.set_axis_range("y", 0, 10)
    fig.add_object(Path.line((0, 0), (10, 10)), {"line_width": 1})
    print(render_text(fig, "tikz", decimal_precision=2))
"""

from vecfig.common.config import RenderConfig, load_render_config
from vecfig.common.logging import setup_default_logging
from vecfig.engine.core import (
    BoundingBox,
    Group,
    Path,
    PathBuilder,
    Point,
    align_to,
    arc,
    circle,
    ellipse,
    fit_into,
    rectangle,
    regular_polygon,
)
from vecfig.engine.export import codec
from vecfig.engine.model import Figure, FigureObject
from vecfig.engine.projection import ViewProjection
from vecfig.engine.style import StyleResolver

from .render import emit, list_dialects, render_text

__all__ = [
    "Figure",
    "FigureObject",
    "Point",
    "Path",
    "Group",
    "PathBuilder",
    "BoundingBox",
    "rectangle",
    "circle",
    "ellipse",
    "arc",
    "regular_polygon",
    "fit_into",
    "align_to",
    "ViewProjection",
    "StyleResolver",
    "RenderConfig",
    "load_render_config",
    "codec",
    "emit",
    "render_text",
    "list_dialects",
    "setup_default_logging",
]
