"""
どこで: `vecfig.api.render`。
何を: 利用者向けの描画入口 `emit` / `render_text` / `list_dialects`。
なぜ: 設定の既定値（環境変数）とキーワード上書きをまとめ、engine 層の描画パスへ委譲するため。
"""

from __future__ import annotations

from typing import Any, Iterator

from vecfig.common.config import RenderConfig
from vecfig.engine.export import emit as _emit
from vecfig.engine.export import list_codecs
from vecfig.engine.model.figure import Figure
from vecfig.engine.style.resolver import StyleResolver


def _config(config: RenderConfig | None, overrides: dict[str, Any]) -> RenderConfig:
    if config is None:
        return RenderConfig.from_settings(**overrides)
    return config.replace(**overrides) if overrides else config


def emit(
    figure: Figure,
    dialect: str = "tikz",
    config: RenderConfig | None = None,
    *,
    resolver: StyleResolver | None = None,
    **overrides: Any,
) -> Iterator[str]:
    """図をテキスト断片の遅延列へ変換する。

    使用例:
        for frag in vecfig.emit(fig, "svg", decimal_precision=2):
            out.write(frag)
    """
    return _emit(figure, dialect, _config(config, overrides), resolver=resolver)


def render_text(
    figure: Figure,
    dialect: str = "tikz",
    config: RenderConfig | None = None,
    *,
    resolver: StyleResolver | None = None,
    **overrides: Any,
) -> str:
    """`emit` の断片を連結した文字列を返す。"""
    return "".join(emit(figure, dialect, config, resolver=resolver, **overrides))


def list_dialects() -> list[str]:
    """利用可能な出力方言名（ソート済み）。"""
    return list_codecs()


__all__ = ["emit", "render_text", "list_dialects"]
