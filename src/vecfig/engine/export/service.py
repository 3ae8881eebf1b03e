"""
どこで: `vecfig.engine.export.service`。
何を: 図 1 枚を指定方言のテキスト断片列へ変換する描画パス `emit()`。
なぜ: 検証（設定・方言・軸範囲・全スタイル）を先に済ませて失敗を断片生成前に返し、
      射影と整形は遅延で 1 オブジェクトずつ進めるため。

描画パスの流れ:
1) 図のスナップショットを取り、以後は図の変更を観測しない。
2) 全オブジェクトのスタイルを解決し、方言で表現できないオプションを検査する
   （dialect-optional は落とし、それ以外は `CodecError`。lenient なら落として DEBUG ログ）。
   z 順は、どこかで `z_order` が明示されていれば insertion 設定でも昇順ソートになる。
3) 軸範囲（未設定なら幾何から）を確定し、パス専用の `Projector` を作る。
4) 返した生成器が z 順に 1 オブジェクトずつ射影 → 整形し、完成した断片だけを渡す。

生成器を途中で破棄しても、大域状態は残らない（キャッシュはこのパス専用）。
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterator, Sequence

from vecfig.common.config import RenderConfig
from vecfig.common.errors import CodecError, ErrorKind, VecfigError
from vecfig.engine.model.figure import Figure, FigureObject
from vecfig.engine.projection.projector import Projector
from vecfig.engine.style.options import StyleIntent
from vecfig.engine.style.resolver import (
    ResolvedStyle,
    StyleResolver,
    effective_z_order_mode,
    order_objects,
    unsupported_options,
)

from .base import Codec, RenderContext, RenderItem
from .registry import get_codec

logger = logging.getLogger(__name__)


def _check_dialect(
    objects: Sequence[FigureObject],
    styles: Sequence[ResolvedStyle],
    dialect: str,
    resolver: StyleResolver,
    lenient: bool,
) -> list[ResolvedStyle]:
    """方言非対応オプションを検査し、落とせるものを既定値へ戻したスタイル列を返す。"""
    out: list[ResolvedStyle] = []
    for obj, style in zip(objects, styles):
        droppable, fatal = unsupported_options(style, dialect, resolver.builtin)
        if fatal and not lenient:
            raise CodecError(
                ErrorKind.UNSUPPORTED_STYLE_FOR_DIALECT,
                f"{dialect} では表現できないスタイルです: {', '.join(fatal)}",
                object_id=obj.id,
            )
        dropped = droppable + fatal
        if dropped:
            logger.debug("object %d: dropping %s for dialect %s", obj.id, dropped, dialect)
            style = replace(style, **{name: resolver.builtin[name] for name in dropped})
        out.append(style)
    return out


def _generate(
    codec: Codec,
    ordered: list[tuple[FigureObject, ResolvedStyle]],
    projector: Projector,
    ctx: RenderContext,
) -> Iterator[str]:
    yield from codec.begin(ctx)
    for obj, style in ordered:
        try:
            shape = projector.project(obj)
            fragments = codec.emit_object(RenderItem(obj.id, obj.index, shape, style), ctx)
        except VecfigError as e:
            if e.object_id is not None:
                raise
            raise e.with_object(obj.id) from e
        yield from fragments
    yield from codec.end(ctx)
    logger.debug(
        "render pass done: dialect=%s objects=%d cache_hits=%d",
        ctx.dialect,
        len(ordered),
        projector.cache_hits,
    )


def emit(
    figure: Figure,
    dialect: str = "tikz",
    config: RenderConfig | None = None,
    *,
    resolver: StyleResolver | None = None,
) -> Iterator[str]:
    """図を指定方言のテキスト断片列に変換する。

    Parameters
    ----------
    figure : Figure
        対象の図。呼び出し時点の状態を描画する。
    dialect : str
        出力方言（`list_codecs()` のいずれか）。
    config : RenderConfig | None
        描画設定。None なら `RenderConfig.from_settings()`。
    resolver : StyleResolver | None
        スタイル解決器。None なら組込み既定値のもの。

    Returns
    -------
    Iterator[str]
        遅延生成される断片列。連結すると方言として完結した本文になる。

    Raises
    ------
    CodecError
        未登録の方言（UnknownDialect）、非対応スタイル（UnsupportedStyleForDialect）。
    ProjectionError
        軸範囲が退化している（DegenerateAxis）。
    """
    cfg = config if config is not None else RenderConfig.from_settings()
    codec = get_codec(dialect)
    res = resolver if resolver is not None else StyleResolver()
    snap = figure.snapshot()

    objects = list(snap.objects)
    styles = [
        res.resolve(o.style, group=snap.group_style(o.group), figure_default=snap.default_style)
        for o in objects
    ]
    styles = _check_dialect(objects, styles, codec.dialect, res, cfg.lenient)
    intents: list[StyleIntent | None] = [snap.default_style]
    for o in objects:
        intents += [snap.group_style(o.group), o.style]
    ordered = order_objects(objects, styles, effective_z_order_mode(cfg.z_order_mode, intents))

    projector = Projector.for_scene(
        snap.axis_ranges,
        (o.geometry for o in objects),
        snap.dims,
        snap.projection,
        cfg,
    )
    ctx = RenderContext.create(codec.dialect, cfg, projector.canvas_box)
    logger.debug(
        "render pass: dialect=%s objects=%d revision=%d", codec.dialect, len(objects), snap.revision
    )
    return _generate(codec, ordered, projector, ctx)


__all__ = ["emit"]
