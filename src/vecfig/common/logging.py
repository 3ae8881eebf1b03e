"""
どこで: `vecfig.common.logging`。
何を: パッケージロガー `vecfig` への出力設定 `setup_default_logging()`。
なぜ: ライブラリは import 時に出力先を決めず（NullHandler のみ）、描画パスの DEBUG ログ
      （非対応オプションの除去、範囲外の点数、キャッシュ命中数）を見たい利用者が
      1 行で有効にできるようにするため。

要点:
- 各モジュールは `logging.getLogger(__name__)` で `vecfig.*` の子ロガーを使う。
- ルートロガーには触れない。アプリ側のロギング設定と共存する。
- 既定のレベルは `VECFIG_LOG_LEVEL`（`settings.LOG_LEVEL`）。
"""

from __future__ import annotations

import logging
from typing import IO

from . import settings as _settings

PACKAGE_LOGGER = "vecfig"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_HANDLER_NAME = "vecfig-default"


def _to_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"未知のログレベル: {level!r}")
    return resolved


def setup_default_logging(level: int | str | None = None, *, stream: IO[str] | None = None) -> logging.Logger:
    """`vecfig` ロガーにストリーム出力を 1 つだけ付け、レベルを設定して返す。

    2 回目以降の呼び出しはレベルだけを更新する（ハンドラは増やさない）。
    `level` が None なら `settings.LOG_LEVEL`。未知のレベル名は `ValueError`。
    """
    lvl = _to_level(_settings.get().LOG_LEVEL if level is None else level)
    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.setLevel(lvl)
    if not any(h.get_name() == _HANDLER_NAME for h in pkg.handlers):
        handler = logging.StreamHandler(stream)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        pkg.addHandler(handler)
    return pkg


# import 時は NullHandler のみ（lastResort への出力を避ける）
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


__all__ = ["setup_default_logging", "PACKAGE_LOGGER", "LOG_FORMAT"]
