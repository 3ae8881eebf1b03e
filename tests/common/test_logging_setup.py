import io
import logging

import pytest

import vecfig
from vecfig.common import settings
from vecfig.common.logging import PACKAGE_LOGGER, setup_default_logging

# What this tests
# - 出力先は `vecfig` ロガーにだけ付き、ルートロガーは変更しない。
# - 繰り返し呼んでもハンドラは 1 つ、レベルは更新される。
# - 既定レベルは VECFIG_LOG_LEVEL、未知のレベル名は ValueError。
# - 描画パスの DEBUG ログが設定したストリームへ出る。


@pytest.fixture()
def pkg_logger():
    pkg = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(pkg.handlers), pkg.level)
    yield pkg
    pkg.handlers[:] = saved[0]
    pkg.setLevel(saved[1])


def _own_handlers(pkg: logging.Logger) -> list[logging.Handler]:
    return [h for h in pkg.handlers if not isinstance(h, logging.NullHandler)]


def test_setup_touches_package_logger_only(pkg_logger):
    root_handlers = list(logging.getLogger().handlers)
    out = setup_default_logging("debug", stream=io.StringIO())
    assert out is pkg_logger
    assert pkg_logger.level == logging.DEBUG
    assert len(_own_handlers(pkg_logger)) == 1
    assert logging.getLogger().handlers == root_handlers


def test_repeated_setup_updates_level_without_new_handler(pkg_logger):
    setup_default_logging("info", stream=io.StringIO())
    setup_default_logging(logging.ERROR)
    assert pkg_logger.level == logging.ERROR
    assert len(_own_handlers(pkg_logger)) == 1


def test_default_level_from_environment(monkeypatch, pkg_logger):
    monkeypatch.setenv("VECFIG_LOG_LEVEL", "Error")
    settings.reload_from_env()
    setup_default_logging(stream=io.StringIO())
    assert pkg_logger.level == logging.ERROR


def test_unknown_level_is_rejected(pkg_logger):
    with pytest.raises(ValueError):
        setup_default_logging("loud")


def test_render_pass_debug_reaches_stream(pkg_logger, fig10, diagonal):
    buf = io.StringIO()
    vecfig.setup_default_logging("debug", stream=buf)
    fig10.add_object(diagonal)
    vecfig.render_text(fig10, "tikz")
    assert "[DEBUG] vecfig.engine.export.service: render pass" in buf.getvalue()
