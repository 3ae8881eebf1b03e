"""共通フィクスチャ。

- 乱数シード固定
- 小さな図の試料（2D/3D）
- 環境変数由来の設定の隔離
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from vecfig.common import settings
from vecfig.common.config import RenderConfig
from vecfig.engine.core.geometry import Path, Point
from vecfig.engine.model.figure import Figure


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """VECFIG_* を外した状態で設定を読み直し、テスト後にも読み直す。"""
    for name in (
        "VECFIG_DECIMAL_PRECISION",
        "VECFIG_SCALE_MODE",
        "VECFIG_LENIENT",
        "VECFIG_SIMPLIFY_EPSILON",
        "VECFIG_BOUNDS_TOLERANCE",
        "VECFIG_PROJECTION_CACHE",
        "VECFIG_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    settings.reload_from_env()
    yield
    monkeypatch.undo()
    settings.reload_from_env()


@pytest.fixture()
def config() -> RenderConfig:
    return RenderConfig()


@pytest.fixture()
def fig10() -> Figure:
    """x, y ともに [0, 10] の 2D 図。"""
    fig = Figure()
    fig.set_axis_range("x", 0, 10)
    fig.set_axis_range("y", 0, 10)
    return fig


@pytest.fixture()
def diagonal() -> Path:
    return Path.line((0, 0), (10, 10))


@pytest.fixture()
def fig3d() -> Figure:
    """単位立方体の範囲を持つ 3D 図（既定ビュー）。"""
    fig = Figure(dims=3)
    for axis in ("x", "y", "z"):
        fig.set_axis_range(axis, 0, 1)
    fig.add_object(Point(0.5, 0.5, 0.5))
    return fig
