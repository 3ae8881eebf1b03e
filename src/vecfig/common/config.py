"""
どこで: `vecfig.common.config`
何を: 描画パス 1 回分の設定 `RenderConfig` と、YAML からの読み込み `load_render_config()`。
なぜ: 出力の再現性に効く設定（精度・スケール・クリップ・z 順）を 1 つの不変値にまとめ、
      描画パスへ明示的に渡すため（プロセス全体の可変状態にしない）。

読み込みの優先順:
1) `configs/default.yaml`（ベース）
2) 引数 `path` の YAML（トップレベルのみ上書き）
3) キーワード引数 `overrides`
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from . import settings as _settings
from .types import ScaleMode, ZOrderMode

logger = logging.getLogger(__name__)

_SCALE_MODES = ("uniform", "stretch")
_Z_ORDER_MODES = ("insertion", "explicit")


@dataclass(frozen=True)
class RenderConfig:
    """描画設定（不変）。

    属性:
        scale_mode: "uniform"（縦横比維持）/ "stretch"（各軸を独立にキャンバスへ合わせる）。
        decimal_precision: 座標の小数点以下桁数（0 以上）。線幅などのスタイル値には効かない。
        clip_out_of_bounds: True で軸範囲外をコーデック固有の方法でクリップする。
        z_order_mode: "insertion"（追加順）/ "explicit"（z_order 昇順、同値は追加順）。
        lenient: True で方言非対応のスタイルを失敗ではなく黙って落とす。
        canvas_size: 出力キャンバスの (幅, 高さ)。既定は単位正方形。
        bounds_tolerance: 範囲外判定の許容誤差（シーン座標）。
    """

    scale_mode: ScaleMode = "uniform"
    decimal_precision: int = 4
    clip_out_of_bounds: bool = False
    z_order_mode: ZOrderMode = "insertion"
    lenient: bool = False
    canvas_size: tuple[float, float] = (1.0, 1.0)
    bounds_tolerance: float = 1e-9

    def __post_init__(self) -> None:
        if self.scale_mode not in _SCALE_MODES:
            raise ValueError(f"scale_mode は {_SCALE_MODES} のいずれか: got {self.scale_mode!r}")
        if self.z_order_mode not in _Z_ORDER_MODES:
            raise ValueError(
                f"z_order_mode は {_Z_ORDER_MODES} のいずれか: got {self.z_order_mode!r}"
            )
        if isinstance(self.decimal_precision, bool) or not isinstance(self.decimal_precision, int):
            raise ValueError("decimal_precision は int である必要があります")
        if self.decimal_precision < 0:
            raise ValueError("decimal_precision は 0 以上である必要があります")
        size = tuple(float(v) for v in self.canvas_size)
        if len(size) != 2 or not all(math.isfinite(v) and v > 0.0 for v in size):
            raise ValueError(f"canvas_size は正の (幅, 高さ): got {self.canvas_size!r}")
        # frozen なので object.__setattr__ で正規化値を格納
        object.__setattr__(self, "canvas_size", (size[0], size[1]))
        object.__setattr__(self, "clip_out_of_bounds", bool(self.clip_out_of_bounds))
        object.__setattr__(self, "lenient", bool(self.lenient))
        tol = float(self.bounds_tolerance)
        if not math.isfinite(tol) or tol < 0.0:
            raise ValueError("bounds_tolerance は 0 以上の有限値である必要があります")
        object.__setattr__(self, "bounds_tolerance", tol)

    @classmethod
    def from_settings(cls, **overrides: Any) -> "RenderConfig":
        """`common.settings`（環境変数）を既定値として設定を構築する。"""
        s = _settings.get()
        base: dict[str, Any] = {
            "scale_mode": s.SCALE_MODE,
            "decimal_precision": s.DECIMAL_PRECISION,
            "lenient": s.LENIENT,
            "bounds_tolerance": s.BOUNDS_TOLERANCE,
        }
        base.update(overrides)
        return cls.from_mapping(base)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RenderConfig":
        """辞書から構築する。未知キーは `ValueError`。"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"未知の描画設定キー: {unknown}")
        kwargs = dict(data)
        if "canvas_size" in kwargs and kwargs["canvas_size"] is not None:
            kwargs["canvas_size"] = tuple(kwargs["canvas_size"])
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "RenderConfig":
        """一部を差し替えた新しい設定を返す。未知キーは `ValueError`。"""
        unknown = sorted(set(changes) - {f.name for f in fields(self)})
        if unknown:
            raise ValueError(f"未知の描画設定キー: {unknown}")
        return replace(self, **changes)


def _safe_load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"設定ファイルのトップレベルは mapping である必要があります: {path}")
    return data


def _find_project_root(start: Path) -> Path:
    """プロジェクトルートを推定して返す。

    - 上位に `pyproject.toml` か `configs/` がある最も近いディレクトリを返す。
    - 見つからない場合は `start` を返す。
    """
    cur = start.resolve()
    for parent in [cur] + list(cur.parents):
        if (parent / "pyproject.toml").exists() or (parent / "configs").is_dir():
            return parent
    return cur


def load_render_config(
    path: str | Path | None = None,
    *,
    root: str | Path | None = None,
    **overrides: Any,
) -> RenderConfig:
    """YAML から描画設定を読み込む。

    Parameters
    ----------
    path : str | Path | None
        上書き用 YAML。存在しない場合は `FileNotFoundError`。
    root : str | Path | None
        `configs/default.yaml` を探す起点。省略時はこのモジュールの位置から推定。
    **overrides
        最後に適用する個別上書き。

    Returns
    -------
    RenderConfig
        環境変数由来の既定値 → default.yaml → `path` → `overrides` の順に合成した設定。
    """
    project_root = _find_project_root(Path(root) if root is not None else Path(__file__).parent)
    merged: dict[str, Any] = {}

    default_path = project_root / "configs" / "default.yaml"
    if default_path.exists():
        merged.update(_safe_load_yaml(default_path))
        logger.debug("loaded base render config from %s", default_path)

    if path is not None:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(p)
        merged.update(_safe_load_yaml(p))
        logger.debug("loaded render config override from %s", p)

    merged.update(overrides)
    return RenderConfig.from_settings(**merged)


__all__ = ["RenderConfig", "load_render_config"]
