"""
どこで: `vecfig.common.settings`
何を: プロジェクトの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。

ここにあるのは「描画設定の既定値の出どころ」だけで、スタイルの既定値は持たない
（スタイル既定値は `engine.style.options.BUILTIN_DEFAULTS` を Resolver に明示的に渡す）。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_int, env_str


@dataclass
class _Settings:
    # 出力
    DECIMAL_PRECISION: int = 4
    SCALE_MODE: str = "uniform"
    LENIENT: bool = False

    # 幾何
    SIMPLIFY_EPSILON: float = 1e-9
    BOUNDS_TOLERANCE: float = 1e-9

    # 描画パス内キャッシュ
    PROJECTION_CACHE_ENABLED: bool = True

    # ロギング（setup_default_logging の既定レベル）
    LOG_LEVEL: str = "warning"


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - bool は `env_bool`、int は `env_int`、float は `env_float` を使用。
    - 一部は下限丸めやフォールバックを適用。
    """
    _settings.DECIMAL_PRECISION = env_int("VECFIG_DECIMAL_PRECISION", 4, min_value=0) or 0
    _settings.SCALE_MODE = env_str(
        "VECFIG_SCALE_MODE", "uniform", choices={"uniform", "stretch"}
    )
    _settings.LENIENT = env_bool("VECFIG_LENIENT", False)

    _settings.SIMPLIFY_EPSILON = env_float("VECFIG_SIMPLIFY_EPSILON", 1e-9, min_value=0.0)
    _settings.BOUNDS_TOLERANCE = env_float("VECFIG_BOUNDS_TOLERANCE", 1e-9, min_value=0.0)

    _settings.PROJECTION_CACHE_ENABLED = env_bool("VECFIG_PROJECTION_CACHE", True)
    _settings.LOG_LEVEL = env_str(
        "VECFIG_LOG_LEVEL", "warning", choices={"debug", "info", "warning", "error", "critical"}
    )


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
