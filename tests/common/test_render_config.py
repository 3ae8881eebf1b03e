from pathlib import Path

import pytest

from vecfig.common import settings
from vecfig.common.config import RenderConfig, load_render_config

# What this tests
# - RenderConfig の既定値と検証（ValueError）。
# - from_settings が環境変数由来の既定値を使い、上書きを適用すること。
# - load_render_config: configs/default.yaml → 指定 YAML → キーワード上書きの順で合成。


def test_defaults_match_documented_surface():
    cfg = RenderConfig()
    assert cfg.scale_mode == "uniform"
    assert cfg.decimal_precision == 4
    assert cfg.clip_out_of_bounds is False
    assert cfg.z_order_mode == "insertion"
    assert cfg.lenient is False
    assert cfg.canvas_size == (1.0, 1.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"scale_mode": "fit"},
        {"z_order_mode": "random"},
        {"decimal_precision": -1},
        {"decimal_precision": 2.5},
        {"decimal_precision": True},
        {"canvas_size": (0.0, 1.0)},
        {"canvas_size": (1.0,)},
        {"bounds_tolerance": -1.0},
    ],
)
def test_invalid_values_raise_value_error(kwargs):
    with pytest.raises(ValueError):
        RenderConfig(**kwargs)


def test_from_settings_uses_env_and_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("VECFIG_DECIMAL_PRECISION", "6")
    settings.reload_from_env()
    assert RenderConfig.from_settings().decimal_precision == 6
    assert RenderConfig.from_settings(decimal_precision=1).decimal_precision == 1


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ValueError):
        RenderConfig.from_mapping({"precision": 3})


def test_replace_returns_new_validated_copy():
    cfg = RenderConfig()
    other = cfg.replace(clip_out_of_bounds=True, canvas_size=[4, 3])
    assert other.clip_out_of_bounds is True
    assert other.canvas_size == (4.0, 3.0)
    assert cfg.clip_out_of_bounds is False
    with pytest.raises(ValueError):
        cfg.replace(scale_mode="nope")


def test_load_render_config_merges_yaml(tmp_path: Path):
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "decimal_precision: 3\nclip_out_of_bounds: true\n", encoding="utf-8"
    )
    override = tmp_path / "override.yaml"
    override.write_text("decimal_precision: 1\ncanvas_size: [2, 1]\n", encoding="utf-8")

    base = load_render_config(root=tmp_path)
    assert base.decimal_precision == 3
    assert base.clip_out_of_bounds is True

    cfg = load_render_config(override, root=tmp_path, z_order_mode="explicit")
    assert cfg.decimal_precision == 1
    assert cfg.canvas_size == (2.0, 1.0)
    assert cfg.clip_out_of_bounds is True
    assert cfg.z_order_mode == "explicit"


def test_load_render_config_errors(tmp_path: Path):
    (tmp_path / "configs").mkdir()
    with pytest.raises(FileNotFoundError):
        load_render_config(tmp_path / "missing.yaml", root=tmp_path)

    bad = tmp_path / "bad.yaml"
    bad.write_text("glow: 1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_render_config(bad, root=tmp_path)

    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_render_config(not_mapping, root=tmp_path)


def test_repository_default_yaml_loads():
    cfg = load_render_config()
    assert cfg == RenderConfig()
