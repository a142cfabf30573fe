from __future__ import annotations

from pathlib import Path

import pytest

from xlsxrows.config.loader import ConfigError, ParserConfig, apply_env_overrides, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.sheet == 1
    assert cfg.has_header_row is True
    assert cfg.row_numbers is False
    assert cfg.tmp_dir == "./tmp"
    # YAML int keys are normalized to strings before validation
    assert cfg.header_overrides == {"0": "identifier", "e": "done"}


def test_load_config_defaults(temp_workdir: Path):
    path = temp_workdir / "config" / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ParserConfig()


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(missing)


def test_load_config_invalid_yaml(temp_workdir: Path):
    path = temp_workdir / "config" / "broken.yml"
    path.write_text("sheet: [1, 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(path)


def test_load_config_root_not_mapping(temp_workdir: Path):
    path = temp_workdir / "config" / "list.yml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(path)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


@pytest.mark.parametrize(
    "line",
    [
        "sheet: 0",
        "sheet: first",
        "has_header_row: maybe",
        "row_numbers: 1",
    ],
)
def test_load_config_wrong_types(temp_workdir: Path, line: str):
    path = temp_workdir / "config" / "bad.yml"
    path.write_text(line + "\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(path)


def test_load_config_invalid_override_column(temp_workdir: Path):
    path = temp_workdir / "config" / "bad.yml"
    path.write_text("header_overrides:\n  a1: nope\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(path)


def test_apply_env_overrides(monkeypatch):
    monkeypatch.setenv("XLSXROWS_TMP_DIR", "/var/tmp/xlsx")
    cfg = apply_env_overrides(ParserConfig(tmp_dir="./tmp"))
    assert cfg.tmp_dir == "/var/tmp/xlsx"


def test_apply_env_overrides_unset(monkeypatch):
    monkeypatch.delenv("XLSXROWS_TMP_DIR", raising=False)
    cfg = ParserConfig(tmp_dir="./tmp")
    assert apply_env_overrides(cfg) is cfg
