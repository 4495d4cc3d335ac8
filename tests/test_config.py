import pytest

from fieldmemo.config_manager import SystemConfig, get_config
from fieldmemo.exceptions import ConfigError
from fieldmemo.paths import PROJECT_ROOT, dir_from_env


def test_defaults_without_runtime_file(tmp_path):
    cfg = get_config(tmp_path / "runtime.yaml")
    assert cfg.HISTORY_LIMIT == 50
    assert cfg.STORAGE_KEY == "field-memo-data"
    assert cfg.DURATION_PRESETS == [15, 30, 45, 60, 90, 120]


def test_runtime_yaml_overrides_known_keys(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text("HISTORY_LIMIT: 10\nDEFAULT_START_TIME: '08:00'\nNOT_A_SETTING: 1\n", encoding="utf-8")

    cfg = get_config(path)
    assert cfg.HISTORY_LIMIT == 10
    assert cfg.DEFAULT_START_TIME == "08:00"
    assert not hasattr(cfg, "NOT_A_SETTING")


def test_malformed_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text("HISTORY_LIMIT: [unclosed\n", encoding="utf-8")
    assert get_config(path) == SystemConfig()


def test_invalid_history_limit_is_a_config_error(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text("HISTORY_LIMIT: 0\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        get_config(path)
    assert str(path) in excinfo.value.get_user_message()


def test_dir_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("FIELD_MEMO_SOMEWHERE", f"  {tmp_path}  ")
    assert dir_from_env("FIELD_MEMO_SOMEWHERE", PROJECT_ROOT / "data") == tmp_path

    monkeypatch.setenv("FIELD_MEMO_SOMEWHERE", " ")
    assert dir_from_env("FIELD_MEMO_SOMEWHERE", PROJECT_ROOT / "data") == PROJECT_ROOT / "data"
