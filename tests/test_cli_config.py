import json
from pathlib import Path

from classscore.presentation.cli import config


def test_load_config_defaults_when_missing(tmp_path: Path) -> None:
    assert config.load_config(tmp_path / "config.json") == config.default_config()


def test_load_config_defaults_when_malformed(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{broken", encoding="utf-8")

    assert config.load_config(path) == config.default_config()


def test_save_and_load_round_trip_normalizes(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    config.save_config(
        {"filters": {"class": {"Saber": False}}, "update_path": False, "modify_inventory": "sure"},
        path,
    )

    loaded = config.load_config(path)

    assert loaded == {"filters": {"class": {"Saber": False}}, "update_path": False, "modify_inventory": True}
    assert json.loads(path.read_text(encoding="utf-8"))["update_path"] is False


def test_user_data_dir_env_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(config.HOME_ENV_VAR, str(tmp_path))

    assert config.get_default_config_path() == tmp_path / "config.json"
    assert config.get_scores_path() == tmp_path / "scores.json"
