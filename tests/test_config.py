from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from emote_shuffler.core.config import ConfigManager, ShufflerConfig, read_token


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    manager = ConfigManager(tmp_path / "config.yaml")
    config = manager.get()
    assert config == ShufflerConfig()
    assert not manager.path.exists()


def test_save_and_reload(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.yaml"
    manager = ConfigManager(path)
    manager.save(ShufflerConfig(rate_per_minute=30.0, log_dir=tmp_path / "logs"))
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["rate_per_minute"] == 30.0
    assert data["log_dir"] == str(tmp_path / "logs")
    assert "token" not in data

    reloaded = ConfigManager(path).get()
    assert reloaded.rate_per_minute == 30.0
    assert reloaded.log_dir == tmp_path / "logs"


def test_partial_file_fills_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("temp_name_length: 24\n", encoding="utf-8")
    config = ConfigManager(path).get()
    assert config.temp_name_length == 24
    assert config.rate_per_minute == 100.0


def test_rejects_non_positive_rate(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("rate_per_minute: 0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigManager(path)


def test_read_token(monkeypatch) -> None:
    monkeypatch.setenv("SEVENTV_TOKEN", "  abc  ")
    assert read_token() == "abc"
    monkeypatch.setenv("SEVENTV_TOKEN", "")
    assert read_token() is None
    monkeypatch.delenv("SEVENTV_TOKEN")
    assert read_token() is None


@pytest.mark.parametrize(
    "content",
    [
        "temp_name_length: 0\n",
        "request_timeout: 0\n",
        "log_level: LOUD\n",
        "rate_per_minute: [unclosed\n",
    ],
)
def test_invalid_files_raise_value_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigManager(path)


def test_log_level_is_normalised(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("log_level: warning\n", encoding="utf-8")
    assert ConfigManager(path).get().log_level == "WARNING"
