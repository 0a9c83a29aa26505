"""Tests for config resolution."""

import json
import stat

from igq.api.client import DEFAULT_BASE_URL
from igq.config import get_config_dir, load_config, save_config


def test_config_dir_precedence(tmp_path, monkeypatch):
    monkeypatch.setenv("IGQ_CONFIG_DIR", str(tmp_path / "env"))
    assert get_config_dir(tmp_path / "flag") == tmp_path / "flag"
    assert get_config_dir() == tmp_path / "env"


def test_defaults_without_file(tmp_path):
    assert load_config(tmp_path) == {"api_key": "", "base_url": DEFAULT_BASE_URL}


def test_save_then_load(tmp_path):
    path = save_config({"api_key": "abc", "base_url": "https://example.com"}, tmp_path / "cfg")

    assert json.loads(path.read_text())["api_key"] == "abc"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert load_config(tmp_path / "cfg") == {
        "api_key": "abc",
        "base_url": "https://example.com",
    }


def test_env_overrides_file(tmp_path, monkeypatch):
    save_config({"api_key": "from-file"}, tmp_path)
    monkeypatch.setenv("IGQ_API_KEY", "from-env")

    config = load_config(tmp_path)
    assert config["api_key"] == "from-env"
    assert config["base_url"] == DEFAULT_BASE_URL
