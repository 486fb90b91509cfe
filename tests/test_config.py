"""
Tests for configuration loading.
"""

import config


def test_load_jsonc(tmp_path):
    path = tmp_path / "config.jsonc"
    path.write_text(
        """
        {
          // comments are allowed
          "RCON_HOST": "10.0.0.5",
          "RCON_PORT": 7779,
        }
        """,
        encoding="utf-8",
    )
    assert config._load_config(path) == {"RCON_HOST": "10.0.0.5", "RCON_PORT": 7779}


def test_missing_file(tmp_path):
    assert config._load_config(tmp_path / "absent.jsonc") == {}


def test_invalid_file(tmp_path):
    path = tmp_path / "config.jsonc"
    path.write_text("{not json", encoding="utf-8")
    assert config._load_config(path) == {}


def test_non_object_ignored(tmp_path):
    path = tmp_path / "config.jsonc"
    path.write_text("[1, 2]", encoding="utf-8")
    assert config._load_config(path) == {}


def test_env_overrides_file(monkeypatch):
    monkeypatch.setattr(config, "CONFIG", {"RCON_HOST": "from-file"})
    monkeypatch.delenv("RCON_HOST", raising=False)
    assert config.get_setting("RCON_HOST", "RCON_HOST") == "from-file"
    monkeypatch.setenv("RCON_HOST", "from-env")
    assert config.get_setting("RCON_HOST", "RCON_HOST") == "from-env"


def test_int_setting(monkeypatch):
    monkeypatch.setattr(config, "CONFIG", {})
    monkeypatch.setenv("RCON_POOL_SIZE", "3")
    assert config.get_int_setting("RCON_POOL_SIZE", "RCON_POOL_SIZE", 0) == 3
    monkeypatch.setenv("RCON_POOL_SIZE", "lots")
    assert config.get_int_setting("RCON_POOL_SIZE", "RCON_POOL_SIZE", 0) == 0


def test_float_setting_blank(monkeypatch):
    monkeypatch.setattr(config, "CONFIG", {})
    monkeypatch.delenv("RCON_TIMEOUT", raising=False)
    assert config.get_float_setting("RCON_TIMEOUT", "RCON_TIMEOUT") is None
    monkeypatch.setenv("RCON_TIMEOUT", "2.5")
    assert config.get_float_setting("RCON_TIMEOUT", "RCON_TIMEOUT") == 2.5
