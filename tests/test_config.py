"""Tests for TOML configuration loading."""

import pytest

from shared.config import ForgeConfig, GlobalConfig, KeyForgeConfig


def test_defaults():
    config = KeyForgeConfig()
    assert config.forge.max_attempts == 100
    assert config.forge.guesses_per_second == 1_000_000_000
    assert config.forge.default_length == 16
    assert config.global_settings.log_level == "WARNING"


def test_load_toml_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        "[global]\n"
        'log_level = "DEBUG"\n'
        "\n"
        "[forge]\n"
        "max_attempts = 7\n"
        'passphrase_separator = "_"\n'
        "future_option = true\n",
        encoding="utf-8",
    )
    config = KeyForgeConfig.load(path)
    assert config.global_settings.log_level == "DEBUG"
    assert config.forge.max_attempts == 7
    assert config.forge.passphrase_separator == "_"
    assert config.forge.default_length == ForgeConfig().default_length


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        KeyForgeConfig.load(tmp_path / "missing.toml")


def test_to_dict():
    data = KeyForgeConfig(global_settings=GlobalConfig(debug=True)).to_dict()
    assert data["global_settings"]["debug"] is True
    assert data["forge"]["entropy_convention"] == "nominal"
