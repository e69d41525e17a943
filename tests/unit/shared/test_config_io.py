"""Tests for config file reading and writing."""

import tomllib
from pathlib import Path

import pytest

from typedgit.domain.config import GitConfig, TypedGitConfig
from typedgit.shared.config_io import (
    config_data_to_config,
    config_to_data,
    create_default_config_file,
    get_global_config_path,
    get_local_config_path,
    load_config,
    load_config_data,
    merge_config_data,
    save_config,
)


class TestConfigPaths:
    """Tests for config file locations."""

    def test_global_path_uses_xdg_config_home(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setattr("platform.system", lambda: "Linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_global_config_path() == tmp_path / "typedgit" / "config.toml"

    def test_global_path_falls_back_to_home(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setattr("platform.system", lambda: "Linux")
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_global_config_path() == tmp_path / ".config" / "typedgit" / "config.toml"

    def test_global_path_on_windows(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setattr("platform.system", lambda: "Windows")
        monkeypatch.setenv("APPDATA", str(tmp_path))
        assert get_global_config_path() == tmp_path / "typedgit" / "config.toml"

    def test_local_path(self, tmp_path: Path) -> None:
        assert get_local_config_path(tmp_path) == tmp_path / ".typedgit" / "config.toml"


class TestLoadConfig:
    """Tests for loading config files."""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config_data(tmp_path / "missing.toml")

    def test_invalid_toml_raises_value_error(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[git\nprogram = ")
        with pytest.raises(ValueError, match="Invalid TOML"):
            load_config_data(path)

    def test_partial_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[git]\ndefault_remote = "upstream"\n')

        config = load_config(path)

        assert config.git.default_remote == "upstream"
        assert config.git.program == "git"
        assert config.log.max_count == -1

    def test_data_to_config(self) -> None:
        config = config_data_to_config({"log": {"max_count": 5}})
        assert config.log.max_count == 5


class TestMergeConfigData:
    """Tests for key-level config merging."""

    def test_override_wins_per_key(self) -> None:
        base = {"git": {"program": "git", "default_remote": "origin"}}
        override = {"git": {"default_remote": "upstream"}}
        assert merge_config_data(base, override) == {
            "git": {"program": "git", "default_remote": "upstream"}
        }

    def test_sections_from_both_kept(self) -> None:
        merged = merge_config_data({"git": {"program": "g"}}, {"log": {"max_count": 1}})
        assert merged == {"git": {"program": "g"}, "log": {"max_count": 1}}


class TestSaveConfig:
    """Tests for writing config files."""

    def test_save_then_load(self, tmp_path: Path) -> None:
        config = TypedGitConfig(git=GitConfig(program="/usr/bin/git", timeout=30.0))
        path = tmp_path / "nested" / "config.toml"

        save_config(config, path)

        assert load_config(path) == config

    def test_none_values_omitted(self) -> None:
        """TOML has no null, so unset optional values are left out."""
        data = config_to_data(TypedGitConfig.default())
        assert "timeout" not in data["git"]
        assert data["log"] == {"max_count": -1, "include_parents": True}

    def test_default_template_parses_to_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / ".typedgit" / "config.toml"

        create_default_config_file(path)

        with path.open("rb") as f:
            tomllib.load(f)
        assert load_config(path) == TypedGitConfig.default()
