"""
Tests for cdmark/config.py configuration management.

Tests the hierarchical configuration system with sensible defaults,
including file loading, environment variables, and path expansion.
"""
from pathlib import Path

import pytest
import tomli

import cdmark.config
from cdmark.config import CdmarkConfig, get_config, init_config, user_config_path


class TestCdmarkConfigDefaults:
    """Test default configuration values."""

    def test_default_bookmark_file(self):
        """Default bookmark file should be the one the shell version used."""
        config = CdmarkConfig()
        assert config.bookmark_file == "~/.dir_bookmarks"

    def test_default_path_format_is_absolute(self):
        config = CdmarkConfig()
        assert config.path_format == "absolute"
        assert config.relative_paths is False

    def test_default_color_output_is_true(self):
        assert CdmarkConfig().color_output is True

    def test_default_strict_load_is_false(self):
        assert CdmarkConfig().strict_load is False

    def test_default_log_level(self):
        assert CdmarkConfig().log_level == "WARNING"


class TestConfigLoading:
    """Test configuration loading from files."""

    @pytest.fixture
    def project_dir(self, tmp_path, monkeypatch):
        project = tmp_path / "project"
        project.mkdir()
        monkeypatch.chdir(project)
        return project

    def test_load_without_files_uses_defaults(self, tmp_path, project_dir):
        config = CdmarkConfig.load()
        assert config.bookmark_file == str(tmp_path / "home" / ".dir_bookmarks")
        assert config.path_format == "absolute"

    def test_load_from_user_config(self, project_dir):
        path = user_config_path()
        path.parent.mkdir(parents=True)
        path.write_text('path_format = "relative"\ncolor_output = false\n')

        config = CdmarkConfig.load()
        assert config.relative_paths is True
        assert config.color_output is False

    def test_local_config_overrides_user_config(self, project_dir):
        user = user_config_path()
        user.parent.mkdir(parents=True)
        user.write_text('path_format = "relative"\n')
        (project_dir / "cdmark.toml").write_text('path_format = "absolute"\n')

        assert CdmarkConfig.load().path_format == "absolute"

    def test_load_from_cdmarkrc(self, project_dir):
        (project_dir / ".cdmarkrc").write_text('bookmark_file = "marks.txt"\n')
        config = CdmarkConfig.load()
        assert config.bookmark_file == "marks.txt"
        assert config.get_bookmark_path() == project_dir / "marks.txt"

    def test_explicit_config_file_wins_over_local(self, project_dir, tmp_path):
        (project_dir / "cdmark.toml").write_text('log_level = "INFO"\n')
        explicit = tmp_path / "explicit.toml"
        explicit.write_text('log_level = "ERROR"\n')

        assert CdmarkConfig.load(explicit).log_level == "ERROR"

    def test_unknown_keys_ignored(self, project_dir):
        (project_dir / "cdmark.toml").write_text('not_a_setting = 1\n')
        config = CdmarkConfig.load()
        assert not hasattr(config, "not_a_setting")

    def test_method_names_are_not_settings(self, project_dir):
        (project_dir / "cdmark.toml").write_text('save = 1\nrelative_paths = true\n')
        config = CdmarkConfig.load()
        assert callable(config.save)
        assert config.relative_paths is False

    def test_invalid_path_format_rejected(self, project_dir):
        (project_dir / "cdmark.toml").write_text('path_format = "sideways"\n')
        with pytest.raises(ValueError, match="path_format"):
            CdmarkConfig.load()


class TestEnvironmentVariables:
    """Test CDMARK_* environment overrides."""

    def test_string_value(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CDMARK_BOOKMARK_FILE", str(tmp_path / "env_marks"))
        assert CdmarkConfig.load().bookmark_file == str(tmp_path / "env_marks")

    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("1", True), ("yes", True), ("false", False), ("0", False),
    ])
    def test_bool_value(self, monkeypatch, value, expected):
        monkeypatch.setenv("CDMARK_STRICT_LOAD", value)
        assert CdmarkConfig.load().strict_load is expected

    def test_env_expands_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MARKS_DIR", str(tmp_path))
        monkeypatch.setenv("CDMARK_BOOKMARK_FILE", "$MARKS_DIR/marks")
        assert CdmarkConfig.load().bookmark_file == f"{tmp_path}/marks"

    def test_unrelated_env_ignored(self, monkeypatch):
        monkeypatch.setenv("CDMARK_NOTHING", "x")
        assert not hasattr(CdmarkConfig.load(), "nothing")


class TestSave:
    """Test writing configuration."""

    def test_save_default_location(self):
        config = CdmarkConfig(path_format="relative")
        path = config.save()
        assert path == user_config_path()
        with open(path, "rb") as f:
            data = tomli.load(f)
        assert data["path_format"] == "relative"

    def test_save_explicit_path_creates_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "config.toml"
        CdmarkConfig().save(target)
        assert target.exists()


class TestGlobalConfig:
    """Test get_config() caching and init_config() overrides."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_creates_new_instance(self):
        first = get_config()
        assert get_config(reload=True) is not first

    def test_init_config_overrides(self, tmp_path):
        config = init_config(bookmark_file=str(tmp_path / "marks"), color_output=False)
        assert config.bookmark_file == str(tmp_path / "marks")
        assert config.color_output is False
        assert cdmark.config._config is config

    def test_init_config_ignores_none(self):
        config = init_config(path_format=None)
        assert config.path_format == "absolute"

    def test_init_config_with_config_file(self, tmp_path):
        explicit = tmp_path / "explicit.toml"
        explicit.write_text('path_format = "relative"\n')
        assert init_config(config_file=Path(explicit)).relative_paths is True
