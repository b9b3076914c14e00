"""Unit tests for TOML configuration loader."""

from pathlib import Path

import pytest

from colloquy.config.loader import (
    config_layers,
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        override = {"a": {"y": 20, "z": 30}}
        assert deep_merge(base, override) == {"a": {"x": 1, "y": 20, "z": 30}, "b": 3}

    def test_override_replaces_non_dict(self) -> None:
        assert deep_merge({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_base_unmodified(self) -> None:
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    """Tests for load_toml function."""

    def test_load_valid_toml(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "test.toml"
        toml_file.write_text('[section]\nkey = "value"\nnumber = 42')

        assert load_toml(toml_file) == {"section": {"key": "value", "number": 42}}

    def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "nonexistent.toml")


class TestEnvironment:
    """Tests for environment and directory resolution."""

    def test_default_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("COLLOQUY_ENV", raising=False)
        assert get_environment() == "development"

    def test_environment_from_env(self, env_override) -> None:
        with env_override({"COLLOQUY_ENV": "production"}):
            assert get_environment() == "production"

    def test_config_dir_override(self, test_config_dir: Path, env_override) -> None:
        with env_override({"COLLOQUY_CONFIG_DIR": str(test_config_dir)}):
            assert get_config_dir() == test_config_dir

    def test_missing_config_dir_override(self, tmp_path: Path, env_override) -> None:
        with env_override({"COLLOQUY_CONFIG_DIR": str(tmp_path / "missing")}):
            with pytest.raises(FileNotFoundError):
                get_config_dir()


class TestLoadConfig:
    """Tests for layered loading."""

    def test_environment_overrides_default(
        self, test_config_dir: Path, mock_toml_files, env_override
    ) -> None:
        mock_toml_files(
            {
                "default.toml": "[agent]\nmax_context_messages = 50\ndefault_tool_timeout = 10.0",
                "staging.toml": "[agent]\ndefault_tool_timeout = 3.0",
            }
        )

        with env_override(
            {"COLLOQUY_CONFIG_DIR": str(test_config_dir), "COLLOQUY_ENV": "staging"}
        ):
            config = load_config()

        assert config == {"agent": {"max_context_messages": 50, "default_tool_timeout": 3.0}}

    def test_no_files_gives_empty_config(self, test_config_dir: Path, env_override) -> None:
        with env_override({"COLLOQUY_CONFIG_DIR": str(test_config_dir)}):
            assert load_config() == {}

    def test_explicit_directory_and_environment(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("COLLOQUY_CONFIG_DIR", raising=False)
        mock_toml_files(
            {
                "default.toml": "debug = false\n[agent]\ntool_max_retries = 1",
                "test.toml": "debug = true",
            }
        )

        config = load_config(test_config_dir, "test")

        assert config == {"debug": True, "agent": {"tool_max_retries": 1}}


class TestConfigLayers:
    """Tests for layer discovery."""

    def test_only_existing_layers_in_order(self, test_config_dir: Path, mock_toml_files) -> None:
        mock_toml_files({"default.toml": "", "production.toml": ""})

        assert config_layers(test_config_dir, "production") == [
            test_config_dir / "default.toml",
            test_config_dir / "production.toml",
        ]
        assert config_layers(test_config_dir, "staging") == [test_config_dir / "default.toml"]

    def test_default_environment_not_read_twice(
        self, test_config_dir: Path, mock_toml_files
    ) -> None:
        mock_toml_files({"default.toml": ""})

        assert config_layers(test_config_dir, "default") == [test_config_dir / "default.toml"]
