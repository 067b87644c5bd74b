"""Unit tests for the TOML configuration loader."""

from pathlib import Path

import pytest

from huddle.config.loader import deep_merge, get_config_dir, get_environment, load_config, load_toml


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_merge(self) -> None:
        base = {"standup": {"max_exchanges": 3, "min_summary_chars": 40}, "debug": False}
        override = {"standup": {"max_exchanges": 5}, "debug": True}

        assert deep_merge(base, override) == {
            "standup": {"max_exchanges": 5, "min_summary_chars": 40},
            "debug": True,
        }

    def test_does_not_mutate_base(self) -> None:
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})

        assert base == {"a": {"b": 1}}


class TestLoader:
    """Tests for config discovery and loading."""

    def test_config_dir_from_env(self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HUDDLE_CONFIG_DIR", str(test_config_dir))

        assert get_config_dir() == test_config_dir

    def test_missing_config_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HUDDLE_CONFIG_DIR", str(tmp_path / "missing"))

        with pytest.raises(FileNotFoundError):
            get_config_dir()

    def test_environment_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("HUDDLE_ENV", raising=False)

        assert get_environment() == "development"

    def test_load_toml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "nope.toml")

    def test_load_config_requires_default(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HUDDLE_CONFIG_DIR", str(test_config_dir))

        with pytest.raises(FileNotFoundError):
            load_config()

    def test_load_config_merges_environment(
        self, test_config_dir: Path, mock_toml_files, env_override
    ) -> None:
        mock_toml_files({
            "default.toml": "debug = false\n[api]\nport = 8000\n",
            "test.toml": "debug = true\n",
        })

        with env_override({"HUDDLE_CONFIG_DIR": str(test_config_dir), "HUDDLE_ENV": "test"}):
            config = load_config()

        assert config == {"debug": True, "api": {"port": 8000}}

    def test_load_config_explicit_environment(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An explicit environment wins over HUDDLE_ENV."""
        mock_toml_files({
            "default.toml": "[standup]\nmax_exchanges = 3\n",
            "staging.toml": "[standup]\nmax_exchanges = 2\n",
        })
        monkeypatch.setenv("HUDDLE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("HUDDLE_ENV", "production")

        assert load_config("staging") == {"standup": {"max_exchanges": 2}}

    def test_config_dir_found_from_subdirectory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Discovery walks up to the nearest config/ holding default.toml."""
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "default.toml").write_text("debug = false\n")
        nested = tmp_path / "huddle" / "api"
        (nested / "config").mkdir(parents=True)
        monkeypatch.delenv("HUDDLE_CONFIG_DIR", raising=False)
        monkeypatch.chdir(nested)

        assert get_config_dir() == tmp_path / "config"
