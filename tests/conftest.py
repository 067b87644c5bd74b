"""Shared test fixtures for the huddle test suite."""

import os
from collections.abc import AsyncIterator, Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from huddle.config.models.standup import StandupConfig
from huddle.providers.tracker import InMemoryTicketTracker
from huddle.providers.transport import InMemoryChatTransport
from huddle.standup.models import Participant
from huddle.standup.run import StandupRun
from tests.factories import ParticipantFactory, ScriptedClassifier


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"HUDDLE_DEBUG": "true"}):
                ...
    """
    return EnvOverrideContext


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from huddle.config import get_settings
    from huddle.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


# =============================================================================
# Standup fixtures
# =============================================================================


@pytest.fixture
def standup_config() -> StandupConfig:
    """Defaults with timeouts long enough never to fire during a test."""
    return StandupConfig(
        initial_timeout_seconds=60.0,
        final_timeout_seconds=30.0,
        classifier_timeout_seconds=1.0,
        tracker_timeout_seconds=1.0,
    )


@pytest.fixture
def fast_config() -> StandupConfig:
    """Sub-second timeout windows for timer tests."""
    return StandupConfig(
        initial_timeout_seconds=0.4,
        final_timeout_seconds=0.2,
        classifier_timeout_seconds=0.2,
        tracker_timeout_seconds=0.2,
    )


@pytest.fixture
def tracker() -> InMemoryTicketTracker:
    return InMemoryTicketTracker()


@pytest.fixture
def transport() -> InMemoryChatTransport:
    return InMemoryChatTransport()


@pytest.fixture
def classifier() -> ScriptedClassifier:
    return ScriptedClassifier()


@pytest.fixture
def team() -> list[Participant]:
    """Alice, Bob and Carol, in interview order."""
    return [
        ParticipantFactory.create(participant_id="U1", name="Alice Smith", contact="alice@example.com"),
        ParticipantFactory.create(participant_id="U2", name="Bob Jones", contact="bob@example.com"),
        ParticipantFactory.create(participant_id="U3", name="Carol White", contact="carol@example.com"),
    ]


@pytest.fixture
async def run(
    tracker: InMemoryTicketTracker,
    classifier: ScriptedClassifier,
    transport: InMemoryChatTransport,
    standup_config: StandupConfig,
) -> AsyncIterator[StandupRun]:
    """An unstarted run over in-memory collaborators; timers are cancelled on teardown."""
    standup_run = StandupRun(
        tracker=tracker,
        classifier=classifier,
        transport=transport,
        config=standup_config,
        run_id="run-test",
    )
    yield standup_run
    standup_run.close()
