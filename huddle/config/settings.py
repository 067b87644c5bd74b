"""Root settings model for huddle configuration."""

from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from huddle.config.models.api import APIConfig
from huddle.config.models.observability import ObservabilityConfig
from huddle.config.models.providers import ProvidersConfig
from huddle.config.models.standup import StandupConfig

# Module-level variable to store TOML config for settings source
_toml_config: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Set the TOML configuration to be used by Settings.

    Args:
        config: Merged contents of default.toml and the environment file
    """
    global _toml_config
    _toml_config = config


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that reads from the loaded TOML configuration."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        """Get field value from TOML config."""
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        """Return the TOML config values."""
        return _toml_config.copy()


class Settings(BaseSettings):
    """Root configuration object for the standup service.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{HUDDLE_ENV}.toml (environment overrides)
    4. HUDDLE_* environment variables (runtime overrides)

    Secrets such as the Jira API token or the LLM API key are normally
    supplied as HUDDLE_PROVIDERS__TRACKER__API_TOKEN and
    HUDDLE_PROVIDERS__LLM__API_KEY rather than written to TOML.
    """

    model_config = SettingsConfigDict(
        env_prefix="HUDDLE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="huddle", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")

    api: APIConfig = Field(default_factory=APIConfig, description="API server configuration")
    standup: StandupConfig = Field(
        default_factory=StandupConfig,
        description="Interview limits and timeout windows",
    )
    providers: ProvidersConfig = Field(
        default_factory=ProvidersConfig,
        description="Tracker, chat transport and LLM configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Logging and metrics configuration",
    )

    def missing_provider_settings(self) -> list[str]:
        """List the settings the selected backends need but do not have.

        Only the chosen backends are checked: an in-memory tracker needs no
        Jira credentials, and the mock and Ollama providers need no API key.

        Returns:
            Dotted setting names, empty when the configuration is complete
        """
        missing: list[str] = []

        tracker = self.providers.tracker
        if tracker.backend == "jira":
            for name in ("base_url", "email", "api_token"):
                if not getattr(tracker, name):
                    missing.append(f"providers.tracker.{name}")

        transport = self.providers.transport
        if transport.backend == "webhook" and not transport.webhook_url:
            missing.append("providers.transport.webhook_url")

        llm = self.providers.llm
        if llm.provider in ("anthropic", "openai") and llm.api_key is None:
            missing.append("providers.llm.api_key")

        return missing

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include TOML config.

        Priority order (highest to lowest):
        1. init_settings (constructor arguments)
        2. env_settings (HUDDLE_* environment variables)
        3. toml_settings (config/*.toml files)
        4. (defaults from model)
        """
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )
