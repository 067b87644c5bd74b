"""External collaborator configuration models."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr

LLMProviderType = Literal["anthropic", "openai", "ollama", "mock"]
TrackerBackend = Literal["jira", "memory"]
TransportBackend = Literal["webhook", "memory"]


class LLMProviderConfig(BaseModel):
    """Configuration for the language model behind the response classifier."""

    provider: LLMProviderType = Field(default="ollama", description="Provider type")
    model: str = Field(default="llama3.3:70b", description="Model identifier")
    api_key: SecretStr | None = Field(default=None, description="API key (prefer env var)")
    base_url: str | None = Field(default=None, description="Custom API base URL")
    max_tokens: int = Field(default=4096, gt=0, description="Default max tokens")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Sampling temperature")
    timeout: float = Field(default=120.0, gt=0, description="Request timeout in seconds")
    narrate: bool = Field(
        default=True,
        description="Also write off-topic redirects and the run summary with the model",
    )


class TrackerConfig(BaseModel):
    """Configuration for the work-item tracker."""

    backend: TrackerBackend = Field(default="memory", description="Tracker backend")
    base_url: str | None = Field(default=None, description="Jira site URL")
    email: str | None = Field(default=None, description="Jira account e-mail")
    api_token: SecretStr | None = Field(default=None, description="Jira API token")
    project_key: str | None = Field(default=None, description="Restrict queries to a project")
    timeout: float = Field(default=15.0, gt=0, description="Request timeout in seconds")


class TransportConfig(BaseModel):
    """Configuration for the outbound chat transport."""

    backend: TransportBackend = Field(default="memory", description="Transport backend")
    webhook_url: str | None = Field(default=None, description="Outbound webhook URL")
    channel: str = Field(default="#standup", description="Channel that hosts standup threads")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")


class ProvidersConfig(BaseModel):
    """Provider configuration."""

    llm: LLMProviderConfig = Field(default_factory=LLMProviderConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
