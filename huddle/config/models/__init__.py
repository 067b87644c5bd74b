"""Configuration model exports.

    from huddle.config.models import StandupConfig, ProvidersConfig
"""

from huddle.config.models.api import APIConfig
from huddle.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from huddle.config.models.providers import (
    LLMProviderConfig,
    ProvidersConfig,
    TrackerConfig,
    TransportConfig,
)
from huddle.config.models.standup import StandupConfig

__all__ = [
    "APIConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "LLMProviderConfig",
    "ProvidersConfig",
    "TrackerConfig",
    "TransportConfig",
    "StandupConfig",
]
