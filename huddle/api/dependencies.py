"""Dependency injection for API routes.

The run registry and its collaborators are built from settings on
first use and can be overridden for testing.
"""

from typing import Annotated

from fastapi import Depends

from huddle.config import get_settings as _load_settings
from huddle.config.settings import Settings
from huddle.observability.logging import get_logger
from huddle.providers.classifier import LLMResponseClassifier
from huddle.providers.llm import create_llm_provider
from huddle.providers.narrator import LLMStandupNarrator
from huddle.providers.tracker import create_tracker
from huddle.providers.transport import create_transport
from huddle.standup.registry import RunRegistry

logger = get_logger(__name__)

_registry: RunRegistry | None = None


def get_settings() -> Settings:
    """Get application settings."""
    return _load_settings()


def get_registry(settings: Annotated[Settings, Depends(get_settings)]) -> RunRegistry:
    """Get the process-wide run registry.

    Collaborators are selected by the `providers` configuration section.
    """
    global _registry
    if _registry is None:
        providers = settings.providers
        llm = create_llm_provider(providers.llm)
        _registry = RunRegistry(
            tracker=create_tracker(providers.tracker),
            classifier=LLMResponseClassifier(llm),
            transport=create_transport(providers.transport),
            config=settings.standup,
            narrator=LLMStandupNarrator(llm) if providers.llm.narrate else None,
        )
        logger.info(
            "run_registry_created",
            llm_provider=providers.llm.provider,
            tracker=providers.tracker.backend,
            transport=providers.transport.backend,
            narrate=providers.llm.narrate,
        )
    return _registry


def reset_dependencies() -> None:
    """Drop the registry, cancelling the timers of every run it holds."""
    global _registry
    if _registry is not None:
        _registry.close()
    _registry = None


SettingsDep = Annotated[Settings, Depends(get_settings)]
RegistryDep = Annotated[RunRegistry, Depends(get_registry)]
