"""Chat transport implementations."""

from huddle.config.models.providers import TransportConfig
from huddle.providers.transport.inmemory import InMemoryChatTransport, PostedMessage
from huddle.providers.transport.webhook import TransportError, WebhookChatTransport
from huddle.standup.collaborators import ChatTransport


def create_transport(config: TransportConfig) -> ChatTransport:
    """Build the transport backend named by the configuration."""
    if config.backend == "webhook":
        return WebhookChatTransport(config)
    return InMemoryChatTransport()


__all__ = [
    "InMemoryChatTransport",
    "PostedMessage",
    "TransportError",
    "WebhookChatTransport",
    "create_transport",
]
