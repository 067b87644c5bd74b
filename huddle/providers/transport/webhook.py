"""Chat transport that posts thread messages to an HTTP webhook.

The webhook receives `{"channel", "text", "thread_id"}` and is expected
to answer with a JSON object carrying the id of the created message.
The root message's id becomes the thread id.
"""

from typing import Any

import httpx

from huddle.config.models.providers import TransportConfig
from huddle.observability.logging import get_logger
from huddle.standup.collaborators import ChatTransport
from huddle.standup.exceptions import HuddleError

logger = get_logger(__name__)


class TransportError(HuddleError):
    """The chat webhook could not be reached or rejected the message."""

    pass


class WebhookChatTransport(ChatTransport):
    """Posts standup messages through an outbound webhook."""

    def __init__(self, config: TransportConfig, client: httpx.AsyncClient | None = None) -> None:
        if not config.webhook_url:
            raise ValueError("Webhook transport requires webhook_url")
        self._config = config
        self._url = config.webhook_url
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def open_thread(self, text: str) -> str | None:
        message_id = await self._send(text, thread_id=None)
        if message_id is None:
            logger.warning("webhook_thread_id_missing", channel=self._config.channel)
        return message_id

    async def post_to_thread(self, thread_id: str, text: str) -> str | None:
        return await self._send(text, thread_id=thread_id)

    async def _send(self, text: str, thread_id: str | None) -> str | None:
        payload: dict[str, Any] = {"channel": self._config.channel, "text": text}
        if thread_id is not None:
            payload["thread_id"] = thread_id

        try:
            response = await self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"Webhook request failed: {e}") from e

        if response.status_code >= 400:
            raise TransportError(f"Webhook returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        message_id = data.get("id") or data.get("ts")
        return str(message_id) if message_id else None
