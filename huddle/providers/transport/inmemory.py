"""In-memory chat transport for testing and local runs."""

from uuid import uuid4

from pydantic import BaseModel

from huddle.standup.collaborators import ChatTransport


class PostedMessage(BaseModel):
    """A message recorded by the in-memory transport."""

    message_id: str
    thread_id: str
    text: str


class InMemoryChatTransport(ChatTransport):
    """Records every message instead of delivering it."""

    def __init__(self, fail_open: bool = False) -> None:
        self._fail_open = fail_open
        self.threads: dict[str, list[PostedMessage]] = {}

    async def open_thread(self, text: str) -> str | None:
        if self._fail_open:
            return None
        thread_id = str(uuid4())
        self.threads[thread_id] = [PostedMessage(message_id=thread_id, thread_id=thread_id, text=text)]
        return thread_id

    async def post_to_thread(self, thread_id: str, text: str) -> str | None:
        message = PostedMessage(message_id=str(uuid4()), thread_id=thread_id, text=text)
        self.threads.setdefault(thread_id, []).append(message)
        return message.message_id

    def texts(self, thread_id: str) -> list[str]:
        """Messages posted to a thread, root first."""
        return [m.text for m in self.threads.get(thread_id, [])]
