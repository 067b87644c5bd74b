"""Inbound chat event endpoint."""

from fastapi import APIRouter

from huddle.api.dependencies import RegistryDep
from huddle.api.models.runs import MessageEventResponse
from huddle.standup.models import InboundMessage

router = APIRouter(prefix="/events")


@router.post("/message", response_model=MessageEventResponse)
async def deliver_message(message: InboundMessage, registry: RegistryDep) -> MessageEventResponse:
    """Deliver a chat message posted in a standup thread.

    Messages for unknown threads, and chatter from non-participants,
    are accepted and ignored.
    """
    reply = await registry.dispatch(message)
    return MessageEventResponse(handled=reply is not None, reply=reply)
