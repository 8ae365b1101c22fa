# app/api/v1/routers/chat.py
from fastapi import APIRouter, Depends, Response, status
from app.api.v1.deps import get_channel, get_current_user
from app.core.pubsub import Channel
from app.models.user import User
from app.schemas.chat import ChatCreateIn, MessageIn
from app.services import chat
from app.services.chat import conversation_to_dict, message_to_dict

router = APIRouter(prefix="/chat", tags=["chat"])

@router.post("")
async def create_chat(body: ChatCreateIn, response: Response, user: User = Depends(get_current_user)):
    """
    Open (or reopen) the conversation with another user.

    Returns 201 when the conversation was created, 200 when it already
    existed. The same conversation is returned whichever side asks.
    """
    conversation, created = await chat.get_or_create(user.id, body.participantId)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return {"success": True, "data": conversation_to_dict(conversation)}

@router.get("")
async def list_chats(user: User = Depends(get_current_user)):
    """
    Conversations of the caller, most recently updated first.
    """
    rows = await chat.list_for_user(user.id)
    return {"success": True, "data": [conversation_to_dict(c) for c in rows]}

@router.get("/{chat_id}/messages")
async def get_messages(chat_id: str, user: User = Depends(get_current_user)):
    rows = await chat.get_messages(chat_id, user.id)
    return {"success": True, "data": [message_to_dict(m) for m in rows]}

@router.post("/{chat_id}/messages", status_code=status.HTTP_201_CREATED)
async def send_message(
    chat_id: str,
    body: MessageIn,
    user: User = Depends(get_current_user),
    channel: Channel = Depends(get_channel),
):
    """
    Append a message. Only participants may post; the other participant
    receives a `chat:message` notification if connected.
    """
    m = await chat.send_message(chat_id, user.id, body.content, channel=channel)
    return {"success": True, "data": message_to_dict(m)}
