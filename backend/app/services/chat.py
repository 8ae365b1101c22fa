"""
Conversation store.
One conversation per unordered pair of users, created lazily on first
contact; messages are append-only.
"""
import logging

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q

from app.core import policy
from app.core.errors import NotFoundError, ValidationError
from app.core.pubsub import CHAT_MESSAGE, Channel
from app.models.chat import Conversation, Message
from app.models.user import User
from app.services.common import isoformat_utc, parse_uuid, utc_now

logger = logging.getLogger("uvicorn.error")

PARTIES = ("participant_a", "participant_b")


def _participant(u: User) -> dict:
    return {"id": str(u.id), "name": u.name, "email": u.email, "role": u.role}


def conversation_to_dict(c: Conversation) -> dict:
    data = {
        "id": str(c.id),
        "participantIds": [str(c.participant_a_id), str(c.participant_b_id)],
        "isActive": c.is_active,
        "lastMessage": None,
        "createdAt": isoformat_utc(c.created_at),
        "updatedAt": isoformat_utc(c.updated_at),
    }
    if c.last_message_at is not None:
        data["lastMessage"] = {
            "senderId": str(c.last_message_sender_id) if c.last_message_sender_id else None,
            "content": c.last_message_content,
            "timestamp": isoformat_utc(c.last_message_at),
        }
    if isinstance(c.participant_a, User) and isinstance(c.participant_b, User):
        data["participants"] = [_participant(c.participant_a), _participant(c.participant_b)]
    return data


def message_to_dict(m: Message) -> dict:
    data = {
        "id": m.id,
        "conversationId": str(m.conversation_id),
        "senderId": str(m.sender_id),
        "content": m.content,
        "timestamp": isoformat_utc(m.timestamp),
    }
    if isinstance(m.sender, User):
        data["sender"] = _participant(m.sender)
    return data


def _ordered_pair(a, b) -> tuple:
    return (a, b) if str(a) <= str(b) else (b, a)


async def _find_pair(a, b) -> Conversation | None:
    low, high = _ordered_pair(a, b)
    return await Conversation.get_or_none(participant_a_id=low, participant_b_id=high)


async def get_or_create(user_id, other_user_id) -> tuple[Conversation, bool]:
    """
    Return the conversation between two users, creating it on first contact.

    Returns:
        (conversation, created)
    """
    uid = parse_uuid(user_id)
    oid = parse_uuid(other_user_id)
    other = await User.get_or_none(id=oid) if oid else None
    if other is None:
        raise NotFoundError("Participant not found", code="PARTICIPANT_NOT_FOUND")
    if str(uid) == str(oid):
        raise ValidationError("Cannot start a conversation with yourself")

    existing = await _find_pair(uid, oid)
    if existing is not None:
        await existing.fetch_related(*PARTIES)
        return existing, False

    low, high = _ordered_pair(uid, oid)
    try:
        conversation = await Conversation.create(participant_a_id=low, participant_b_id=high)
        created = True
    except IntegrityError:
        # A concurrent request created the same pair first
        conversation = await _find_pair(uid, oid)
        if conversation is None:
            raise
        created = False
    await conversation.fetch_related(*PARTIES)
    return conversation, created


async def list_for_user(user_id) -> list[Conversation]:
    return await (
        Conversation.filter(Q(participant_a_id=user_id) | Q(participant_b_id=user_id))
        .order_by("-updated_at")
        .prefetch_related(*PARTIES)
    )


async def _load_for_participant(conversation_id, user_id) -> Conversation:
    cid = parse_uuid(conversation_id)
    conversation = await Conversation.get_or_none(id=cid) if cid else None
    if conversation is None:
        raise NotFoundError("Chat not found", code="CHAT_NOT_FOUND")
    policy.ensure_party(conversation, PARTIES, user_id)
    return conversation


async def get_messages(conversation_id, requesting_user_id) -> list[Message]:
    conversation = await _load_for_participant(conversation_id, requesting_user_id)
    return await (
        Message.filter(conversation_id=conversation.id)
        .order_by("timestamp", "id")
        .prefetch_related("sender")
    )


async def send_message(
    conversation_id,
    sender_id,
    content: str,
    channel: Channel | None = None,
) -> Message:
    """
    Append a message and refresh the conversation's last-message fields.
    """
    if not content or not content.strip():
        raise ValidationError("Message content is required")
    conversation = await _load_for_participant(conversation_id, sender_id)

    message = await Message.create(
        conversation_id=conversation.id,
        sender_id=sender_id,
        content=content,
        timestamp=utc_now(),
    )
    conversation.last_message_content = message.content
    conversation.last_message_sender_id = message.sender_id
    conversation.last_message_at = message.timestamp
    await conversation.save()

    if channel is not None:
        if str(conversation.participant_a_id) == str(sender_id):
            recipient = conversation.participant_b_id
        else:
            recipient = conversation.participant_a_id
        await channel.publish(recipient, CHAT_MESSAGE, message_to_dict(message))
    return message
