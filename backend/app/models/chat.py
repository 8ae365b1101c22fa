# app/models/chat.py
"""
Database models for two-party chat.
A Conversation links exactly two users; Messages are appended to it and
never edited. The latest message is copied onto the conversation so
conversation lists do not need to read the message table.
"""
import uuid
from tortoise import fields, models


class Conversation(models.Model):
    """
    Conversation database model.

    The participant pair is stored in canonical order (participant_a has the
    smaller id as a string) so the unique constraint covers the unordered pair.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    participant_a = fields.ForeignKeyField(
        "models.User", related_name="conversations_as_a", on_delete=fields.CASCADE
    )
    participant_b = fields.ForeignKeyField(
        "models.User", related_name="conversations_as_b", on_delete=fields.CASCADE
    )
    is_active = fields.BooleanField(default=True)

    # Denormalized last message
    last_message_content = fields.TextField(null=True)
    last_message_sender_id = fields.UUIDField(null=True)
    last_message_at = fields.DatetimeField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True, index=True)

    class Meta:
        table = "conversations"
        unique_together = (("participant_a", "participant_b"),)


class Message(models.Model):
    id = fields.IntField(pk=True)
    conversation = fields.ForeignKeyField(
        "models.Conversation", related_name="messages", on_delete=fields.CASCADE
    )
    sender = fields.ForeignKeyField("models.User", related_name="sent_messages", on_delete=fields.CASCADE)
    content = fields.TextField()
    timestamp = fields.DatetimeField(auto_now_add=True, index=True)

    class Meta:
        table = "messages"
