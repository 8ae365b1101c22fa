# app/models/hotline.py
import uuid
from tortoise import fields, models

HOTLINE_STATUSES = ("active", "completed", "missed")
HOTLINE_CLOSED_STATUSES = ("completed", "missed")


class HotlineSession(models.Model):
    """
    Emergency hotline session between a client and a counselor.
    "missed" is written by an external timeout job, never by this service.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    client = fields.ForeignKeyField(
        "models.User", related_name="client_hotline_sessions", on_delete=fields.CASCADE
    )
    counselor = fields.ForeignKeyField(
        "models.User", related_name="counselor_hotline_sessions", on_delete=fields.CASCADE
    )
    start_time = fields.DatetimeField(auto_now_add=True, index=True)
    end_time = fields.DatetimeField(null=True)
    status = fields.CharField(max_length=16, default="active", index=True)
    emergency_details = fields.TextField()
    notes = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "hotline_sessions"
