# app/models/appointment.py
"""
Database model for appointments booked by a client with a counselor.
"""
import uuid
from tortoise import fields, models

APPOINTMENT_STATUSES = ("pending", "approved", "rejected")
APPOINTMENT_TYPES = ("online", "offline")


class Appointment(models.Model):
    """
    Appointment database model.

    Status lifecycle: pending -> approved | rejected, performed by the
    referenced counselor only. Approved and rejected are final.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    client = fields.ForeignKeyField(
        "models.User", related_name="client_appointments", on_delete=fields.CASCADE
    )
    counselor = fields.ForeignKeyField(
        "models.User", related_name="counselor_appointments", on_delete=fields.CASCADE
    )
    date = fields.DatetimeField(index=True)
    reason = fields.TextField()
    status = fields.CharField(max_length=16, default="pending")
    type = fields.CharField(max_length=16, default="online")
    notes = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "appointments"
