# app/models/user.py
"""
Database model for users.
Holds identity, credentials and role, plus the counselor-only fields
(specialization, level, rating, availability status).
"""
import uuid
from tortoise import fields, models

ROLES = ("client", "counselor", "admin")
COUNSELOR_LEVELS = ("intern", "professional", "expert", "institution")
STATUSES = ("available", "busy", "offline")


class User(models.Model):
    """
    User database model.

    Relationships:
    - Appointments as client or counselor (related_name client_appointments / counselor_appointments)
    - Hotline sessions as client or counselor
    - Conversations (as participant_a or participant_b)

    Security:
    - Password is stored as an argon2 hash and never serialized
    - Email is unique across all roles (stored lower-cased)
    - Role cannot be changed through the profile-update path
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=128)
    email = fields.CharField(max_length=256, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)
    role = fields.CharField(max_length=16, default="client")  # client / counselor / admin

    # Counselor-only fields
    specialization = fields.CharField(max_length=128, null=True)
    level = fields.CharField(max_length=16, null=True)  # intern / professional / expert / institution
    rating = fields.FloatField(default=0)  # 0.0 - 5.0
    rating_count = fields.IntField(default=0)  # Not read by the rating formula
    status = fields.CharField(max_length=16, default="offline")  # available / busy / offline

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "users"

    @property
    def is_counselor(self) -> bool:
        return self.role == "counselor"
