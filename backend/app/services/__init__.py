"""
Services Module

Domain services behind the REST routers:
- identity: Signup, login, profiles, counselor status and rating
- appointments: Appointment booking and approval
- hotline: Emergency hotline sessions (claims/releases counselor availability)
- chat: Two-party conversations and messages

Each service takes ids, enforces record-level access policy and raises
app.core.errors types; routers only translate HTTP to calls.
"""
from . import appointments, chat, hotline, identity

__all__ = [
    "appointments",
    "chat",
    "hotline",
    "identity",
]
