# app/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports throughout the application.

Models exported:
- User: Account, credentials, role and counselor fields
- Appointment: Client/counselor booking
- HotlineSession: Emergency hotline session record
- Conversation / Message: Two-party chat thread and its messages
"""
from .user import User
from .appointment import Appointment
from .hotline import HotlineSession
from .chat import Conversation, Message
