"""
Pydantic schemas for chat endpoints.
"""
from pydantic import BaseModel

class ChatCreateIn(BaseModel):
    participantId: str

class MessageIn(BaseModel):
    content: str
