"""
Pydantic schemas for user management endpoints.
"""
from typing import Literal
from pydantic import BaseModel, Field

class StatusUpdateIn(BaseModel):
    status: Literal["available", "busy", "offline"]

class ProfileUpdateIn(BaseModel):
    """
    Partial profile update. Unknown keys (including password and role) are
    dropped here and again by the identity service.
    """
    name: str | None = None
    email: str | None = None
    specialization: str | None = None
    level: str | None = None

    model_config = {"extra": "ignore"}

class RateCounselorIn(BaseModel):
    rating: float = Field(ge=0, le=5)
