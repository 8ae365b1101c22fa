"""
Pydantic schemas for authentication endpoints.
Fields are optional at the schema level so that missing values reach the
identity service and come back as its own VALIDATION_ERROR messages.
"""
from pydantic import BaseModel, Field, field_validator

# Older web clients send the client role as "user"
ROLE_ALIASES = {"user": "client"}

def _normalize_role(value: str | None) -> str | None:
    if isinstance(value, str):
        return ROLE_ALIASES.get(value, value)
    return value

class SignupIn(BaseModel):
    """
    Request model for account signup.
    `role` may also be sent as `userType`, as the web client does.
    """
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = Field(default=None, alias="userType")
    specialization: str | None = None  # Required for counselors
    level: str | None = None  # Required for counselors

    model_config = {"populate_by_name": True}

    @field_validator("role")
    @classmethod
    def _role(cls, v):
        return _normalize_role(v)

class LoginIn(BaseModel):
    """
    Request model for login. The claimed role must match the stored role.
    """
    email: str | None = None
    password: str | None = None
    role: str | None = Field(default=None, alias="userType")

    model_config = {"populate_by_name": True}

    @field_validator("role")
    @classmethod
    def _role(cls, v):
        return _normalize_role(v)
