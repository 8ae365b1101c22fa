# app/api/v1/deps.py
from fastapi import Depends, Header, Request
from app.core import policy
from app.core.errors import AuthenticationError, ForbiddenError
from app.core.pubsub import Channel
from app.core.security import decode_access_token
from app.models.user import User
from app.services.common import parse_uuid

def extract_token(authorization: str | None, cookies) -> str | None:
    """Bearer header first, then the HttpOnly `accessToken` cookie."""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        token = cookies.get("accessToken")
    return token or None

async def resolve_user(token: str | None) -> User:
    """
    Turn an access token into a User.

    Raises:
        AuthenticationError (401): AUTH_REQUIRED / AUTH_INVALID_TOKEN / AUTH_USER_NOT_FOUND
    """
    if not token:
        raise AuthenticationError("Please authenticate", code="AUTH_REQUIRED")
    try:
        payload = decode_access_token(token)
    except Exception:
        raise AuthenticationError("Invalid or expired token", code="AUTH_INVALID_TOKEN")

    uid = parse_uuid(payload.get("sub"))
    user = await User.get_or_none(id=uid) if uid else None
    if not user:
        raise AuthenticationError("User not found", code="AUTH_USER_NOT_FOUND")
    return user

async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    return await resolve_user(extract_token(authorization, request.cookies))

def require_roles(*roles: str):
    """
    Dependency factory: the caller must hold one of `roles`.

    Usage:
        @router.get("/users", dependencies=[Depends(require_roles("admin", "counselor"))])
    """
    allowed = set(roles)

    async def _dependency(current: User = Depends(get_current_user)) -> User:
        if not policy.has_role(current, allowed):
            raise ForbiddenError("Not authorized", code="FORBIDDEN_ROLE")
        return current

    return _dependency

require_admin = require_roles("admin")

def get_channel(request: Request) -> Channel:
    """The application's notification channel (created in app.main)."""
    return request.app.state.channel
