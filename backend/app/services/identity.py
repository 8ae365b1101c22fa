"""
Identity store.
Signup, login, profile reads and the counselor mutable fields (status,
rating). Every function works on ids and raises app.core.errors types.
"""
import logging
import re

from tortoise.exceptions import IntegrityError

from app.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidRoleError,
    InvalidTransitionError,
    NotACounselorError,
    NotFoundError,
    ValidationError,
)
from app.core.security import create_access_token, hash_password, verify_password
from app.models.hotline import HotlineSession
from app.models.user import COUNSELOR_LEVELS, ROLES, STATUSES, User
from app.services.common import isoformat_utc, parse_uuid

logger = logging.getLogger("uvicorn.error")

MIN_PASSWORD_LENGTH = 6
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Keys accepted by update_profile; everything else is dropped
PROFILE_FIELDS = ("name", "email", "specialization", "level")
# Never writable through update_profile, whatever the caller sends
PROTECTED_FIELDS = ("password", "password_hash", "role")


def user_to_dict(u: User) -> dict:
    """
    Convert a User into its public representation. The password hash is
    never included.
    """
    data = {
        "id": str(u.id),
        "name": u.name,
        "email": u.email,
        "role": u.role,
        "createdAt": isoformat_utc(u.created_at),
    }
    if u.role == "counselor":
        data.update({
            "specialization": u.specialization,
            "level": u.level,
            "rating": u.rating,
            "ratingCount": u.rating_count,
            "status": u.status,
        })
    return data


def user_brief(u: User | None, with_specialization: bool = False) -> dict | None:
    """Counterpart summary used in read-time joins."""
    if u is None:
        return None
    data = {"id": str(u.id), "name": u.name, "email": u.email}
    if with_specialization:
        data["specialization"] = u.specialization
    return data


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _check_email(email: str) -> None:
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")


def _check_level(level: str) -> None:
    if level not in COUNSELOR_LEVELS:
        raise ValidationError(f"Level must be one of: {', '.join(COUNSELOR_LEVELS)}")


async def register(
    name: str | None,
    email: str | None,
    password: str | None,
    role: str | None,
    specialization: str | None = None,
    level: str | None = None,
) -> User:
    """
    Create a new account.

    Raises:
        ValidationError: required field missing, short password, bad email,
            counselor without specialization/level, unknown level
        InvalidRoleError: role is not client/counselor/admin
        ConflictError: email already registered (any role)
    """
    name = (name or "").strip()
    email = _normalize_email(email)
    if not name or not email or not password or not role:
        raise ValidationError("All fields are required")
    if role not in ROLES:
        raise InvalidRoleError()
    _check_email(email)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if role == "counselor":
        specialization = (specialization or "").strip()
        if not specialization:
            raise ValidationError("Specialization is required for counselors")
        if not level:
            raise ValidationError("Level is required for counselors")
        _check_level(level)
    else:
        specialization = None
        level = None

    if await User.filter(email=email).exists():
        raise ConflictError("User already exists", code="EMAIL_EXISTS")

    try:
        u = await User.create(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=role,
            specialization=specialization,
            level=level,
        )
    except IntegrityError:
        # Lost a race against a concurrent signup with the same email
        raise ConflictError("User already exists", code="EMAIL_EXISTS")
    logger.info("[identity] registered user id=%s role=%s", u.id, u.role)
    return u


async def authenticate(email: str | None, password: str | None, claimed_role: str | None) -> tuple[User, str]:
    """
    Verify credentials and issue an access token.

    Unknown email, wrong password and a claimed role that differs from the
    stored one all raise the same AuthenticationError so callers cannot tell
    which check failed.
    """
    email = _normalize_email(email)
    if not email or not password or not claimed_role:
        raise ValidationError("All fields are required")
    if claimed_role not in ROLES:
        raise InvalidRoleError()

    user = await User.get_or_none(email=email)
    if (
        user is None
        or not verify_password(password, user.password_hash)
        or user.role != claimed_role
    ):
        logger.info("[identity] failed login attempt")
        raise AuthenticationError()

    token = create_access_token(str(user.id), user.role)
    return user, token


async def get_user(user_id) -> User:
    uid = parse_uuid(user_id)
    user = await User.get_or_none(id=uid) if uid else None
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return user


async def get_profile(user_id) -> User:
    return await get_user(user_id)


async def list_users(requesting_role: str) -> list[User]:
    """
    Admins see every account; everyone else only sees clients.
    Sorted by name in code-point order.
    """
    qs = User.all() if requesting_role == "admin" else User.filter(role="client")
    rows = await qs
    return sorted(rows, key=lambda u: u.name)


async def list_counselors() -> list[User]:
    rows = await User.filter(role="counselor")
    return sorted(rows, key=lambda u: u.name)


async def update_status(user_id, status: str) -> User:
    """
    Set a counselor's availability.
    A counselor with an active hotline session stays busy until it ends.
    """
    if status not in STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(STATUSES)}")
    user = await get_user(user_id)
    if status != "busy" and await HotlineSession.filter(counselor_id=user.id, status="active").exists():
        raise InvalidTransitionError("Counselor is in an active hotline session")
    user.status = status
    await user.save()
    return user


async def update_profile(user_id, fields: dict) -> User:
    """
    Apply a partial profile update.
    Credentials and role are stripped unconditionally, as is any key outside
    PROFILE_FIELDS.
    """
    updates = {
        k: v for k, v in (fields or {}).items()
        if k in PROFILE_FIELDS and k not in PROTECTED_FIELDS and v is not None
    }
    user = await get_user(user_id)

    if "name" in updates:
        name = str(updates["name"]).strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        user.name = name

    if "email" in updates:
        email = _normalize_email(updates["email"])
        _check_email(email)
        if email != user.email:
            if await User.filter(email=email).exclude(id=user.id).exists():
                raise ConflictError("Email already registered", code="EMAIL_EXISTS")
            user.email = email

    if "specialization" in updates:
        user.specialization = str(updates["specialization"]).strip() or user.specialization

    if "level" in updates:
        _check_level(updates["level"])
        user.level = updates["level"]

    await user.save()
    return user


async def rate_counselor(counselor_id, rating: float) -> float:
    """
    Blend a new rating into the counselor's score.

    new = (current + rating) / 2 -- each rating halves the distance to the
    latest value; rating_count is not consulted.
    """
    if rating is None or not 0 <= rating <= 5:
        raise ValidationError("Rating must be between 0 and 5")
    uid = parse_uuid(counselor_id)
    counselor = await User.get_or_none(id=uid) if uid else None
    if counselor is None:
        raise NotFoundError("Counselor not found")
    if counselor.role != "counselor":
        raise NotACounselorError()

    new_rating = ((counselor.rating or 0) + rating) / 2
    counselor.rating = new_rating
    await counselor.save()
    return new_rating


async def delete_user(user_id, acting_admin: User) -> None:
    """
    Remove an account (admin operation).
    An admin cannot delete themselves or the last remaining admin.
    """
    user = await get_user(user_id)
    if str(user.id) == str(acting_admin.id):
        raise ValidationError("Cannot delete yourself", code="CANNOT_DELETE_SELF")
    if user.role == "admin" and await User.filter(role="admin").count() <= 1:
        raise ValidationError("Cannot delete the last admin", code="LAST_ADMIN_FORBIDDEN")
    await user.delete()
    logger.info("[identity] admin %s deleted user %s", acting_admin.id, user.id)
