"""
Access policy predicates.
Every service states its authorization requirement in terms of these
checks; the API layer resolves the caller before any of them run.
"""
from typing import Iterable

from app.core.errors import ForbiddenError

ADMIN = "admin"


def _same_id(a, b) -> bool:
    return a is not None and b is not None and str(a) == str(b)


def is_authenticated(user) -> bool:
    return user is not None and getattr(user, "id", None) is not None


def has_role(user, roles: Iterable[str]) -> bool:
    return is_authenticated(user) and getattr(user, "role", None) in set(roles)


def is_record_owner(record, field: str, user_id) -> bool:
    """
    True when `record.<field>` references `user_id`.
    Foreign keys are compared through their raw `<field>_id` attribute so
    the related row never has to be fetched.
    """
    value = getattr(record, f"{field}_id", None)
    if value is None:
        value = getattr(record, field, None)
    return _same_id(value, user_id)


def is_record_party(record, fields: Iterable[str], user_id) -> bool:
    return any(is_record_owner(record, f, user_id) for f in fields)


def ensure_role(user, roles: Iterable[str]) -> None:
    if not has_role(user, roles):
        raise ForbiddenError()


def ensure_party(record, fields: Iterable[str], user_id) -> None:
    if not is_record_party(record, fields, user_id):
        raise ForbiddenError()


def ensure_owner_or_admin(user, target_id) -> None:
    """The caller may act on `target_id` only if it is themselves or they are an admin."""
    if _same_id(getattr(user, "id", None), target_id):
        return
    if has_role(user, {ADMIN}):
        return
    raise ForbiddenError()
