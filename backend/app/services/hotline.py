"""
Hotline session log.

Starting a session claims the counselor with a single conditional update
(status available -> busy), so two concurrent starts against the same
counselor cannot both succeed. Ending a session hands the counselor back
(busy -> available). The counselor status write is the only place this
module touches a User row.
"""
import logging

from app.core import policy
from app.core.errors import InternalError, InvalidTransitionError, NotFoundError, ValidationError
from app.core.pubsub import HOTLINE_NEW, Channel
from app.models.hotline import HOTLINE_CLOSED_STATUSES, HotlineSession
from app.models.user import User
from app.services.common import isoformat_utc, parse_uuid, utc_now
from app.services.identity import user_brief

logger = logging.getLogger("uvicorn.error")

PARTIES = ("client", "counselor")


def session_to_dict(s: HotlineSession) -> dict:
    data = {
        "id": str(s.id),
        "clientId": str(s.client_id),
        "counselorId": str(s.counselor_id),
        "startTime": isoformat_utc(s.start_time),
        "endTime": isoformat_utc(s.end_time),
        "status": s.status,
        "emergencyDetails": s.emergency_details,
        "notes": s.notes,
    }
    if isinstance(s.client, User):
        data["client"] = user_brief(s.client)
    if isinstance(s.counselor, User):
        data["counselor"] = user_brief(s.counselor, with_specialization=True)
    return data


async def _claim_counselor(counselor_id) -> bool:
    """Compare-and-set available -> busy. True when this caller won."""
    updated = await User.filter(
        id=counselor_id, role="counselor", status="available"
    ).update(status="busy")
    return updated == 1


async def _release_counselor(counselor_id) -> None:
    # Best-effort: a counselor that no longer exists is not an error
    await User.filter(id=counselor_id, role="counselor").update(status="available")


async def start(
    client: User,
    counselor_id,
    emergency_details: str,
    channel: Channel | None = None,
) -> HotlineSession:
    """
    Open an emergency session with an available counselor.

    Raises:
        ValidationError: empty details, or the caller targets themselves
        NotFoundError: counselor missing, not a counselor, or not available
        InternalError: the session row could not be written (counselor is released)
    """
    details = (emergency_details or "").strip()
    if not details:
        raise ValidationError("Emergency details are required")
    cid = parse_uuid(counselor_id)
    if cid is None:
        raise NotFoundError("Counselor not available", code="COUNSELOR_NOT_AVAILABLE")
    if str(cid) == str(client.id):
        raise ValidationError("Cannot start a hotline session with yourself")

    if not await _claim_counselor(cid):
        raise NotFoundError("Counselor not available", code="COUNSELOR_NOT_AVAILABLE")

    try:
        session = await HotlineSession.create(
            client=client,
            counselor_id=cid,
            emergency_details=details,
            status="active",
        )
    except Exception as exc:
        logger.exception("[hotline] session creation failed, releasing counselor %s", cid)
        await _release_counselor(cid)
        raise InternalError("Could not start hotline session") from exc

    logger.info("[hotline] session %s started: client=%s counselor=%s", session.id, client.id, cid)
    if channel is not None:
        await channel.publish(cid, HOTLINE_NEW, session_to_dict(session))
    return session


async def end(session_id, acting_user_id, notes: str | None = None) -> HotlineSession:
    """
    Close an active session and make the counselor available again.

    Raises:
        NotFoundError: no such session
        ForbiddenError: caller is neither the client nor the counselor
        InvalidTransitionError: session is not active anymore
    """
    sid = parse_uuid(session_id)
    session = await HotlineSession.get_or_none(id=sid) if sid else None
    if session is None:
        raise NotFoundError("Hotline session not found", code="HOTLINE_NOT_FOUND")
    policy.ensure_party(session, PARTIES, acting_user_id)
    if session.status != "active":
        raise InvalidTransitionError(f"Hotline session is already {session.status}")

    session.status = "completed"
    session.end_time = utc_now()
    if notes:
        session.notes = notes
    await session.save()

    await _release_counselor(session.counselor_id)
    logger.info("[hotline] session %s ended by %s", session.id, acting_user_id)
    return session


async def list_active(user_id, role: str) -> list[HotlineSession]:
    party = "counselor_id" if role == "counselor" else "client_id"
    return await (
        HotlineSession.filter(**{party: user_id}, status="active")
        .order_by("-start_time")
        .prefetch_related("client", "counselor")
    )


async def list_history(user_id, role: str) -> list[HotlineSession]:
    party = "counselor_id" if role == "counselor" else "client_id"
    return await (
        HotlineSession.filter(**{party: user_id}, status__in=list(HOTLINE_CLOSED_STATUSES))
        .order_by("-start_time")
        .prefetch_related("client", "counselor")
    )
