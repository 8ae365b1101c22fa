"""
Appointment ledger.
Clients book appointments with counselors; the counselor approves or
rejects; either party may delete.
"""
import datetime as dt
import logging

from app.core import policy
from app.core.errors import InvalidTransitionError, NotFoundError, ValidationError
from app.core.pubsub import APPOINTMENT_NEW, APPOINTMENT_STATUS, Channel
from app.models.appointment import APPOINTMENT_TYPES, Appointment
from app.models.user import User
from app.services.common import as_utc, isoformat_utc, parse_uuid
from app.services.identity import user_brief

logger = logging.getLogger("uvicorn.error")

PARTIES = ("client", "counselor")
DECISIONS = ("approved", "rejected")


def appointment_to_dict(a: Appointment) -> dict:
    """
    Serialize an appointment. Counterparts are included when they were
    prefetched (see list_for_user).
    """
    data = {
        "id": str(a.id),
        "clientId": str(a.client_id),
        "counselorId": str(a.counselor_id),
        "date": isoformat_utc(a.date),
        "reason": a.reason,
        "status": a.status,
        "type": a.type,
        "notes": a.notes,
        "createdAt": isoformat_utc(a.created_at),
        "updatedAt": isoformat_utc(a.updated_at),
    }
    # Unfetched relations are lazy querysets, not User instances
    if isinstance(a.client, User):
        data["client"] = user_brief(a.client)
    if isinstance(a.counselor, User):
        data["counselor"] = user_brief(a.counselor, with_specialization=True)
    return data


async def _load(appointment_id) -> Appointment:
    aid = parse_uuid(appointment_id)
    appointment = await Appointment.get_or_none(id=aid) if aid else None
    if appointment is None:
        raise NotFoundError("Appointment not found", code="APPOINTMENT_NOT_FOUND")
    return appointment


async def _attach_parties(a: Appointment) -> Appointment:
    await a.fetch_related("client", "counselor")
    return a


async def create(
    client: User,
    counselor_id,
    date: dt.datetime,
    reason: str,
    type: str = "online",
    notes: str | None = None,
    channel: Channel | None = None,
) -> Appointment:
    """
    Book an appointment. The counselor must exist with role=counselor; no
    availability or calendar check is made.
    """
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Reason is required")
    if type not in APPOINTMENT_TYPES:
        raise ValidationError(f"Type must be one of: {', '.join(APPOINTMENT_TYPES)}")
    if date is None:
        raise ValidationError("Date is required")

    cid = parse_uuid(counselor_id)
    counselor = await User.get_or_none(id=cid, role="counselor") if cid else None
    if counselor is None:
        raise NotFoundError("Counselor not found", code="COUNSELOR_NOT_FOUND")
    if str(counselor.id) == str(client.id):
        raise ValidationError("Cannot book an appointment with yourself")

    appointment = await Appointment.create(
        client=client,
        counselor=counselor,
        date=as_utc(date),
        reason=reason,
        type=type,
        notes=notes,
    )

    if channel is not None:
        await channel.publish(counselor.id, APPOINTMENT_NEW, appointment_to_dict(appointment))
    return appointment


async def list_for_user(user_id, role: str) -> list[Appointment]:
    """
    Counselors get the appointments booked with them; everyone else gets the
    ones they booked. Ordered by date ascending.
    """
    if role == "counselor":
        qs = Appointment.filter(counselor_id=user_id)
    else:
        qs = Appointment.filter(client_id=user_id)
    return await qs.order_by("date").prefetch_related("client", "counselor")


async def get(appointment_id, acting_user_id) -> Appointment:
    appointment = await _load(appointment_id)
    policy.ensure_party(appointment, PARTIES, acting_user_id)
    return await _attach_parties(appointment)


async def update_status(
    appointment_id,
    acting_user_id,
    status: str,
    notes: str | None = None,
    channel: Channel | None = None,
) -> Appointment:
    """
    Approve or reject a pending appointment.

    Raises:
        NotFoundError: no such appointment
        ForbiddenError: caller is not the appointment's counselor
        InvalidTransitionError: appointment is already approved or rejected
        ValidationError: target status is not approved/rejected
    """
    appointment = await _load(appointment_id)
    policy.ensure_party(appointment, ("counselor",), acting_user_id)
    if appointment.status != "pending":
        raise InvalidTransitionError(
            f"Appointment is already {appointment.status}"
        )
    if status not in DECISIONS:
        raise ValidationError("Status must be approved or rejected")

    appointment.status = status
    if notes:
        appointment.notes = notes
    await appointment.save()
    logger.info("[appointments] %s -> %s by %s", appointment.id, status, acting_user_id)

    await _attach_parties(appointment)
    if channel is not None:
        await channel.publish(appointment.client_id, APPOINTMENT_STATUS, appointment_to_dict(appointment))
    return appointment


async def delete(appointment_id, acting_user_id) -> None:
    appointment = await _load(appointment_id)
    policy.ensure_party(appointment, PARTIES, acting_user_id)
    await appointment.delete()
