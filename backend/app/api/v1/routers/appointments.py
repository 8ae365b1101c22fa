# app/api/v1/routers/appointments.py
from fastapi import APIRouter, Depends, status
from app.api.v1.deps import get_channel, get_current_user
from app.core.pubsub import Channel
from app.models.user import User
from app.schemas.appointment import AppointmentCreateIn, AppointmentStatusIn
from app.services import appointments
from app.services.appointments import appointment_to_dict

router = APIRouter(prefix="/appointments", tags=["appointments"])

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_appointment(
    body: AppointmentCreateIn,
    user: User = Depends(get_current_user),
    channel: Channel = Depends(get_channel),
):
    """
    Book an appointment with a counselor.

    The appointment starts as "pending". The counselor receives an
    `appointment:new` notification if connected.

    Raises:
        404 COUNSELOR_NOT_FOUND: No user with that id and role=counselor
        400 VALIDATION_ERROR: Empty reason or booking with yourself
    """
    a = await appointments.create(
        client=user,
        counselor_id=body.counselorId,
        date=body.date,
        reason=body.reason,
        type=body.type,
        notes=body.notes,
        channel=channel,
    )
    return {"success": True, "data": appointment_to_dict(a)}

@router.get("")
async def list_appointments(user: User = Depends(get_current_user)):
    """
    Appointments of the caller, date ascending.
    Counselors see bookings made with them, everyone else their own bookings.
    """
    rows = await appointments.list_for_user(user.id, user.role)
    return {"success": True, "data": [appointment_to_dict(a) for a in rows]}

@router.get("/{appointment_id}")
async def get_appointment(appointment_id: str, user: User = Depends(get_current_user)):
    a = await appointments.get(appointment_id, user.id)
    return {"success": True, "data": appointment_to_dict(a)}

@router.patch("/{appointment_id}/status")
async def update_appointment_status(
    appointment_id: str,
    body: AppointmentStatusIn,
    user: User = Depends(get_current_user),
    channel: Channel = Depends(get_channel),
):
    """
    Approve or reject a pending appointment (assigned counselor only).

    Raises:
        403 FORBIDDEN: Caller is not the appointment's counselor
        404 APPOINTMENT_NOT_FOUND
        409 INVALID_STATUS_TRANSITION: Already approved or rejected
    """
    a = await appointments.update_status(
        appointment_id, user.id, body.status, notes=body.notes, channel=channel
    )
    return {"success": True, "data": appointment_to_dict(a)}

@router.delete("/{appointment_id}")
async def delete_appointment(appointment_id: str, user: User = Depends(get_current_user)):
    """
    Delete an appointment. Either the client or the counselor may do this.
    """
    await appointments.delete(appointment_id, user.id)
    return {"success": True, "data": {"id": appointment_id, "deleted": True}}
