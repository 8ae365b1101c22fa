# app/api/v1/routers/hotline.py
from fastapi import APIRouter, Depends, status
from app.api.v1.deps import get_channel, get_current_user
from app.core.pubsub import Channel
from app.models.user import User
from app.schemas.hotline import HotlineEndIn, HotlineStartIn
from app.services import hotline
from app.services.hotline import session_to_dict

router = APIRouter(prefix="/hotline", tags=["hotline"])

@router.post("", status_code=status.HTTP_201_CREATED)
async def start_hotline(
    body: HotlineStartIn,
    user: User = Depends(get_current_user),
    channel: Channel = Depends(get_channel),
):
    """
    Start an emergency session with an available counselor.

    The counselor is switched to "busy" atomically; if another session
    claimed them first, or they are not available, the call fails with
    404 COUNSELOR_NOT_AVAILABLE.
    """
    s = await hotline.start(user, body.counselorId, body.emergencyDetails, channel=channel)
    return {"success": True, "data": session_to_dict(s)}

@router.put("/{session_id}/end")
async def end_hotline(
    session_id: str,
    body: HotlineEndIn | None = None,
    user: User = Depends(get_current_user),
):
    """
    End an active session (client or counselor). The counselor becomes
    available again.
    """
    notes = body.notes if body else None
    s = await hotline.end(session_id, user.id, notes=notes)
    return {"success": True, "data": session_to_dict(s)}

@router.get("/active")
async def active_sessions(user: User = Depends(get_current_user)):
    rows = await hotline.list_active(user.id, user.role)
    return {"success": True, "data": [session_to_dict(s) for s in rows]}

@router.get("/history")
async def session_history(user: User = Depends(get_current_user)):
    """
    Completed and missed sessions, newest first.
    """
    rows = await hotline.list_history(user.id, user.role)
    return {"success": True, "data": [session_to_dict(s) for s in rows]}
