# app/api/v1/routers/users.py
from fastapi import APIRouter, Depends
from app.api.v1.deps import get_current_user, require_roles
from app.core import policy
from app.models.user import User
from app.schemas.user import ProfileUpdateIn, RateCounselorIn, StatusUpdateIn
from app.services import identity

router = APIRouter(prefix="/users", tags=["users"])

@router.get("")
async def list_users(current: User = Depends(require_roles("admin", "counselor"))):
    """
    List accounts, ordered by name.

    Admins get every account; counselors get clients only (to find chat
    partners). Clients receive 403.
    """
    rows = await identity.list_users(current.role)
    return {"success": True, "data": [identity.user_to_dict(u) for u in rows]}

@router.get("/counselors")
async def list_counselors(_: User = Depends(get_current_user)):
    rows = await identity.list_counselors()
    return {"success": True, "data": [identity.user_to_dict(u) for u in rows]}

@router.patch("/{user_id}/status")
async def update_status(user_id: str, body: StatusUpdateIn, current: User = Depends(get_current_user)):
    """
    Change availability status (available / busy / offline).
    Only the account owner or an admin may do this.
    """
    policy.ensure_owner_or_admin(current, user_id)
    u = await identity.update_status(user_id, body.status)
    return {"success": True, "data": identity.user_to_dict(u)}

@router.patch("/{user_id}/profile")
async def update_profile(user_id: str, body: ProfileUpdateIn, current: User = Depends(get_current_user)):
    """
    Partial profile update (name, email, specialization, level).
    Password and role are never changed here, even if sent.
    """
    policy.ensure_owner_or_admin(current, user_id)
    u = await identity.update_profile(user_id, body.model_dump(exclude_none=True))
    return {"success": True, "data": identity.user_to_dict(u)}

@router.post("/counselors/{counselor_id}/rate")
async def rate_counselor(counselor_id: str, body: RateCounselorIn, _: User = Depends(get_current_user)):
    """
    Submit a 0-5 rating. Returns the counselor's new rating.
    """
    new_rating = await identity.rate_counselor(counselor_id, body.rating)
    return {"success": True, "data": {"counselorId": counselor_id, "rating": new_rating}}
