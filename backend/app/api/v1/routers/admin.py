# app/api/v1/routers/admin.py
from fastapi import APIRouter, Depends
from app.api.v1.deps import require_admin
from app.models.user import User
from app.services import identity

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users/{user_id}", dependencies=[Depends(require_admin)])
async def get_user_detail(user_id: str):
    """
    Get any account by id (admin only).

    Raises:
        HTTPException (404): USER_NOT_FOUND
        HTTPException (403): If user is not an admin
    """
    u = await identity.get_user(user_id)
    return {"success": True, "data": identity.user_to_dict(u)}


@router.delete("/users/{user_id}")
async def delete_user(user_id: str, current_admin: User = Depends(require_admin)):
    """
    Delete an account (admin only).

    The account's appointments, hotline sessions and conversations are
    removed with it. An admin cannot delete themselves or the last admin.

    Raises:
        404 USER_NOT_FOUND
        400 CANNOT_DELETE_SELF / LAST_ADMIN_FORBIDDEN
        403 If caller is not an admin
    """
    await identity.delete_user(user_id, current_admin)
    return {"success": True, "data": {"id": user_id, "deleted": True}}
