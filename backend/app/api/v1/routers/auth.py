# app/api/v1/routers/auth.py
from fastapi import APIRouter, Depends, Response, status
from app.api.v1.deps import get_current_user
from app.core.security import create_access_token
from app.models.user import User
from app.schemas.auth import LoginIn, SignupIn
from app.services import identity

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupIn, response: Response):
    """
    Register a new account.

    Counselors must provide `specialization` and `level`
    (intern / professional / expert / institution). The password is hashed
    before storage and a token is issued immediately so the client can
    continue without a separate login.

    Returns:
        dict: {"success": True, "data": {"user": {...}, "accessToken": str}}

    Error codes (400):
        - VALIDATION_ERROR: Missing or malformed field
        - INVALID_ROLE: Role not client / counselor / admin
        - EMAIL_EXISTS: Email already registered
    """
    user = await identity.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
        specialization=body.specialization,
        level=body.level,
    )
    token = create_access_token(str(user.id), user.role)
    response.set_cookie("accessToken", token, httponly=True, secure=False, samesite="lax")
    return {"success": True, "data": {"user": identity.user_to_dict(user), "accessToken": token}}

@router.post("/login")
async def login(body: LoginIn, response: Response):
    """
    Authenticate and create an access token.

    The caller states the role they are logging in as. Unknown email, wrong
    password and wrong role all produce the same 401 AUTH_INVALID_CREDENTIALS.
    The token is returned in the body and set as an HttpOnly cookie.
    """
    user, token = await identity.authenticate(body.email, body.password, body.role)
    response.set_cookie("accessToken", token, httponly=True, secure=False, samesite="lax")
    return {"success": True, "data": {"user": identity.user_to_dict(user), "accessToken": token}}

@router.get("/profile")
async def profile(user: User = Depends(get_current_user)):
    """
    Current user's profile, re-read from the store (password never included).
    """
    fresh = await identity.get_profile(user.id)
    return {"success": True, "data": identity.user_to_dict(fresh)}

@router.post("/logout")
async def logout(response: Response):
    """
    Clear the access token cookie. The JWT itself stays valid until it expires.
    """
    response.delete_cookie("accessToken")
    return {"success": True}
