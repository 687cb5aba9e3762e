import datetime as dt
import logging
from fastapi import APIRouter, HTTPException, Response, status, Depends
from tortoise.exceptions import BaseORMException
from app.core.security import verify_password, create_access_token, hash_password
from app.api.v1.deps import get_current_user
from app.models.user import User, default_profile
from app.schemas.auth import (
    RegisterIn, LoginRequest, ChangePasswordIn, ChangeNameIn,
    UserOut, ProfileOut, ProfileUpdateIn, UserSettings,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("uvicorn.error")

LOGIN_POINTS = 2
ACTIVITY_LOG_LIMIT = 200  # Oldest entries are dropped beyond this


def _user_to_dict(u: User) -> dict:
    return UserOut(id=str(u.id), name=u.name, email=u.email, role=u.role).model_dump()


def _profile_of(u: User) -> dict:
    return {**default_profile(), **(u.profile or {})}


async def _record_login(user: User) -> None:
    """
    Award login points and append a "login" activity.

    A failure here is logged and does not fail the login.
    """
    profile = _profile_of(user)
    profile["points"] += LOGIN_POINTS
    profile["totalLogins"] += 1
    profile["activities"] = (profile["activities"] + [{
        "type": "login",
        "title": "Successful login",
        "time": dt.datetime.now(dt.timezone.utc).isoformat().replace("+00:00", "Z"),
        "points": LOGIN_POINTS,
    }])[-ACTIVITY_LOG_LIMIT:]
    user.profile = profile
    try:
        await user.save(update_fields=["profile"])
    except BaseORMException:
        logger.exception("[auth] failed to update login stats user=%s", user.id)


@router.post("/register")
async def register(body: RegisterIn):
    """
    Register a new member account.

    Creates a new user with the provided name, email and password. The
    password is hashed before storage and the email must be unique.

    Returns:
        dict: Success response with user data, or error response:
            - success: bool
            - data: dict with user id, name, email (if success)
            - error: dict with error code and message (if failure)

    Error codes:
        - BAD_REQUEST: Missing name, email or password
        - EMAIL_EXISTS: Email already registered
    """
    # Basic validation, avoid pydantic error becoming 500
    email = (body.email or "").strip().lower()
    if not body.name.strip() or not email or not body.password:
        return {"success": False, "error": {"code": "BAD_REQUEST", "message": "name/email/password required"}}
    if await User.get_or_none(email=email):
        return {"success": False, "error": {"code": "EMAIL_EXISTS", "message": "Email already registered"}}
    u = await User.create(
        name=body.name.strip(),
        email=email,
        password_hash=hash_password(body.password),
        role="user",
    )
    return {"success": True, "data": _user_to_dict(u)}


@router.post("/login")
async def login(payload: LoginRequest, response: Response):
    """
    Authenticate a member and issue an access token.

    The token is returned in the body (for the WebSocket handshake and the
    Authorization header) and set as an HttpOnly cookie for browser clients.
    Each successful login awards LOGIN_POINTS and appends a "login" activity
    to the profile.

    Raises:
        HTTPException (401): If credentials are invalid
    """
    user = await User.get_or_none(email=(payload.email or "").strip().lower())
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail={"code": "AUTH_INVALID_CREDENTIALS", "message": "Incorrect email or password"})
    await _record_login(user)
    token = create_access_token(str(user.id), user.role)
    response.set_cookie("accessToken", token, httponly=True, secure=False, samesite="lax")
    return {"success": True, "data": {"user": _user_to_dict(user), "accessToken": token}}


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"success": True, "data": _user_to_dict(user)}


@router.post("/logout")
async def logout(response: Response):
    """
    Clear the access token cookie.

    The JWT itself stays valid until it expires; live sockets opened with it
    are not closed.
    """
    response.delete_cookie("accessToken")
    return {"success": True}


@router.post("/change-password")
async def change_password(body: ChangePasswordIn, user: User = Depends(get_current_user)):
    """
    Change the password of the logged-in user after checking the current one.

    Raises:
        HTTPException (400): Current password does not match
    """
    if not verify_password(body.currentPassword, user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail={"code": "WRONG_PASSWORD", "message": "Incorrect current password"})
    user.password_hash = hash_password(body.newPassword)
    await user.save()
    return {"success": True, "data": {"ok": True}}


@router.post("/change-name")
async def change_name(body: ChangeNameIn, user: User = Depends(get_current_user)):
    new_name = body.newName.strip()
    if not new_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail={"code": "BAD_REQUEST", "message": "newName required"})
    user.name = new_name
    await user.save()
    return {"success": True, "data": _user_to_dict(user)}


@router.get("/profile", response_model=ProfileOut)
async def get_profile(user: User = Depends(get_current_user)):
    """
    Points, counters, achievements and the activity log of the logged-in user.
    """
    return _profile_of(user)


@router.put("/profile", response_model=ProfileOut)
async def update_profile(body: ProfileUpdateIn, user: User = Depends(get_current_user)):
    """
    Update the client-owned parts of the profile (achievements).

    Points, counters and activities are server-owned and ignored here.
    """
    profile = _profile_of(user)
    if body.achievements is not None:
        profile["achievements"] = body.achievements
    user.profile = profile
    await user.save(update_fields=["profile"])
    return profile


@router.get("/settings", response_model=UserSettings)
async def get_settings(user: User = Depends(get_current_user)):
    return UserSettings.model_validate(user.settings or {})


@router.put("/settings", response_model=UserSettings)
async def update_settings(body: UserSettings, user: User = Depends(get_current_user)):
    """
    Replace the user's settings document. Omitted sections reset to defaults.
    """
    user.settings = body.model_dump()
    await user.save(update_fields=["settings"])
    return body
