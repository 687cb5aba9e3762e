# app/api/v1/deps.py
from fastapi import Header, HTTPException, Request, WebSocket, status
from app.core.errors import AuthenticationError
from app.core.security import authenticate_token
from app.models.user import User
from app.services.directory import is_well_formed
from app.services.dispatcher import Dispatcher
from app.services.message_store import MessageStore


def _bearer(authorization: str | None) -> str | None:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
):
    """
    FastAPI dependency to get the current authenticated user.

    This dependency extracts and validates the JWT token from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - fallback method

    Raises:
        HTTPException (401): If no token is provided (AUTH_REQUIRED)
        HTTPException (401): If token is invalid or expired (AUTH_INVALID_TOKEN)
        HTTPException (401): If user not found in database (AUTH_USER_NOT_FOUND)
    """
    token = _bearer(authorization) or request.cookies.get("accessToken")
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")

    try:
        user_id = authenticate_token(token)
    except AuthenticationError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    user = await User.get_or_none(id=user_id) if is_well_formed(user_id) else None
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_USER_NOT_FOUND")
    return user


def authenticate_websocket(ws: WebSocket) -> str:
    """
    Handshake authentication for /ws/chat.

    Token sources, in order: "?token=" query parameter, Authorization
    header, accessToken cookie. Browsers cannot set headers on a WebSocket,
    hence the query parameter.

    Returns:
        The canonical user identity

    Raises:
        AuthenticationError: no usable credential
    """
    token = (
        ws.query_params.get("token")
        or _bearer(ws.headers.get("authorization"))
        or ws.cookies.get("accessToken")
    )
    return authenticate_token(token)


def get_message_store(request: Request) -> MessageStore:
    return request.app.state.message_store


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher
