from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from tortoise.exceptions import BaseORMException
from app.api.v1.deps import get_current_user, get_dispatcher, get_message_store
from app.core.errors import ChatError, StoreError
from app.models.user import User
from app.schemas.auth import MemberOut
from app.schemas.message import MessageOut
from app.services.directory import identity_exists
from app.services.dispatcher import Dispatcher
from app.services.message_store import MessageStore, serialize_message

router = APIRouter(prefix="/chat", tags=["chat"])


def _raise_http(err: ChatError):
    raise HTTPException(status_code=err.status_code, detail=err.to_dict())


@router.get("/users", response_model=list[MemberOut])
async def list_chat_users(user: User = Depends(get_current_user)):
    """
    People the caller can start a conversation with: every other member.
    """
    rows = await User.exclude(id=user.id).order_by("name")
    return [{"id": str(u.id), "name": u.name, "email": u.email} for u in rows]


@router.get("/messages/{counterpart_id}", response_model=list[MessageOut])
async def get_messages(
    counterpart_id: str,
    counterpart_type: str = Query("user", alias="type", pattern="^(user|caretaker)$"),
    user: User = Depends(get_current_user),
    store: MessageStore = Depends(get_message_store),
):
    """
    Conversation history between the caller and a counterpart.

    Args:
        counterpart_id: User or caretaker id
        counterpart_type: Identity space of counterpart_id, sent as ?type= ("user" or "caretaker")

    Returns:
        list: Serialized messages, oldest first. An unknown counterpart or a
        pair that never talked yields an empty list, not an error.

    Raises:
        HTTPException (401): If user is not authenticated
        HTTPException (500): STORE_ERROR when the query fails
    """
    try:
        if not await identity_exists(counterpart_id, counterpart_type):
            return []
        rows = await store.history(user.id, counterpart_id)
    except ChatError as e:
        _raise_http(e)
    except BaseORMException:
        _raise_http(StoreError())
    return [serialize_message(m) for m in rows]


@router.post("/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    body: Any = Body(None),
    user: User = Depends(get_current_user),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """
    REST send path. Same contract as the "send_message" socket event: the
    message is stored and broadcast live to both users' rooms.

    Body:
        receiver: str, content (or message): str, receiverType: "user" | "caretaker"

    Returns:
        dict: The stored message (201)

    Raises:
        HTTPException (400): VALIDATION_ERROR (also for a body that is not a JSON
            object) / RECEIVER_NOT_FOUND, nothing stored
        HTTPException (500): STORE_ERROR
    """
    try:
        return await dispatcher.dispatch(user.id, body)
    except ChatError as e:
        _raise_http(e)
