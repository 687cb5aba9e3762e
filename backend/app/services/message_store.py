"""
Message Store

Append-only persistence of chat messages plus the pairwise history query.

- append(): validate, stamp, insert, return the stored record
- history(): every message between two identities, oldest first

Identities are normalized to their string form before they are written or
compared, so a numeric id and its string spelling address the same
conversation.
"""
import datetime as dt
import logging
from typing import Any, Awaitable, Callable, List, Optional

from tortoise.exceptions import BaseORMException
from tortoise.expressions import Q

from app.core.errors import StoreError, ValidationError
from app.core.pubsub import normalize_identity
from app.models.message import Message
from app.services.directory import identity_exists

logger = logging.getLogger("uvicorn.error")

RECEIVER_TYPES = ("user", "caretaker")

IdentityResolver = Callable[[str, str], Awaitable[bool]]


def _iso(value: dt.datetime) -> str:
    if value.tzinfo is None:
        return value.isoformat() + "Z"
    return value.astimezone(dt.timezone.utc).isoformat().replace("+00:00", "Z")


def serialize_message(m: Any) -> dict:
    """
    Wire form of a stored message, shared by the history endpoint, the
    REST send response and the receive_message event.
    """
    return {
        "id": str(m.id),
        "sender": m.sender,
        "receiver": m.receiver,
        "receiverType": m.receiver_type,
        "content": m.content,
        "createdAt": _iso(m.created_at),
    }


def _required_identity(value: Any, field: str) -> str:
    try:
        return normalize_identity(value)
    except ValueError:
        raise ValidationError(f"{field} is required", field=field)


class MessageStore:
    """
    Tortoise-backed message store.

    Args:
        resolve_identity: async (identity, kind) -> bool used to check that
            both ends of a message exist at persistence time
    """

    def __init__(self, resolve_identity: IdentityResolver = identity_exists):
        self._resolve_identity = resolve_identity
        self._last_created_at: Optional[dt.datetime] = None

    def _next_timestamp(self) -> dt.datetime:
        # Naive UTC, non-decreasing within this store even if the clock steps back
        now = dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)
        if self._last_created_at is not None and now < self._last_created_at:
            now = self._last_created_at
        self._last_created_at = now
        return now

    async def append(
        self,
        sender: Any,
        receiver: Any,
        content: Optional[str],
        receiver_type: str = "user",
    ) -> Message:
        """
        Persist one message.

        Raises:
            ValidationError: missing sender/receiver, blank content, unknown
                receiver type, or an end that does not resolve
            StoreError: the database rejected the lookup or the insert
        """
        sender_id = _required_identity(sender, "sender")
        receiver_id = _required_identity(receiver, "receiver")
        if content is None or not str(content).strip():
            raise ValidationError("content is required", field="content")
        if receiver_type not in RECEIVER_TYPES:
            raise ValidationError(f"unknown receiver type: {receiver_type}", field="receiverType")

        try:
            sender_known = await self._resolve_identity(sender_id, "user")
            receiver_known = await self._resolve_identity(receiver_id, receiver_type)
        except BaseORMException as e:
            logger.exception("[messages] identity lookup failed")
            raise StoreError() from e
        if not sender_known:
            raise ValidationError("Sender not found", field="sender", code="SENDER_NOT_FOUND")
        if not receiver_known:
            raise ValidationError("Receiver not found", field="receiver", code="RECEIVER_NOT_FOUND")

        try:
            return await Message.create(
                sender=sender_id,
                receiver=receiver_id,
                receiver_type=receiver_type,
                content=str(content),
                created_at=self._next_timestamp(),
            )
        except BaseORMException as e:
            logger.exception("[messages] insert failed sender=%s receiver=%s", sender_id, receiver_id)
            raise StoreError() from e

    async def history(self, user_a: Any, user_b: Any) -> List[Message]:
        """
        All messages exchanged between two identities, in either direction,
        ordered by creation time (insert order breaks ties).

        Returns an empty list when the pair has never talked.
        """
        a = _required_identity(user_a, "userA")
        b = _required_identity(user_b, "userB")
        try:
            return await Message.filter(
                Q(sender=a, receiver=b) | Q(sender=b, receiver=a)
            ).order_by("created_at", "id")
        except BaseORMException as e:
            logger.exception("[messages] history query failed a=%s b=%s", a, b)
            raise StoreError() from e
