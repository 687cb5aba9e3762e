"""
Message Dispatcher

Single send path shared by the REST endpoint and the WebSocket adapter:

    received -> persisted -> broadcast

The stored record is emitted as "receive_message" to the receiver's room
and then to the sender's room, so every device of both users sees the
server copy. Delivery is best effort; clients backfill through the history
endpoint after reconnecting.
"""
import logging
from typing import Any, Union

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ChatError, ValidationError
from app.core.pubsub import Channel
from app.schemas.message import SendMessageIn
from app.services.message_store import MessageStore, serialize_message

logger = logging.getLogger("uvicorn.error")

RECEIVE_EVENT = "receive_message"


def parse_send_request(payload: Union[SendMessageIn, dict, None]) -> SendMessageIn:
    """Coerce a raw frame/body into SendMessageIn, reporting bad shapes as ValidationError."""
    if isinstance(payload, SendMessageIn):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError("message payload must be an object")
    try:
        return SendMessageIn.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ValidationError(first.get("msg", "invalid message payload"), field=field)


class Dispatcher:
    def __init__(self, store: MessageStore, channel: Channel):
        self.store = store
        self.channel = channel

    async def dispatch(self, sender: Any, payload: Union[SendMessageIn, dict, None]) -> dict:
        """
        Persist a send request from `sender` and fan it out.

        Returns:
            The serialized stored message

        Raises:
            ValidationError / StoreError from the store; nothing is broadcast then
        """
        try:
            body = parse_send_request(payload)
            message = await self.store.append(
                sender,
                body.receiver,
                body.text(),
                receiver_type=body.receiverType,
            )
        except ChatError as e:
            logger.warning("[dispatch] rejected message from %s: %s (%s)", sender, e.code, e.message)
            raise

        record = serialize_message(message)
        delivered = await self.channel.emit(record["receiver"], RECEIVE_EVENT, record)
        if record["sender"] != record["receiver"]:
            delivered += await self.channel.emit(record["sender"], RECEIVE_EVENT, record)
        logger.info("[dispatch] message %s %s -> %s delivered to %d connection(s)",
                    record["id"], record["sender"], record["receiver"], delivered)
        return record
