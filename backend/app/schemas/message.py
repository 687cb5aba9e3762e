# app/schemas/message.py
"""
Pydantic schemas for chat messages.
Used by both transports: the REST send endpoint validates its body with
SendMessageIn, and the WebSocket adapter validates the "data" of each
send_message frame with the same model.
"""
from typing import Literal, Optional
from pydantic import BaseModel, field_validator

class SendMessageIn(BaseModel):
    """
    Send request. Older clients put the text under "message", newer ones
    under "content"; either is accepted. Presence and emptiness are checked
    by the message store so both transports report the same error.
    """
    receiver: Optional[str] = None
    content: Optional[str] = None
    message: Optional[str] = None
    receiverType: Literal["user", "caretaker"] = "user"
    clientId: Optional[str] = None  # Echoed back in message_ack / message_error

    @field_validator("receiver", mode="before")
    @classmethod
    def _stringify_receiver(cls, v):
        # Numeric ids from older clients
        return None if v is None else str(v)

    def text(self) -> Optional[str]:
        return self.content if self.content is not None else self.message

class MessageOut(BaseModel):
    """
    Wire form of a stored message (see services.message_store.serialize_message).
    """
    id: str
    sender: str
    receiver: str
    receiverType: str
    content: str
    createdAt: str
