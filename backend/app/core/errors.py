# app/core/errors.py
"""
Error taxonomy for the messaging core.

Every error carries an HTTP status and a stable error code so that both
transports can report it the same way:
- REST routers turn it into HTTPException(detail=err.to_dict())
- the WebSocket adapter turns it into a "message_error" event
"""
from typing import Optional


class ChatError(Exception):
    """Base class for messaging errors."""
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class AuthenticationError(ChatError):
    """Missing, malformed or expired credential."""
    status_code = 401
    code = "AUTH_INVALID_TOKEN"


class ValidationError(ChatError):
    """Missing receiver, blank content, or unknown receiver."""
    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message, code=code)
        self.field = field


class NotFoundError(ChatError):
    """
    Directory lookups (caretaker, patient, game). Chat history does not use
    it: an unknown counterpart yields an empty history.
    """
    status_code = 404
    code = "NOT_FOUND"


class StoreError(ChatError):
    """Persistence or query failure in the message store."""
    status_code = 500
    code = "STORE_ERROR"

    def __init__(self, message: str = "Message store operation failed"):
        super().__init__(message)
