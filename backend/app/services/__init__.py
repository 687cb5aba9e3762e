"""
Services Module

Messaging services used by the HTTP and WebSocket routers:
- Identity directory: resolve user / caretaker ids
- Message store: append-only persistence and pairwise history
- Dispatcher: persist-then-broadcast send path
"""

from .directory import identity_exists
from .message_store import MessageStore, serialize_message
from .dispatcher import Dispatcher, parse_send_request

__all__ = [
    "identity_exists",
    "MessageStore",
    "serialize_message",
    "Dispatcher",
    "parse_send_request",
]
