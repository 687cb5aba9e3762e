# backend/app/core/pubsub.py
"""
Room registry for live chat connections.
Every authenticated WebSocket joins the room named after its user identity,
so all devices of one user receive the events addressed to that user.
"""
from typing import Any, Dict, Set
from starlette.websockets import WebSocket
import json
import logging
import uuid

logger = logging.getLogger("uvicorn.error")


def normalize_identity(identity: Any) -> str:
    """
    Canonical string form of an identity, also used as its room name.

    Ids arrive as UUID objects, ints or strings depending on the caller;
    they are always compared and stored in their string form. UUID
    spellings collapse to the lowercase hyphenated form.
    """
    if identity is None:
        raise ValueError("identity is required")
    name = str(identity).strip()
    if not name:
        raise ValueError("identity is required")
    try:
        return str(uuid.UUID(name))
    except ValueError:
        return name


class Channel:
    """
    In-process broadcast groups keyed by user identity.

    Architecture:
    - The router accepts the socket and decides when to join/leave
    - Membership lives only as long as the connection; nothing is persisted
    - Delivery is best effort: a failed send is logged and skipped

    Data structure:
    - _rooms: Dict[room_name, Set[WebSocket]]
    """
    def __init__(self):
        # Example: {"7f0c...": {ws1, ws2}, "91ab...": {ws3}}
        self._rooms: Dict[str, Set[WebSocket]] = {}

    # -------- membership (no accept, only register) --------
    async def join(self, identity: Any, ws: WebSocket) -> str:
        """
        Add a connection to the room of `identity`.

        Returns:
            The room name the connection joined
        """
        room = normalize_identity(identity)
        self._rooms.setdefault(room, set()).add(ws)
        return room

    def leave(self, identity: Any, ws: WebSocket) -> None:
        """Remove a connection; unknown rooms or connections are ignored."""
        room = normalize_identity(identity)
        conns = self._rooms.get(room)
        if conns is None:
            return
        conns.discard(ws)
        if not conns:
            del self._rooms[room]

    def members(self, identity: Any) -> Set[WebSocket]:
        return set(self._rooms.get(normalize_identity(identity), set()))

    def rooms(self) -> list[str]:
        return list(self._rooms)

    # -------- publish --------
    async def emit(self, identity: Any, event: str, data: dict) -> int:
        """
        Send `{"event": event, "data": data}` to every connection in a room.

        Returns:
            Number of connections the frame was written to
        """
        room = normalize_identity(identity)
        conns = list(self._rooms.get(room, set()))
        msg = json.dumps({"event": event, "data": data})
        delivered = 0
        for s in conns:
            try:
                await s.send_text(msg)
                delivered += 1
            except Exception as e:
                # Connection is closing; its own handler removes it from the room
                logger.warning("[pubsub] drop %s to room %s: %r", event, room, e)
        return delivered

# Process-wide registry shared by the socket router and the dispatcher
channel = Channel()
