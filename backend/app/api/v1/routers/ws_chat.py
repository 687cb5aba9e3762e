from fastapi import APIRouter, WebSocket, status
from starlette.websockets import WebSocketDisconnect
import json
import logging
from app.api.v1.deps import authenticate_websocket
from app.core.errors import AuthenticationError, ChatError
from app.services.dispatcher import Dispatcher

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


async def _send(ws: WebSocket, event: str, data: dict):
    await ws.send_text(json.dumps({"event": event, "data": data}))


async def _handle_frame(ws: WebSocket, dispatcher: Dispatcher, user_id: str, raw: str):
    try:
        frame = json.loads(raw)
    except ValueError:
        await _send(ws, "message_error", {"code": "BAD_EVENT", "message": "Frame is not valid JSON"})
        return
    if not isinstance(frame, dict) or frame.get("event") != "send_message":
        event = frame.get("event") if isinstance(frame, dict) else None
        await _send(ws, "message_error", {"code": "BAD_EVENT", "message": f"Unknown event: {event}"})
        return

    data = frame.get("data")
    client_id = data.get("clientId") if isinstance(data, dict) else None
    try:
        record = await dispatcher.dispatch(user_id, data)
    except ChatError as e:
        await _send(ws, "message_error", {**e.to_dict(), "clientId": client_id})
        return
    await _send(ws, "message_ack", {"clientId": client_id, "message": record})


@router.websocket("/ws/chat")
async def ws_chat(ws: WebSocket):
    """
    Live chat socket.

    Message flow:
    1. Client connects with its access token (?token=..., Authorization
       header or accessToken cookie); a bad token closes the socket with
       1008 before it is accepted
    2. Server joins the connection to the room of its user id and sends:
       {"event": "connected", "data": {"userId": "..."}}
    3. Client sends: {"event": "send_message", "data": {"receiver": "...", "content": "..."}}
    4. Server stores the message, broadcasts {"event": "receive_message", "data": <message>}
       to the receiver's and the sender's rooms, then answers the issuing
       connection with "message_ack", or with "message_error" on failure

    Note:
        Frames from one connection are handled in arrival order. Binary,
        non-JSON and unknown frames get "message_error" with BAD_EVENT and the
        connection stays open. Delivery is
        best effort; clients backfill via GET /api/v1/chat/messages/{id}.
    """
    try:
        user_id = authenticate_websocket(ws)
    except AuthenticationError as e:
        logger.warning("[ws_chat] handshake rejected: %s", e.code)
        await ws.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.code)
        return

    dispatcher: Dispatcher = ws.app.state.dispatcher
    await ws.accept()
    await dispatcher.channel.join(user_id, ws)
    logger.info("[ws_chat] connected user=%s", user_id)
    try:
        await _send(ws, "connected", {"userId": user_id})
        while True:
            frame = await ws.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", status.WS_1000_NORMAL_CLOSURE))
            if frame.get("text") is None:
                await _send(ws, "message_error", {"code": "BAD_EVENT", "message": "Binary frames are not supported"})
                continue
            await _handle_frame(ws, dispatcher, user_id, frame["text"])
    except WebSocketDisconnect:
        logger.info("[ws_chat] disconnected user=%s", user_id)
    except Exception:
        logger.exception("[ws_chat] connection error user=%s", user_id)
    finally:
        dispatcher.channel.leave(user_id, ws)
