import json
import logging

from fastapi import APIRouter, WebSocket, status
from starlette.websockets import WebSocketDisconnect

from app.api.v1.deps import extract_token, resolve_user
from app.core.errors import AuthenticationError

logger = logging.getLogger("uvicorn.error")

router = APIRouter()

@router.websocket("/ws/notifications")
async def ws_notifications(ws: WebSocket):
    """
    WebSocket endpoint for per-user realtime notifications.

    The caller authenticates with `?token=<jwt>` (or the accessToken
    cookie). The socket is subscribed to the caller's topic right after it
    is accepted and unsubscribed when it closes, so the subscription never
    outlives the connection.

    Message flow:
    1. Client connects with a token
    2. Server sends: {"type": "ready", "userId": "..."}
    3. Server pushes {"event": "...", "data": {...}} as events happen
    4. Client may send {"type": "ping"}; server answers {"type": "pong"}
    """
    token = ws.query_params.get("token") or extract_token(None, ws.cookies)
    try:
        user = await resolve_user(token)
    except AuthenticationError as e:
        logger.info("[ws_notifications] rejected connection: %s", e.code)
        await ws.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    channel = ws.app.state.channel
    await ws.accept()
    await channel.subscribe(user.id, ws)
    logger.info("[ws_notifications] subscribed user=%s", user.id)
    try:
        await ws.send_text(json.dumps({"type": "ready", "userId": str(user.id)}))
        while True:
            frame = await ws.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                # binary frames carry nothing for this endpoint
                continue
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if isinstance(msg, dict) and msg.get("type") == "ping":
                await ws.send_text(json.dumps({"type": "pong"}))
    except WebSocketDisconnect:
        pass
    finally:
        channel.unsubscribe(user.id, ws)
        logger.info("[ws_notifications] unsubscribed user=%s", user.id)
