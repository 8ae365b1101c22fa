# backend/app/core/pubsub.py
"""
PubSub (Publish-Subscribe) module for realtime notifications.
Provides a per-user channel that services publish domain events onto and
WebSocket connections subscribe to for the duration of their lifetime.
"""
import json
import logging
from typing import Dict, Set

from starlette.websockets import WebSocket

logger = logging.getLogger("uvicorn.error")

# Event names pushed to clients
APPOINTMENT_NEW = "appointment:new"
APPOINTMENT_STATUS = "appointment:status"
HOTLINE_NEW = "hotline:new"
CHAT_MESSAGE = "chat:message"


class Channel:
    """
    Per-user notification channel.

    Architecture:
    - One instance per application, stored on `app.state.channel` and handed
      to routes through a dependency (no module-level instance)
    - The WebSocket router accepts the connection, then subscribes it here;
      it unsubscribes when the connection closes
    - Delivery is best-effort and at-most-once: a failed send is logged and
      the dead socket is dropped, the publisher never sees the error

    Data structure:
    - _topics: Dict[user_id, Set[WebSocket]]
    """
    def __init__(self):
        self._topics: Dict[str, Set[WebSocket]] = {}

    # -------- subscribe / unsubscribe (no accept, only register) --------
    async def subscribe(self, user_id, ws: WebSocket):
        self._topics.setdefault(str(user_id), set()).add(ws)

    def unsubscribe(self, user_id, ws: WebSocket):
        key = str(user_id)
        conns = self._topics.get(key)
        if conns is None:
            return
        conns.discard(ws)
        if not conns:
            self._topics.pop(key, None)

    def subscriber_count(self, user_id) -> int:
        return len(self._topics.get(str(user_id), ()))

    # -------- publish --------
    async def publish(self, user_id, event: str, payload: dict):
        """
        Send `{"event": event, "data": payload}` to every socket of a user.

        Returns:
            Number of sockets the message was delivered to
        """
        key = str(user_id)
        conns = list(self._topics.get(key, set()))
        if not conns:
            return 0
        msg = json.dumps({"event": event, "data": payload})
        delivered = 0
        for s in conns:
            try:
                await s.send_text(msg)
                delivered += 1
            except Exception as e:
                logger.info("[pubsub] dropping dead subscriber user=%s event=%s: %r", key, event, e)
                self.unsubscribe(key, s)
        return delivered
