"""
Connection Hub - in-process websocket sessions grouped by user channel.

Every authenticated socket joins exactly one channel, user:<employeeId>.
A user can hold several sessions at once (messenger page, header badge,
sidebar badge, other tabs); an event is sent to all of them. Delivery is
best effort: sessions that fail on send are dropped and events for a
channel with no sessions are discarded.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import uuid4

from portal_chat.domain.ports.channel_publisher import ChannelPublisher
from portal_chat.observability.metrics import ACTIVE_SOCKETS

logger = logging.getLogger(__name__)


class SocketLike(Protocol):
    async def send_json(self, data: Any) -> None: ...


@dataclass
class ChannelSession:
    """One joined websocket."""

    websocket: SocketLike
    channel: str
    session_id: str = field(default_factory=lambda: uuid4().hex)
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def envelope(event: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"event": event, "data": payload}


class ConnectionHub(ChannelPublisher):
    def __init__(self):
        # channel -> session_id -> session
        self._channels: dict[str, dict[str, ChannelSession]] = {}
        self._lock = asyncio.Lock()

    async def join(self, websocket: SocketLike, channel: str) -> ChannelSession:
        session = ChannelSession(websocket=websocket, channel=channel)
        async with self._lock:
            self._channels.setdefault(channel, {})[session.session_id] = session
        ACTIVE_SOCKETS.inc()
        logger.info(f"[Hub] Session {session.session_id} joined {channel}")
        return session

    async def leave(self, session: ChannelSession) -> None:
        async with self._lock:
            sessions = self._channels.get(session.channel)
            if not sessions or sessions.pop(session.session_id, None) is None:
                return
            if not sessions:
                del self._channels[session.channel]
        ACTIVE_SOCKETS.dec()
        logger.info(f"[Hub] Session {session.session_id} left {session.channel}")

    def session_count(self, channel: str) -> int:
        return len(self._channels.get(channel, {}))

    async def deliver(self, channel: str, message: dict[str, Any]) -> int:
        """Send an already-built envelope to local sessions; returns how many got it."""
        sessions = list(self._channels.get(channel, {}).values())
        if not sessions:
            logger.debug(f"[Hub] No sessions on {channel}, dropping {message.get('event')}")
            return 0

        results = await asyncio.gather(
            *(s.websocket.send_json(message) for s in sessions),
            return_exceptions=True,
        )
        delivered = 0
        for session, result in zip(sessions, results):
            if isinstance(result, Exception):
                logger.warning(
                    f"[Hub] Dropping session {session.session_id} on {channel}: {result}"
                )
                await self.leave(session)
            else:
                delivered += 1
        return delivered

    async def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        await self.deliver(channel, envelope(event, payload))
