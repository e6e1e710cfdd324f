"""
Realtime websocket endpoint.

Clients connect to /ws?token=<jwt> (or send an Authorization: Bearer header).
The socket joins the user:<employeeId> channel and receives
    {"event": "message:new" | "conversation:updated" | "message:seen", "data": {...}}
Connections without a valid token are closed with 1008 before joining.
"""

import logging
from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from portal_chat.domain.ports.channel_publisher import user_channel
from portal_chat.infrastructure.realtime import ConnectionHub
from portal_chat.presentation.dependencies.auth import (
    InvalidIdentityError,
    decode_identity,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def _token_from(websocket: WebSocket) -> Optional[str]:
    token = websocket.query_params.get("token")
    if token:
        return token
    header = websocket.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        return header.split(" ", 1)[1].strip()
    return None


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket):
    try:
        identity = decode_identity(_token_from(websocket))
    except InvalidIdentityError as e:
        logger.info(f"[Socket] Refused connection: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(e))
        return

    hub: ConnectionHub = await websocket.app.state.dishka_container.get(ConnectionHub)
    channel = user_channel(identity.employee_id)

    await websocket.accept()
    session = await hub.join(websocket, channel)
    role = identity.role.value if identity.role else "unknown"
    logger.info(f"[Socket] Connected {channel} role: {role}")
    try:
        await websocket.send_json({"event": "connected", "data": {"channel": channel}})
        while True:
            frame = await websocket.receive_text()
            if frame.strip().lower() == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        logger.info(f"[Socket] Disconnected {channel}")
    finally:
        await hub.leave(session)
