"""
Redis pub/sub bridge for user channels.

With several API processes a user's sockets may live on any of them.
RedisChannelPublisher publishes every event to the Redis channel of the same
name; RedisChannelRelay runs in each process, pattern-subscribes to user:*
and hands envelopes to the local ConnectionHub.
"""

import asyncio
import json
import logging
from typing import Any, Optional, TYPE_CHECKING

from portal_chat.domain.ports.channel_publisher import (
    ChannelPublisher,
    USER_CHANNEL_PREFIX,
)
from portal_chat.infrastructure.realtime.connection_hub import ConnectionHub, envelope

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisChannelPublisher(ChannelPublisher):
    def __init__(self, redis: "Redis"):
        self._redis = redis

    async def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        receivers = await self._redis.publish(
            channel, json.dumps(envelope(event, payload), default=str)
        )
        logger.debug(f"[RedisPublisher] {event} on {channel} -> {receivers} processes")


class RedisChannelRelay:
    """
    Forwards Redis user-channel messages to the local hub.

    A dropped subscription (Redis restart, network error) is logged and
    re-established with exponential backoff until stop() is called.
    """

    PATTERN = f"{USER_CHANNEL_PREFIX}*"

    def __init__(
        self,
        redis: "Redis",
        hub: ConnectionHub,
        backoff: float = 0.5,
        max_backoff: float = 30.0,
    ):
        self._redis = redis
        self._hub = hub
        self._initial_backoff = backoff
        self._max_backoff = max_backoff
        self._backoff = backoff
        self._task: Optional[asyncio.Task] = None

    async def handle(self, raw: dict[str, Any]) -> None:
        """Process one pub/sub message as returned by redis-py."""
        if raw.get("type") != "pmessage":
            return
        channel = raw.get("channel")
        try:
            message = json.loads(raw.get("data") or "")
        except (TypeError, ValueError):
            logger.warning(f"[RedisRelay] Ignoring malformed payload on {channel}")
            return
        await self._hub.deliver(channel, message)

    async def _listen(self) -> None:
        pubsub = self._redis.pubsub()
        try:
            await pubsub.psubscribe(self.PATTERN)
            logger.info(f"[RedisRelay] Subscribed to {self.PATTERN}")
            self._backoff = self._initial_backoff
            async for raw in pubsub.listen():
                await self.handle(raw)
        finally:
            await pubsub.aclose()

    async def _run(self) -> None:
        while True:
            try:
                await self._listen()
                logger.warning("[RedisRelay] Subscription ended, resubscribing")
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(
                    f"[RedisRelay] Subscription failed, retrying in {self._backoff:.2f}s"
                )
            await asyncio.sleep(self._backoff)
            self._backoff = min(self._backoff * 2, self._max_backoff)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("[RedisRelay] Relay task failed")
        logger.info("[RedisRelay] Stopped")
