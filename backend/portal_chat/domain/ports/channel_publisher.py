"""
Channel Publisher Port - realtime push to per-user channels.
Implementations:
  portal_chat/infrastructure/realtime/connection_hub.py (in-process sockets)
  portal_chat/infrastructure/realtime/redis_publisher.py (Redis pub/sub)
"""

from abc import ABC, abstractmethod
from typing import Any

from portal_chat.domain.value_objects.employee_id import EmployeeId

USER_CHANNEL_PREFIX = "user:"


def user_channel(employee_id: EmployeeId) -> str:
    return f"{USER_CHANNEL_PREFIX}{employee_id.value}"


class ChannelPublisher(ABC):
    @abstractmethod
    async def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        """Deliver an event to every live session of the channel; drop it if none."""
        ...
