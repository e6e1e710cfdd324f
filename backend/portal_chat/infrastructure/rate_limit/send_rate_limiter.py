"""
Per-sender fixed-window send limiter.

Window bookkeeping is done by `limits` (the engine under slowapi and
flask-limiter) on its in-memory storage: the window opens on a sender's
first attempt, every attempt counts, and expired windows are dropped by the
storage. State lives in this process only and is lost on restart.
"""

import logging

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter

from portal_chat.config.settings import Config
from portal_chat.domain.value_objects.employee_id import EmployeeId

logger = logging.getLogger(__name__)


class SendRateLimiter:
    NAMESPACE = "chat-send"

    def __init__(
        self,
        max_count: int = Config.MESSAGE_RATE_LIMIT_COUNT,
        window_seconds: float = Config.MESSAGE_RATE_LIMIT_WINDOW_SECONDS,
    ):
        if max_count < 1 or int(window_seconds) < 1:
            raise ValueError("Rate limit needs a positive count and window")
        self._item = RateLimitItemPerSecond(
            max_count, int(window_seconds), namespace=self.NAMESPACE
        )
        self._storage = MemoryStorage()
        self._limiter = FixedWindowRateLimiter(self._storage)

    @property
    def max_count(self) -> int:
        return self._item.amount

    @property
    def window_seconds(self) -> int:
        return self._item.get_expiry()

    def try_admit(self, sender: EmployeeId) -> bool:
        """Count one send for sender; False once the window is full."""
        if self._limiter.hit(self._item, sender.value):
            return True
        logger.info(f"[RateLimit] Rejected send from {sender}")
        return False

    def remaining(self, sender: EmployeeId) -> int:
        return self._limiter.get_window_stats(self._item, sender.value).remaining

    def tracked_senders(self) -> int:
        """Senders with an open window in storage."""
        return len(self._storage.storage)

    def reset(self) -> None:
        self._storage.reset()
