"""
Per-conversation serialization point.

A send appends to the log and updates the conversation counters; two sends
into the same pair must not interleave those steps. Locks are keyed by the
normalized participant pair so first-contact sends from both sides (before a
conversation id exists) share one lock.
"""

import asyncio
import weakref

from portal_chat.domain.entities.conversation import participant_pair
from portal_chat.domain.value_objects.employee_id import EmployeeId


class ConversationLocks:
    def __init__(self):
        # Unused locks are collected once no coroutine holds a reference
        self._locks: "weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def for_pair(self, a: EmployeeId, b: EmployeeId) -> asyncio.Lock:
        first, second = participant_pair(a, b)
        key = (first.value, second.value)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)
