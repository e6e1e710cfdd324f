"""
Unit of Work Port - groups the writes of one send.

Appending a message and moving the conversation metadata (last message,
unread counters) must both succeed or neither may be observable. Writes made
through the repositories of a TransactionScope commit when the `begin()`
block exits normally and are discarded when it raises.

Implementations:
  portal_chat/infrastructure/memory/unit_of_work.py
  portal_chat/infrastructure/persistence/prisma_unit_of_work.py
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncContextManager

from portal_chat.domain.ports.repositories import (
    ConversationRepository,
    MessageRepository,
)


@dataclass
class TransactionScope:
    conversations: ConversationRepository
    messages: MessageRepository


class UnitOfWork(ABC):
    @abstractmethod
    def begin(self) -> AsyncContextManager[TransactionScope]: ...
