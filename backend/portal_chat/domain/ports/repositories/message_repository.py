"""
Message Repository Port - Interface for the append-only message log.
Implementations:
  portal_chat/infrastructure/memory/message_repository.py
  portal_chat/infrastructure/persistence/prisma_message_repository.py
"""

from abc import ABC, abstractmethod

from portal_chat.domain.entities.message import Message
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId


class MessageRepository(ABC):
    @abstractmethod
    async def append(self, message: Message) -> Message: ...

    @abstractmethod
    async def list_by_conversation(
        self, conversation_id: ConversationId
    ) -> list[Message]:
        """Full history, oldest first."""
        ...

    @abstractmethod
    async def mark_seen(
        self, conversation_id: ConversationId, recipient_id: EmployeeId
    ) -> int:
        """Flag every unseen message addressed to recipient_id; returns the count."""
        ...
