"""
Conversation Repository Port - Interface for conversation persistence.
Implementations:
  portal_chat/infrastructure/memory/conversation_repository.py
  portal_chat/infrastructure/persistence/prisma_conversation_repository.py
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from portal_chat.domain.entities.conversation import Conversation
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId


class ConversationRepository(ABC):
    @abstractmethod
    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]: ...

    @abstractmethod
    async def get_or_create(
        self, a: EmployeeId, b: EmployeeId, now: datetime
    ) -> Conversation:
        """Return the single conversation of the unordered pair, creating it if needed."""
        ...

    @abstractmethod
    async def record_send(
        self,
        conversation_id: ConversationId,
        sender: EmployeeId,
        text: str,
        now: datetime,
    ) -> Conversation:
        """Update last-message metadata, zero the sender's and bump the recipient's counter."""
        ...

    @abstractmethod
    async def mark_seen(
        self, conversation_id: ConversationId, reader: EmployeeId
    ) -> Conversation: ...

    @abstractmethod
    async def list_for_participant(
        self, employee_id: EmployeeId
    ) -> list[Conversation]:
        """Conversations of an employee, most recent message first."""
        ...
