"""
In-memory Conversation Repository.

Used for development and tests (STORAGE_BACKEND=memory). Mirrors the
database contract: the normalized participant pair is a unique key, reads
return detached copies, and counter changes happen under a lock in one step.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from portal_chat.domain.entities.conversation import Conversation, participant_pair
from portal_chat.domain.exceptions import EntityNotFoundError
from portal_chat.domain.ports.repositories import ConversationRepository
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId

logger = logging.getLogger(__name__)


class DuplicateConversationError(Exception):
    """Raised when a second conversation is inserted for an existing pair."""


def _detached(conversation: Conversation) -> Conversation:
    return replace(conversation, unread_counts=dict(conversation.unread_counts))


class InMemoryConversationRepository(ConversationRepository):
    def __init__(self):
        self._by_id: dict[str, Conversation] = {}
        self._by_pair: dict[tuple[EmployeeId, EmployeeId], str] = {}
        self._lock = asyncio.Lock()

    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]:
        conversation = self._by_id.get(conversation_id.value)
        return _detached(conversation) if conversation else None

    async def _find_by_pair(
        self, a: EmployeeId, b: EmployeeId
    ) -> Optional[Conversation]:
        conversation_id = self._by_pair.get(participant_pair(a, b))
        if conversation_id is None:
            return None
        return _detached(self._by_id[conversation_id])

    async def _insert(self, conversation: Conversation) -> None:
        async with self._lock:
            if conversation.participants in self._by_pair:
                raise DuplicateConversationError(
                    f"Conversation already exists for {conversation.participants}"
                )
            self._by_id[conversation.id.value] = _detached(conversation)
            self._by_pair[conversation.participants] = conversation.id.value

    async def get_or_create(
        self, a: EmployeeId, b: EmployeeId, now: datetime
    ) -> Conversation:
        existing = await self._find_by_pair(a, b)
        if existing:
            return existing

        conversation = Conversation.start(a, b, now)
        try:
            await self._insert(conversation)
        except DuplicateConversationError:
            # Lost the first-contact race; the winner's record is the one to use
            existing = await self._find_by_pair(a, b)
            if existing is None:
                raise
            return existing

        logger.info(f"[ConversationStore] Created conversation {conversation.id}")
        return _detached(conversation)

    async def record_send(
        self,
        conversation_id: ConversationId,
        sender: EmployeeId,
        text: str,
        now: datetime,
    ) -> Conversation:
        async with self._lock:
            conversation = self._by_id.get(conversation_id.value)
            if conversation is None:
                raise EntityNotFoundError(f"Conversation {conversation_id} not found")
            conversation.record_send(sender, text, now)
            return _detached(conversation)

    async def mark_seen(
        self, conversation_id: ConversationId, reader: EmployeeId
    ) -> Conversation:
        async with self._lock:
            conversation = self._by_id.get(conversation_id.value)
            if conversation is None:
                raise EntityNotFoundError(f"Conversation {conversation_id} not found")
            conversation.mark_seen(reader)
            return _detached(conversation)

    async def list_for_participant(
        self, employee_id: EmployeeId
    ) -> list[Conversation]:
        conversations = [
            _detached(c) for c in self._by_id.values() if c.has_participant(employee_id)
        ]
        conversations.sort(key=lambda c: c.last_message_at, reverse=True)
        return conversations
