"""
In-memory Unit of Work.

Messages appended inside a transaction are staged and only written to the
log once the block exits without error, so a failed metadata update leaves
no orphan message behind. The conversation store's record_send is a single
step under its own lock and is the last write of a send.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import AsyncIterator

from portal_chat.domain.entities.message import Message
from portal_chat.domain.ports.repositories import MessageRepository
from portal_chat.domain.ports.unit_of_work import TransactionScope, UnitOfWork
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.infrastructure.memory.conversation_repository import (
    InMemoryConversationRepository,
)
from portal_chat.infrastructure.memory.message_repository import (
    InMemoryMessageRepository,
)

logger = logging.getLogger(__name__)


class _StagedMessages(MessageRepository):
    """Buffers appends; reads see only committed messages."""

    def __init__(self, log: InMemoryMessageRepository):
        self._log = log
        self.staged: list[Message] = []

    async def append(self, message: Message) -> Message:
        self.staged.append(replace(message))
        return replace(message)

    async def list_by_conversation(
        self, conversation_id: ConversationId
    ) -> list[Message]:
        return await self._log.list_by_conversation(conversation_id)

    async def mark_seen(
        self, conversation_id: ConversationId, recipient_id: EmployeeId
    ) -> int:
        return await self._log.mark_seen(conversation_id, recipient_id)

    async def commit(self) -> None:
        for message in self.staged:
            await self._log.append(message)
        self.staged.clear()


class InMemoryUnitOfWork(UnitOfWork):
    def __init__(
        self,
        conversations: InMemoryConversationRepository,
        messages: InMemoryMessageRepository,
    ):
        self._conversations = conversations
        self._messages = messages

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[TransactionScope]:
        staged = _StagedMessages(self._messages)
        try:
            yield TransactionScope(conversations=self._conversations, messages=staged)
        except BaseException:
            if staged.staged:
                logger.warning(
                    f"[UnitOfWork] Discarding {len(staged.staged)} staged message(s)"
                )
            raise
        await staged.commit()
