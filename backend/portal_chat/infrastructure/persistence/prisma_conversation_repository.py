"""
Prisma Conversation Repository Implementation.

Mapping:
- Prisma columns participant_a / participant_b hold the sorted pair, with
  unread_a / unread_b as their counters
- Domain entity: Conversation with participants tuple and unread_counts map

Counter changes are single UPDATE statements ({"increment": 1} / 0) so
concurrent writers in other processes cannot lose an increment.
"""

import logging
from datetime import datetime
from typing import Optional
from prisma import Prisma
from prisma.errors import UniqueViolationError
from prisma.models import Conversation as PrismaConversation
from portal_chat.domain.entities.conversation import Conversation, participant_pair
from portal_chat.domain.exceptions import EntityNotFoundError
from portal_chat.domain.ports.repositories import ConversationRepository
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId

logger = logging.getLogger(__name__)


class PrismaConversationRepository(ConversationRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaConversation) -> Conversation:
        """Map Prisma record to domain entity."""
        a = EmployeeId(record.participant_a)
        b = EmployeeId(record.participant_b)
        return Conversation(
            id=ConversationId(record.id),
            participants=(a, b),
            created_at=record.created_at,
            last_message_at=record.last_message_at,
            last_message_text=record.last_message_text or "",
            last_message_from=(
                EmployeeId(record.last_message_from)
                if record.last_message_from
                else None
            ),
            unread_counts={a: record.unread_a, b: record.unread_b},
        )

    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]:
        record = await self._prisma.conversation.find_unique(
            where={"id": conversation_id.value}
        )
        return self._to_entity(record) if record else None

    async def _find_by_pair(
        self, a: EmployeeId, b: EmployeeId
    ) -> Optional[Conversation]:
        first, second = participant_pair(a, b)
        record = await self._prisma.conversation.find_first(
            where={"participant_a": first.value, "participant_b": second.value}
        )
        return self._to_entity(record) if record else None

    async def get_or_create(
        self, a: EmployeeId, b: EmployeeId, now: datetime
    ) -> Conversation:
        existing = await self._find_by_pair(a, b)
        if existing:
            return existing

        conversation = Conversation.start(a, b, now)
        first, second = conversation.participants
        try:
            record = await self._prisma.conversation.create(
                data={
                    "id": conversation.id.value,
                    "participant_a": first.value,
                    "participant_b": second.value,
                    "created_at": now,
                    "last_message_at": now,
                }
            )
        except UniqueViolationError:
            logger.info(
                f"[ConversationStore] Pair {first}/{second} created concurrently, reloading"
            )
            existing = await self._find_by_pair(a, b)
            if existing is None:
                raise
            return existing

        return self._to_entity(record)

    async def _require(self, conversation_id: ConversationId) -> Conversation:
        conversation = await self.get_by_id(conversation_id)
        if conversation is None:
            raise EntityNotFoundError(f"Conversation {conversation_id} not found")
        return conversation

    @staticmethod
    def _counter_column(conversation: Conversation, employee_id: EmployeeId) -> str:
        if employee_id == conversation.participants[0]:
            return "unread_a"
        if employee_id == conversation.participants[1]:
            return "unread_b"
        raise ValueError(f"{employee_id} is not a participant")

    async def record_send(
        self,
        conversation_id: ConversationId,
        sender: EmployeeId,
        text: str,
        now: datetime,
    ) -> Conversation:
        # Participants never change, so reading them first is race-free
        conversation = await self._require(conversation_id)
        recipient = conversation.other_participant(sender)
        record = await self._prisma.conversation.update(
            where={"id": conversation_id.value},
            data={
                "last_message_at": now,
                "last_message_text": text,
                "last_message_from": sender.value,
                self._counter_column(conversation, sender): 0,
                self._counter_column(conversation, recipient): {"increment": 1},
            },
        )
        return self._to_entity(record)

    async def mark_seen(
        self, conversation_id: ConversationId, reader: EmployeeId
    ) -> Conversation:
        conversation = await self._require(conversation_id)
        record = await self._prisma.conversation.update(
            where={"id": conversation_id.value},
            data={self._counter_column(conversation, reader): 0},
        )
        return self._to_entity(record)

    async def list_for_participant(
        self, employee_id: EmployeeId
    ) -> list[Conversation]:
        records = await self._prisma.conversation.find_many(
            where={
                "OR": [
                    {"participant_a": employee_id.value},
                    {"participant_b": employee_id.value},
                ]
            },
            order={"last_message_at": "desc"},
        )
        return [self._to_entity(record) for record in records]
