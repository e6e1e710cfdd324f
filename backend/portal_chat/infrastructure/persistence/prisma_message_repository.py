"""
Prisma Message Repository Implementation.

Prisma ChatMessage Model (from prisma/schema.prisma):
    model ChatMessage {
        id              String   @id @default(uuid())
        conversation_id String
        sender_id       String
        recipient_id    String
        text            String
        delivered       Boolean  @default(true)
        seen            Boolean  @default(false)
        created_at      DateTime @default(now())
    }
"""

import logging
from prisma import Prisma
from prisma.models import ChatMessage as PrismaChatMessage
from portal_chat.domain.entities.message import Message
from portal_chat.domain.ports.repositories import MessageRepository
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.domain.value_objects.message_id import MessageId

logger = logging.getLogger(__name__)


class PrismaMessageRepository(MessageRepository):
    """Handles persistence of Message entities to PostgreSQL via Prisma."""

    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaChatMessage) -> Message:
        return Message(
            id=MessageId(record.id),
            conversation_id=ConversationId(record.conversation_id),
            sender_id=EmployeeId(record.sender_id),
            recipient_id=EmployeeId(record.recipient_id),
            text=record.text,
            created_at=record.created_at,
            delivered=record.delivered,
            seen=record.seen,
        )

    async def append(self, message: Message) -> Message:
        record = await self._prisma.chatmessage.create(
            data={
                "id": message.id.value,
                "conversation_id": message.conversation_id.value,
                "sender_id": message.sender_id.value,
                "recipient_id": message.recipient_id.value,
                "text": message.text,
                "delivered": message.delivered,
                "seen": message.seen,
                "created_at": message.created_at,
            }
        )
        return self._to_entity(record)

    async def list_by_conversation(
        self, conversation_id: ConversationId
    ) -> list[Message]:
        records = await self._prisma.chatmessage.find_many(
            where={"conversation_id": conversation_id.value},
            order={"created_at": "asc"},  # Oldest first for chat history
        )
        return [self._to_entity(r) for r in records]

    async def mark_seen(
        self, conversation_id: ConversationId, recipient_id: EmployeeId
    ) -> int:
        return await self._prisma.chatmessage.update_many(
            where={
                "conversation_id": conversation_id.value,
                "recipient_id": recipient_id.value,
                "seen": False,
            },
            data={"seen": True},
        )
