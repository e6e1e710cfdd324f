"""In-memory append-only message log."""

from dataclasses import replace

from portal_chat.domain.entities.message import Message
from portal_chat.domain.ports.repositories import MessageRepository
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId


class InMemoryMessageRepository(MessageRepository):
    def __init__(self):
        self._by_conversation: dict[str, list[Message]] = {}

    async def append(self, message: Message) -> Message:
        log = self._by_conversation.setdefault(message.conversation_id.value, [])
        log.append(replace(message))
        return replace(message)

    async def list_by_conversation(
        self, conversation_id: ConversationId
    ) -> list[Message]:
        log = self._by_conversation.get(conversation_id.value, [])
        # sorted() is stable, so equal timestamps keep insertion order
        return [replace(m) for m in sorted(log, key=lambda m: m.created_at)]

    async def mark_seen(
        self, conversation_id: ConversationId, recipient_id: EmployeeId
    ) -> int:
        changed = 0
        for message in self._by_conversation.get(conversation_id.value, []):
            if message.recipient_id == recipient_id and not message.seen:
                message.mark_seen()
                changed += 1
        return changed
