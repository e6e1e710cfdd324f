"""
Message Entity - a single delivered chat message.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime

from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.domain.value_objects.message_id import MessageId


@dataclass
class Message:
    id: MessageId
    conversation_id: ConversationId
    sender_id: EmployeeId
    recipient_id: EmployeeId
    text: str
    created_at: datetime
    delivered: bool = True
    seen: bool = False

    def __post_init__(self):
        if not self.text:
            raise ValueError("Message text cannot be empty")
        if self.sender_id == self.recipient_id:
            raise ValueError("Sender and recipient must differ")

    @classmethod
    def create(
        cls,
        conversation_id: ConversationId,
        sender_id: EmployeeId,
        recipient_id: EmployeeId,
        text: str,
        now: datetime,
    ) -> Message:
        """Factory method to create a new Message with a generated ID."""
        return cls(
            id=MessageId.generate(),
            conversation_id=conversation_id,
            sender_id=sender_id,
            recipient_id=recipient_id,
            text=text,
            created_at=now,
        )

    def mark_seen(self) -> None:
        self.seen = True
