"""
Conversation Entity - a 1:1 thread between two employees.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId


def participant_pair(a: EmployeeId, b: EmployeeId) -> tuple[EmployeeId, EmployeeId]:
    """Normalized (sorted) key of an unordered participant pair."""
    if a == b:
        raise ValueError("A conversation needs two distinct participants")
    return (a, b) if a.value < b.value else (b, a)


@dataclass
class Conversation:
    id: ConversationId
    participants: tuple[EmployeeId, EmployeeId]
    created_at: datetime
    last_message_at: datetime
    last_message_text: str = ""
    last_message_from: Optional[EmployeeId] = None
    unread_counts: dict[EmployeeId, int] = field(default_factory=dict)

    def __post_init__(self):
        self.participants = participant_pair(*self.participants)
        for participant in self.participants:
            self.unread_counts.setdefault(participant, 0)
        if set(self.unread_counts) != set(self.participants):
            raise ValueError("Unread counts must be keyed by the participants only")

    @classmethod
    def start(cls, a: EmployeeId, b: EmployeeId, now: datetime) -> Conversation:
        """Factory for a fresh conversation with both counters at zero."""
        return cls(
            id=ConversationId.generate(),
            participants=participant_pair(a, b),
            created_at=now,
            last_message_at=now,
        )

    def has_participant(self, employee_id: EmployeeId) -> bool:
        return employee_id in self.participants

    def other_participant(self, employee_id: EmployeeId) -> EmployeeId:
        if not self.has_participant(employee_id):
            raise ValueError(f"{employee_id} is not a participant")
        first, second = self.participants
        return second if employee_id == first else first

    def unread_for(self, employee_id: EmployeeId) -> int:
        return self.unread_counts.get(employee_id, 0)

    def record_send(self, sender: EmployeeId, text: str, now: datetime) -> None:
        recipient = self.other_participant(sender)
        self.last_message_at = now
        self.last_message_text = text
        self.last_message_from = sender
        self.unread_counts[sender] = 0
        self.unread_counts[recipient] = self.unread_for(recipient) + 1

    def mark_seen(self, reader: EmployeeId) -> None:
        if not self.has_participant(reader):
            raise ValueError(f"{reader} is not a participant")
        self.unread_counts[reader] = 0

    def unread_counts_payload(self) -> dict[str, int]:
        return {str(k): v for k, v in self.unread_counts.items()}
