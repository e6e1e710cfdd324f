"""
ENTITIES - Business objects with identity

Pure Python dataclasses (no ORM, no Pydantic).
"""

from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.entities.conversation import Conversation, participant_pair
from portal_chat.domain.entities.message import Message

__all__ = [
    "Employee",
    "Conversation",
    "Message",
    "participant_pair",
]
