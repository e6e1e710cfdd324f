"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Is compared by value
- Is immutable (frozen dataclass / enum)
- Validates itself on creation
"""

from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.message_id import MessageId
from portal_chat.domain.value_objects.role import Role

__all__ = [
    "EmployeeId",
    "ConversationId",
    "MessageId",
    "Role",
]
