"""In-process implementations of the domain ports."""

from portal_chat.infrastructure.memory.conversation_repository import (
    DuplicateConversationError,
    InMemoryConversationRepository,
)
from portal_chat.infrastructure.memory.message_repository import (
    InMemoryMessageRepository,
)
from portal_chat.infrastructure.memory.employee_directory import (
    InMemoryEmployeeDirectory,
)
from portal_chat.infrastructure.memory.unit_of_work import InMemoryUnitOfWork

__all__ = [
    "DuplicateConversationError",
    "InMemoryConversationRepository",
    "InMemoryMessageRepository",
    "InMemoryEmployeeDirectory",
    "InMemoryUnitOfWork",
]
