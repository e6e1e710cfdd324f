"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the domain needs
- Does NOT specify implementation (Prisma, in-memory, ...)

Infrastructure layer provides implementations.
"""

from portal_chat.domain.ports.repositories.conversation_repository import (
    ConversationRepository,
)
from portal_chat.domain.ports.repositories.message_repository import MessageRepository
from portal_chat.domain.ports.repositories.employee_directory import EmployeeDirectory

__all__ = [
    "ConversationRepository",
    "MessageRepository",
    "EmployeeDirectory",
]
