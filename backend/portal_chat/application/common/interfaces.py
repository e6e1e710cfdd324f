"""
Base interfaces for CQRS pattern.

Usage:
    @dataclass(frozen=True)
    class MarkSeenCommand(Command[MarkSeenResult]):
        employee_id: EmployeeId
        conversation_id: ConversationId

    class MarkSeenHandler(CommandHandler[MarkSeenResult]):
        async def execute(self, command: MarkSeenCommand) -> MarkSeenResult:
            ...
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, TypeVar, Generic

T = TypeVar("T")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Command(ABC, Generic[T]):
    """Base class for write operations"""
    pass

class CommandHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, command: Command[T]) -> T:
        """Execute the command and return a result of type T"""
        ...

class Query(ABC, Generic[T]):
    """Base class for read operations"""
    pass

class QueryHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, query: Query[T]) -> T:
        """Execute the query and return a result of type T"""
        ...
