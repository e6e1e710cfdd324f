"""
GetThread Query - full ordered history of one conversation.

Both participants are returned with the messages so the client can show
sender names and roles without another directory lookup.
"""

from dataclasses import dataclass, field

from portal_chat.application.common.access import authorize_conversation
from portal_chat.application.common.interfaces import Query, QueryHandler
from portal_chat.domain.entities.conversation import Conversation
from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.entities.message import Message
from portal_chat.domain.ports.repositories import (
    ConversationRepository,
    EmployeeDirectory,
    MessageRepository,
)
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId


@dataclass
class GetThreadResult:
    conversation: Conversation
    messages: list[Message]
    participants: dict[EmployeeId, Employee] = field(default_factory=dict)


@dataclass(frozen=True)
class GetThreadQuery(Query[GetThreadResult]):
    employee_id: EmployeeId
    conversation_id: ConversationId


class GetThreadHandler(QueryHandler[GetThreadResult]):
    def __init__(
        self,
        conv_repo: ConversationRepository,
        msg_repo: MessageRepository,
        directory: EmployeeDirectory,
    ):
        self._conv_repo = conv_repo
        self._msg_repo = msg_repo
        self._directory = directory

    async def execute(self, query: GetThreadQuery) -> GetThreadResult:
        """
        Raises:
            EntityNotFoundError: If conversation doesn't exist or caller is not in it
            AccessDeniedError: If the policy no longer links the two participants
        """
        access = await authorize_conversation(
            self._conv_repo,
            self._directory,
            query.employee_id,
            query.conversation_id,
        )
        messages = await self._msg_repo.list_by_conversation(query.conversation_id)
        return GetThreadResult(
            conversation=access.conversation,
            messages=messages,
            participants={access.me.id: access.me, access.other.id: access.other},
        )
