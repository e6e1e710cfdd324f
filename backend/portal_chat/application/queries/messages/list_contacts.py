"""
ListContacts Query - the messenger's contact list.

One entry per conversation of the caller, most recent first. Conversations
whose other participant is no longer reachable under the current role and
assignment data are left out; their history stays in the log.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from portal_chat.application.common.interfaces import Query, QueryHandler
from portal_chat.domain.exceptions import EntityNotFoundError
from portal_chat.domain.ports.repositories import (
    ConversationRepository,
    EmployeeDirectory,
)
from portal_chat.domain.services.messaging_policy import can_view
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId


@dataclass
class ContactItem:
    conversation_id: ConversationId
    other_employee_id: EmployeeId
    other_name: str
    other_role: str
    last_message: str
    last_message_at: datetime
    last_message_from: Optional[EmployeeId]
    unread_count: int


@dataclass(frozen=True)
class ListContactsQuery(Query[list[ContactItem]]):
    employee_id: EmployeeId


class ListContactsHandler(QueryHandler[list[ContactItem]]):
    def __init__(
        self,
        conv_repo: ConversationRepository,
        directory: EmployeeDirectory,
    ):
        self._conv_repo = conv_repo
        self._directory = directory

    async def execute(self, query: ListContactsQuery) -> list[ContactItem]:
        me = await self._directory.get_by_id(query.employee_id)
        if me is None:
            raise EntityNotFoundError("Employee not found")

        conversations = await self._conv_repo.list_for_participant(me.id)
        others = await self._directory.get_many(
            c.other_participant(me.id) for c in conversations
        )

        contacts = []
        for conversation in conversations:
            other = others.get(conversation.other_participant(me.id))
            if other is None or not can_view(me, other):
                continue
            contacts.append(
                ContactItem(
                    conversation_id=conversation.id,
                    other_employee_id=other.id,
                    other_name=other.name,
                    other_role=other.role_label,
                    last_message=conversation.last_message_text,
                    last_message_at=conversation.last_message_at,
                    last_message_from=conversation.last_message_from,
                    unread_count=conversation.unread_for(me.id),
                )
            )
        return contacts
