"""
GetUnreadSummary Query - totals for the header and sidebar badges.

Only visible conversations with a non-zero counter are listed, newest first.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from portal_chat.application.common.interfaces import Query, QueryHandler
from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.exceptions import EntityNotFoundError
from portal_chat.domain.ports.repositories import (
    ConversationRepository,
    EmployeeDirectory,
)
from portal_chat.domain.services.messaging_policy import can_view
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId


@dataclass
class UnreadItem:
    conversation_id: ConversationId
    unread_count: int
    last_message: str
    last_message_at: datetime
    last_message_from: Optional[EmployeeId]
    sender: Optional[Employee] = None


@dataclass
class UnreadSummary:
    total_unread: int = 0
    items: list[UnreadItem] = field(default_factory=list)


@dataclass(frozen=True)
class GetUnreadSummaryQuery(Query[UnreadSummary]):
    employee_id: EmployeeId


class GetUnreadSummaryHandler(QueryHandler[UnreadSummary]):
    def __init__(
        self,
        conv_repo: ConversationRepository,
        directory: EmployeeDirectory,
    ):
        self._conv_repo = conv_repo
        self._directory = directory

    async def execute(self, query: GetUnreadSummaryQuery) -> UnreadSummary:
        me = await self._directory.get_by_id(query.employee_id)
        if me is None:
            raise EntityNotFoundError("Employee not found")

        conversations = await self._conv_repo.list_for_participant(me.id)
        others = await self._directory.get_many(
            c.other_participant(me.id) for c in conversations
        )

        summary = UnreadSummary()
        for conversation in conversations:
            other = others.get(conversation.other_participant(me.id))
            if other is None or not can_view(me, other):
                continue
            unread = conversation.unread_for(me.id)
            if not unread:
                continue
            summary.total_unread += unread
            summary.items.append(
                UnreadItem(
                    conversation_id=conversation.id,
                    unread_count=unread,
                    last_message=conversation.last_message_text,
                    last_message_at=conversation.last_message_at,
                    last_message_from=conversation.last_message_from,
                    sender={me.id: me, other.id: other}.get(
                        conversation.last_message_from
                    ),
                )
            )

        summary.items.sort(key=lambda item: item.last_message_at, reverse=True)
        return summary
