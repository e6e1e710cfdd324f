"""Shared gate for reading or acknowledging a conversation."""

from dataclasses import dataclass

from portal_chat.domain.entities.conversation import Conversation
from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.exceptions import AccessDeniedError, EntityNotFoundError
from portal_chat.domain.ports.repositories import (
    ConversationRepository,
    EmployeeDirectory,
)
from portal_chat.domain.services.messaging_policy import can_view
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId


@dataclass
class ConversationAccess:
    conversation: Conversation
    me: Employee
    other: Employee


async def authorize_conversation(
    conv_repo: ConversationRepository,
    directory: EmployeeDirectory,
    employee_id: EmployeeId,
    conversation_id: ConversationId,
    action: str = "view",
) -> ConversationAccess:
    """
    Raises:
        EntityNotFoundError: conversation missing or caller not a participant
        AccessDeniedError: participants unresolvable or the policy denies both directions
    """
    conversation = await conv_repo.get_by_id(conversation_id)
    if conversation is None or not conversation.has_participant(employee_id):
        raise EntityNotFoundError("Conversation not found")

    other_id = conversation.other_participant(employee_id)
    employees = await directory.get_many([employee_id, other_id])
    me = employees.get(employee_id)
    other = employees.get(other_id)

    # Assignment data is re-read on every access, so a reassignment revokes visibility
    if me is None or other is None or not can_view(me, other):
        raise AccessDeniedError(f"You are not allowed to {action} this conversation.")

    return ConversationAccess(conversation=conversation, me=me, other=other)
