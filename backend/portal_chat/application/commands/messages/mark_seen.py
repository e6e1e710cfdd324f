"""MarkSeen Command - acknowledge every received message of a conversation."""

import logging
from dataclasses import dataclass

from portal_chat.application.common.access import authorize_conversation
from portal_chat.application.common.interfaces import Command, CommandHandler
from portal_chat.application.common.realtime_notifier import RealtimeNotifier
from portal_chat.domain.entities.conversation import Conversation
from portal_chat.domain.ports.repositories import (
    ConversationRepository,
    EmployeeDirectory,
    MessageRepository,
)
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId

logger = logging.getLogger(__name__)


@dataclass
class MarkSeenResult:
    conversation: Conversation
    marked: int


@dataclass(frozen=True)
class MarkSeenCommand(Command[MarkSeenResult]):
    employee_id: EmployeeId
    conversation_id: ConversationId


class MarkSeenHandler(CommandHandler[MarkSeenResult]):
    def __init__(
        self,
        conv_repo: ConversationRepository,
        msg_repo: MessageRepository,
        directory: EmployeeDirectory,
        notifier: RealtimeNotifier,
    ):
        self.conv_repo = conv_repo
        self.msg_repo = msg_repo
        self.directory = directory
        self.notifier = notifier

    async def execute(self, command: MarkSeenCommand) -> MarkSeenResult:
        await authorize_conversation(
            self.conv_repo,
            self.directory,
            command.employee_id,
            command.conversation_id,
            action="modify",
        )

        marked = await self.msg_repo.mark_seen(
            command.conversation_id, command.employee_id
        )
        conversation = await self.conv_repo.mark_seen(
            command.conversation_id, command.employee_id
        )
        logger.info(
            f"[MarkSeen] {command.employee_id} read {marked} message(s) in {conversation.id}"
        )

        await self.notifier.conversation_seen(conversation, command.employee_id)
        return MarkSeenResult(conversation=conversation, marked=marked)
