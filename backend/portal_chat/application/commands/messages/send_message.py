"""
SendMessage Command - deliver a 1:1 message between two employees.

Handler steps:
1. Rate limit the sender
2. Resolve both employees
3. Check the messaging policy (sender -> recipient only)
4. Sanitize the text
5. Under the conversation lock: get-or-create, then append + record_send
   in one unit of work
6. Fan out message:new and conversation:updated
"""

import logging
from dataclasses import dataclass

from portal_chat.application.common.interfaces import (
    Clock,
    Command,
    CommandHandler,
    utc_now,
)
from portal_chat.application.common.realtime_notifier import RealtimeNotifier
from portal_chat.config.settings import Config
from portal_chat.domain.entities.conversation import Conversation
from portal_chat.domain.entities.message import Message
from portal_chat.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    EntityNotFoundError,
    RateLimitExceededError,
)
from portal_chat.domain.ports.repositories import (
    ConversationRepository,
    EmployeeDirectory,
)
from portal_chat.domain.ports.unit_of_work import UnitOfWork
from portal_chat.domain.services.messaging_policy import can_message
from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.infrastructure.concurrency import ConversationLocks
from portal_chat.infrastructure.rate_limit import SendRateLimiter
from portal_chat.observability.metrics import MESSAGES_SENT_TOTAL, record_send_rejected
from portal_chat.utils.sanitizer import sanitize_text

logger = logging.getLogger(__name__)


@dataclass
class SendMessageResult:
    message: Message
    conversation: Conversation


@dataclass(frozen=True)
class SendMessageCommand(Command[SendMessageResult]):
    sender_id: EmployeeId
    recipient_id: EmployeeId
    text: str


class SendMessageHandler(CommandHandler[SendMessageResult]):
    def __init__(
        self,
        conv_repo: ConversationRepository,
        unit_of_work: UnitOfWork,
        directory: EmployeeDirectory,
        rate_limiter: SendRateLimiter,
        locks: ConversationLocks,
        notifier: RealtimeNotifier,
        clock: Clock = utc_now,
        max_length: int = Config.MESSAGE_MAX_LENGTH,
    ):
        self.conv_repo = conv_repo
        self.unit_of_work = unit_of_work
        self.directory = directory
        self.rate_limiter = rate_limiter
        self.locks = locks
        self.notifier = notifier
        self.clock = clock
        self.max_length = max_length

    async def execute(self, command: SendMessageCommand) -> SendMessageResult:
        """
        Raises:
            RateLimitExceededError: sender is over quota
            EntityNotFoundError: sender or recipient unknown
            AccessDeniedError: policy denies sender -> recipient
            DomainValidationError: text empty after sanitization or too long
        """
        sender_id, recipient_id = command.sender_id, command.recipient_id

        if not self.rate_limiter.try_admit(sender_id):
            record_send_rejected("rate_limited")
            raise RateLimitExceededError()

        employees = await self.directory.get_many([sender_id, recipient_id])
        sender = employees.get(sender_id)
        recipient = employees.get(recipient_id)
        if sender is None or recipient is None:
            record_send_rejected("not_found")
            raise EntityNotFoundError("Employee not found")

        if not can_message(sender, recipient):
            record_send_rejected("forbidden")
            raise AccessDeniedError(
                "You are not allowed to message this user based on role and assignment rules."
            )

        text = sanitize_text(command.text)
        if not text:
            record_send_rejected("invalid_input")
            raise DomainValidationError("Message text is required")
        if len(text) > self.max_length:
            record_send_rejected("invalid_input")
            raise DomainValidationError(
                f"Message text exceeds {self.max_length} characters"
            )

        async with self.locks.for_pair(sender_id, recipient_id):
            now = self.clock()
            # An empty conversation row is harmless, so it is created outside
            # the transaction where a concurrent insert can be retried
            conversation = await self.conv_repo.get_or_create(
                sender_id, recipient_id, now
            )
            async with self.unit_of_work.begin() as tx:
                message = await tx.messages.append(
                    Message.create(
                        conversation_id=conversation.id,
                        sender_id=sender_id,
                        recipient_id=recipient_id,
                        text=text,
                        now=now,
                    )
                )
                conversation = await tx.conversations.record_send(
                    conversation.id, sender_id, text, now
                )

        MESSAGES_SENT_TOTAL.inc()
        logger.info(
            f"[Send] {sender_id} -> {recipient_id} in conversation {conversation.id}"
        )

        await self.notifier.message_sent(message, conversation)
        return SendMessageResult(message=message, conversation=conversation)
