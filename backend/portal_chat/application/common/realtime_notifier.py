"""
Realtime notifier - builds chat events and pushes them to user channels.

Events:
    message:new           -> recipient
    conversation:updated  -> both participants on send, the reader on mark-seen
    message:seen          -> the other participant on mark-seen

The message log is the durable record; a failed publish is logged and
counted but never reaches the caller.
"""

import logging
from typing import Any

from portal_chat.domain.entities.conversation import Conversation
from portal_chat.domain.entities.message import Message
from portal_chat.domain.ports.channel_publisher import ChannelPublisher, user_channel
from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.observability.metrics import (
    REALTIME_EVENTS_TOTAL,
    REALTIME_FANOUT_FAILURES_TOTAL,
)

logger = logging.getLogger(__name__)

MESSAGE_NEW = "message:new"
CONVERSATION_UPDATED = "conversation:updated"
MESSAGE_SEEN = "message:seen"


def message_payload(message: Message) -> dict[str, Any]:
    return {
        "_id": message.id.value,
        "conversationId": message.conversation_id.value,
        "from": message.sender_id.value,
        "to": message.recipient_id.value,
        "text": message.text,
        "delivered": message.delivered,
        "seen": message.seen,
        "createdAt": message.created_at.isoformat(),
    }


def conversation_payload(conversation: Conversation) -> dict[str, Any]:
    return {
        "conversationId": conversation.id.value,
        "lastMessageText": conversation.last_message_text,
        "lastMessageAt": conversation.last_message_at.isoformat(),
        "lastMessageFrom": (
            conversation.last_message_from.value
            if conversation.last_message_from
            else None
        ),
        "unreadCounts": conversation.unread_counts_payload(),
    }


class RealtimeNotifier:
    def __init__(self, publisher: ChannelPublisher):
        self._publisher = publisher

    async def _emit(
        self, employee_id: EmployeeId, event: str, payload: dict[str, Any]
    ) -> None:
        channel = user_channel(employee_id)
        try:
            await self._publisher.publish(channel, event, payload)
            REALTIME_EVENTS_TOTAL.labels(event=event).inc()
        except Exception:
            REALTIME_FANOUT_FAILURES_TOTAL.labels(event=event).inc()
            logger.exception(f"[Realtime] Failed to publish {event} to {channel}")

    async def message_sent(self, message: Message, conversation: Conversation) -> None:
        await self._emit(message.recipient_id, MESSAGE_NEW, message_payload(message))
        summary = conversation_payload(conversation)
        await self._emit(message.sender_id, CONVERSATION_UPDATED, summary)
        await self._emit(message.recipient_id, CONVERSATION_UPDATED, summary)

    async def conversation_seen(
        self, conversation: Conversation, reader: EmployeeId
    ) -> None:
        other = conversation.other_participant(reader)
        await self._emit(
            other,
            MESSAGE_SEEN,
            {"conversationId": conversation.id.value, "seenBy": reader.value},
        )
        await self._emit(reader, CONVERSATION_UPDATED, conversation_payload(conversation))
