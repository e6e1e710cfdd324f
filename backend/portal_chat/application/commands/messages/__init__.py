"""Message commands."""

from .send_message import SendMessageCommand, SendMessageHandler, SendMessageResult
from .mark_seen import MarkSeenCommand, MarkSeenHandler, MarkSeenResult

__all__ = [
    "SendMessageCommand",
    "SendMessageHandler",
    "SendMessageResult",
    "MarkSeenCommand",
    "MarkSeenHandler",
    "MarkSeenResult",
]
