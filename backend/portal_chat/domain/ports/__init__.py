from portal_chat.domain.ports.channel_publisher import (
    ChannelPublisher,
    user_channel,
)
from portal_chat.domain.ports.unit_of_work import TransactionScope, UnitOfWork

__all__ = ["ChannelPublisher", "user_channel", "TransactionScope", "UnitOfWork"]
