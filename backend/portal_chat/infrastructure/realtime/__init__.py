from portal_chat.infrastructure.realtime.connection_hub import (
    ChannelSession,
    ConnectionHub,
)

__all__ = ["ChannelSession", "ConnectionHub"]
