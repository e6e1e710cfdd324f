from portal_chat.domain.services.messaging_policy import can_message, can_view

__all__ = ["can_message", "can_view"]
