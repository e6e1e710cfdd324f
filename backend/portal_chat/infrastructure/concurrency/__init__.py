from portal_chat.infrastructure.concurrency.conversation_locks import ConversationLocks

__all__ = ["ConversationLocks"]
