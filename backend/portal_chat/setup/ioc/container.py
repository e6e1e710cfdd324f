"""
Dishka DI Container Setup.

- Registers all dependencies (repositories, directory, realtime, handlers)
- Maps abstract ports to concrete implementations chosen by Config
- Manages lifecycle (Scope.APP = one per process, Scope.REQUEST = per request)

Process-wide state that must outlive a request lives in Scope.APP: the
in-memory stores, the send rate limiter, the conversation locks and the
connection hub.

Flow:
  Container → provides → InMemoryConversationRepository → to → SendMessageHandler
                                    ↓
                     uses ConversationRepository interface
"""

import logging
from typing import AsyncIterator, Optional

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide

from portal_chat.application.commands.messages import (
    MarkSeenHandler,
    SendMessageHandler,
)
from portal_chat.application.common.realtime_notifier import RealtimeNotifier
from portal_chat.application.queries.messages import (
    GetThreadHandler,
    GetUnreadSummaryHandler,
    ListContactsHandler,
)
from portal_chat.config.settings import Config
from portal_chat.domain.ports.channel_publisher import ChannelPublisher
from portal_chat.domain.ports.unit_of_work import UnitOfWork
from portal_chat.domain.ports.repositories import (
    ConversationRepository,
    EmployeeDirectory,
    MessageRepository,
)
from portal_chat.infrastructure.concurrency import ConversationLocks
from portal_chat.infrastructure.memory import (
    InMemoryConversationRepository,
    InMemoryEmployeeDirectory,
    InMemoryMessageRepository,
    InMemoryUnitOfWork,
)
from portal_chat.infrastructure.rate_limit import SendRateLimiter
from portal_chat.infrastructure.realtime import ConnectionHub

logger = logging.getLogger(__name__)


class StorageHandle:
    """Connected Prisma client, or None when running on in-memory storage."""

    def __init__(self, prisma=None):
        self.prisma = prisma


class RedisHandle:
    """Connected Redis client, or None when fan-out stays in-process."""

    def __init__(self, redis=None):
        self.redis = redis


class AppProvider(Provider):
    """
    Application dependency provider.

    Registers all dependencies and their implementations.
    """

    def __init__(
        self,
        directory: Optional[EmployeeDirectory] = None,
        storage_backend: Optional[str] = None,
        realtime_backend: Optional[str] = None,
    ):
        super().__init__()
        self._directory = directory
        self._storage_backend = storage_backend or Config.STORAGE_BACKEND
        self._realtime_backend = realtime_backend or Config.REALTIME_BACKEND

    # ==================== DATABASE ====================

    @provide(scope=Scope.APP)
    async def get_storage(self) -> AsyncIterator[StorageHandle]:
        """
        Provide the Prisma client when STORAGE_BACKEND=prisma.

        The generated client is imported lazily so the in-memory backend runs
        without `prisma generate`.
        """
        if self._storage_backend != "prisma":
            yield StorageHandle()
            return

        from prisma import Prisma

        prisma = Prisma()
        await prisma.connect()
        logger.info("[Storage] Prisma connected")
        yield StorageHandle(prisma)
        await prisma.disconnect()
        logger.info("[Storage] Prisma disconnected")

    # ==================== REDIS ====================

    @provide(scope=Scope.APP)
    async def get_redis(self) -> AsyncIterator[RedisHandle]:
        if self._realtime_backend != "redis":
            yield RedisHandle()
            return

        from portal_chat.infrastructure.cache.redis_client import (
            close_redis_client,
            create_redis_client,
        )

        client = await create_redis_client()
        yield RedisHandle(client)
        await close_redis_client(client)

    # ==================== REPOSITORIES ====================

    @provide(scope=Scope.APP)
    def get_conversation_repository(
        self, storage: StorageHandle
    ) -> ConversationRepository:
        """
        - Return type is ABSTRACT (ConversationRepository)
        - Implementation is CONCRETE (Prisma or in-memory)
        """
        if storage.prisma is not None:
            from portal_chat.infrastructure.persistence.prisma_conversation_repository import (
                PrismaConversationRepository,
            )

            return PrismaConversationRepository(storage.prisma)
        return InMemoryConversationRepository()

    @provide(scope=Scope.APP)
    def get_message_repository(self, storage: StorageHandle) -> MessageRepository:
        if storage.prisma is not None:
            from portal_chat.infrastructure.persistence.prisma_message_repository import (
                PrismaMessageRepository,
            )

            return PrismaMessageRepository(storage.prisma)
        return InMemoryMessageRepository()

    @provide(scope=Scope.APP)
    def get_unit_of_work(
        self,
        storage: StorageHandle,
        conversation_repository: ConversationRepository,
        message_repository: MessageRepository,
    ) -> UnitOfWork:
        if storage.prisma is not None:
            from portal_chat.infrastructure.persistence.prisma_unit_of_work import (
                PrismaUnitOfWork,
            )

            return PrismaUnitOfWork(storage.prisma)
        return InMemoryUnitOfWork(conversation_repository, message_repository)

    @provide(scope=Scope.APP)
    def get_employee_directory(self, storage: StorageHandle) -> EmployeeDirectory:
        if self._directory is not None:
            return self._directory
        if storage.prisma is not None:
            from portal_chat.infrastructure.persistence.prisma_employee_directory import (
                PrismaEmployeeDirectory,
            )

            return PrismaEmployeeDirectory(storage.prisma)
        return InMemoryEmployeeDirectory.from_json_file(Config.EMPLOYEE_DIRECTORY_FILE)

    # ==================== PROCESS-WIDE STATE ====================

    @provide(scope=Scope.APP)
    def get_rate_limiter(self) -> SendRateLimiter:
        return SendRateLimiter(
            max_count=Config.MESSAGE_RATE_LIMIT_COUNT,
            window_seconds=Config.MESSAGE_RATE_LIMIT_WINDOW_SECONDS,
        )

    @provide(scope=Scope.APP)
    def get_conversation_locks(self) -> ConversationLocks:
        return ConversationLocks()

    # ==================== REALTIME ====================

    @provide(scope=Scope.APP)
    def get_connection_hub(self) -> ConnectionHub:
        return ConnectionHub()

    @provide(scope=Scope.APP)
    def get_channel_publisher(
        self, hub: ConnectionHub, redis: RedisHandle
    ) -> ChannelPublisher:
        if redis.redis is not None:
            from portal_chat.infrastructure.realtime.redis_publisher import (
                RedisChannelPublisher,
            )

            return RedisChannelPublisher(redis.redis)
        return hub

    @provide(scope=Scope.APP)
    def get_realtime_notifier(self, publisher: ChannelPublisher) -> RealtimeNotifier:
        return RealtimeNotifier(publisher)

    # ==================== HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_send_message_handler(
        self,
        conversation_repository: ConversationRepository,
        unit_of_work: UnitOfWork,
        directory: EmployeeDirectory,
        rate_limiter: SendRateLimiter,
        locks: ConversationLocks,
        notifier: RealtimeNotifier,
    ) -> SendMessageHandler:
        return SendMessageHandler(
            conv_repo=conversation_repository,
            unit_of_work=unit_of_work,
            directory=directory,
            rate_limiter=rate_limiter,
            locks=locks,
            notifier=notifier,
        )

    @provide(scope=Scope.REQUEST)
    def get_mark_seen_handler(
        self,
        conversation_repository: ConversationRepository,
        message_repository: MessageRepository,
        directory: EmployeeDirectory,
        notifier: RealtimeNotifier,
    ) -> MarkSeenHandler:
        return MarkSeenHandler(
            conv_repo=conversation_repository,
            msg_repo=message_repository,
            directory=directory,
            notifier=notifier,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_contacts_handler(
        self,
        conversation_repository: ConversationRepository,
        directory: EmployeeDirectory,
    ) -> ListContactsHandler:
        return ListContactsHandler(conversation_repository, directory)

    @provide(scope=Scope.REQUEST)
    def get_thread_handler(
        self,
        conversation_repository: ConversationRepository,
        message_repository: MessageRepository,
        directory: EmployeeDirectory,
    ) -> GetThreadHandler:
        return GetThreadHandler(conversation_repository, message_repository, directory)

    @provide(scope=Scope.REQUEST)
    def get_unread_summary_handler(
        self,
        conversation_repository: ConversationRepository,
        directory: EmployeeDirectory,
    ) -> GetUnreadSummaryHandler:
        return GetUnreadSummaryHandler(conversation_repository, directory)


def create_container(provider: Optional[AppProvider] = None) -> AsyncContainer:
    """
    Create and configure the DI container.

    - make_async_container() creates the container with all providers
    - Call this ONCE per app
    """
    return make_async_container(provider or AppProvider())
