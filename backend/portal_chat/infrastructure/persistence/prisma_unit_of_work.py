"""
Prisma Unit of Work.

Runs the message insert and the conversation update of a send inside one
interactive transaction (`prisma.tx()`), so PostgreSQL commits both or
neither, whichever process performs the send.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
from prisma import Prisma
from portal_chat.domain.ports.unit_of_work import TransactionScope, UnitOfWork
from portal_chat.infrastructure.persistence.prisma_conversation_repository import (
    PrismaConversationRepository,
)
from portal_chat.infrastructure.persistence.prisma_message_repository import (
    PrismaMessageRepository,
)


class PrismaUnitOfWork(UnitOfWork):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[TransactionScope]:
        # Leaving the block with an exception rolls the transaction back
        async with self._prisma.tx() as tx:
            yield TransactionScope(
                conversations=PrismaConversationRepository(tx),
                messages=PrismaMessageRepository(tx),
            )
