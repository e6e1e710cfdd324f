import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

# Add backend directory to path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + "/.."))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from fastapi.testclient import TestClient

from jwt_generation import generate_jwt_token
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
from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.ports.channel_publisher import ChannelPublisher
from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.fastapi_app import create_fastapi_app
from portal_chat.infrastructure.concurrency import ConversationLocks
from portal_chat.infrastructure.memory import (
    InMemoryConversationRepository,
    InMemoryEmployeeDirectory,
    InMemoryMessageRepository,
    InMemoryUnitOfWork,
)
from portal_chat.infrastructure.rate_limit import SendRateLimiter
from portal_chat.setup.ioc.container import AppProvider, create_container

DIRECTOR = "dir-1"
HR = "hr-1"
OTHER_HR = "hr-2"
PM = "pm-1"
EMPLOYEE = "emp-1"
OTHER_EMPLOYEE = "emp-2"
UNASSIGNED = "emp-3"

EMPLOYEE_RECORDS = [
    {"id": DIRECTOR, "name": "Dana Director", "role": "Director"},
    {"id": HR, "name": "Harper Reyes", "role": "hr"},
    {"id": OTHER_HR, "name": "Hollis Grant", "role": "hr"},
    {"id": PM, "name": "Priya Mehta", "role": "project managers"},
    {
        "id": EMPLOYEE,
        "name": "Evan Brooks",
        "role": "employee",
        "assignedHr": HR,
        "assignedPm": PM,
    },
    {"id": OTHER_EMPLOYEE, "name": "Elena Ortiz", "role": "employee", "assignedHr": OTHER_HR},
    {"id": UNASSIGNED, "name": "Eli Novak", "role": "employee"},
]


def eid(value: str) -> EmployeeId:
    return EmployeeId(value)


class RecordingPublisher(ChannelPublisher):
    """Captures published events instead of pushing them to sockets."""

    def __init__(self):
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    async def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        self.events.append((channel, event, payload))

    def for_channel(self, channel: str) -> list[tuple[str, dict[str, Any]]]:
        return [(event, payload) for ch, event, payload in self.events if ch == channel]


class FailingPublisher(ChannelPublisher):
    async def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        raise ConnectionError("socket layer down")


class FakeClock:
    """Manually advanced clock for message timestamps."""

    def __init__(self):
        self.current = datetime(2025, 1, 27, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@dataclass
class Messaging:
    """Handlers wired against in-memory adapters, like the DI container does."""

    directory: InMemoryEmployeeDirectory
    conversations: InMemoryConversationRepository
    messages: InMemoryMessageRepository
    publisher: ChannelPublisher
    clock: FakeClock
    rate_limiter: SendRateLimiter
    locks: ConversationLocks = field(default_factory=ConversationLocks)

    def __post_init__(self):
        self.rewire()

    def rewire(self):
        """Rebuild the handlers after swapping an adapter."""
        notifier = RealtimeNotifier(self.publisher)
        self.send = SendMessageHandler(
            conv_repo=self.conversations,
            unit_of_work=InMemoryUnitOfWork(self.conversations, self.messages),
            directory=self.directory,
            rate_limiter=self.rate_limiter,
            locks=self.locks,
            notifier=notifier,
            clock=self.clock.now,
        )
        self.mark_seen = MarkSeenHandler(
            self.conversations, self.messages, self.directory, notifier
        )
        self.contacts = ListContactsHandler(self.conversations, self.directory)
        self.thread = GetThreadHandler(self.conversations, self.messages, self.directory)
        self.unread = GetUnreadSummaryHandler(self.conversations, self.directory)


@pytest.fixture()
def directory():
    return InMemoryEmployeeDirectory.from_records(EMPLOYEE_RECORDS)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def publisher():
    return RecordingPublisher()


@pytest.fixture()
def messaging(directory, publisher, clock):
    return Messaging(
        directory=directory,
        conversations=InMemoryConversationRepository(),
        messages=InMemoryMessageRepository(),
        publisher=publisher,
        clock=clock,
        rate_limiter=SendRateLimiter(max_count=30, window_seconds=60),
    )


def reassign(directory: InMemoryEmployeeDirectory, employee_id: str, **changes) -> None:
    """Replace a directory record, e.g. to drop an assignment link."""
    record = dict(next(r for r in EMPLOYEE_RECORDS if r["id"] == employee_id))
    record.update(changes)
    directory.upsert(
        Employee.from_record(
            id=record["id"],
            role=record["role"],
            name=record.get("name"),
            assigned_hr=record.get("assignedHr"),
            assigned_pm=record.get("assignedPm"),
        )
    )


@pytest.fixture()
def app(directory):
    """Create and configure a new FastAPI app instance for each test."""
    provider = AppProvider(
        directory=directory, storage_backend="memory", realtime_backend="local"
    )
    return create_fastapi_app(create_container(provider))


@pytest.fixture()
def client(app):
    """A test client for the FastAPI app (runs lifespan)."""
    with TestClient(app) as test_client:
        yield test_client


def auth_headers_for(employee_id: str, role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {generate_jwt_token(employee_id, role)}"}


@pytest.fixture()
def auth_headers():
    """Authentication headers with valid JWT token."""
    return auth_headers_for(EMPLOYEE, "employee")
