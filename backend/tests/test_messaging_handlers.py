"""
Tests for the messaging command and query handlers.

Handlers run against in-memory adapters and a recording publisher, so the
realtime side effects of each operation can be asserted directly.
"""

import asyncio
import time

import pytest

from conftest import (
    DIRECTOR,
    EMPLOYEE,
    HR,
    OTHER_EMPLOYEE,
    OTHER_HR,
    PM,
    UNASSIGNED,
    FailingPublisher,
    eid,
    reassign,
)
from portal_chat.application.commands.messages import (
    MarkSeenCommand,
    SendMessageCommand,
)
from portal_chat.application.queries.messages import (
    GetThreadQuery,
    GetUnreadSummaryQuery,
    ListContactsQuery,
)
from portal_chat.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    EntityNotFoundError,
    RateLimitExceededError,
)
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.infrastructure.memory import InMemoryConversationRepository
from portal_chat.infrastructure.rate_limit import SendRateLimiter


def send(messaging, sender, recipient, text="hello"):
    return asyncio.run(
        messaging.send.execute(
            SendMessageCommand(sender_id=eid(sender), recipient_id=eid(recipient), text=text)
        )
    )


def conversation_between(messaging, a, b):
    conversations = asyncio.run(messaging.conversations.list_for_participant(eid(a)))
    return next(c.id for c in conversations if c.has_participant(eid(b)))


def mark_seen(messaging, employee, conversation_id):
    return asyncio.run(
        messaging.mark_seen.execute(
            MarkSeenCommand(employee_id=eid(employee), conversation_id=conversation_id)
        )
    )


def thread(messaging, employee, conversation_id):
    return asyncio.run(
        messaging.thread.execute(
            GetThreadQuery(employee_id=eid(employee), conversation_id=conversation_id)
        )
    )


def contacts(messaging, employee):
    return asyncio.run(messaging.contacts.execute(ListContactsQuery(employee_id=eid(employee))))


def unread(messaging, employee):
    return asyncio.run(
        messaging.unread.execute(GetUnreadSummaryQuery(employee_id=eid(employee)))
    )


class TestSendMessage:
    def test_send_creates_conversation_and_message(self, messaging):
        result = send(messaging, EMPLOYEE, HR, "  Hi HR, quick question\x00 ")

        assert result.message.text == "Hi HR, quick question"
        assert result.message.delivered is True
        assert result.message.seen is False
        assert result.message.conversation_id == result.conversation.id
        assert result.conversation.unread_for(eid(HR)) == 1
        assert result.conversation.unread_for(eid(EMPLOYEE)) == 0
        assert result.conversation.last_message_from == eid(EMPLOYEE)

    def test_send_reuses_conversation_in_both_directions(self, messaging):
        first = send(messaging, EMPLOYEE, HR)
        reply = send(messaging, HR, EMPLOYEE, "reply")

        assert first.conversation.id == reply.conversation.id
        assert reply.conversation.unread_for(eid(EMPLOYEE)) == 1
        assert reply.conversation.unread_for(eid(HR)) == 0

    def test_send_publishes_events(self, messaging, publisher):
        result = send(messaging, EMPLOYEE, HR, "ping")

        recipient_events = publisher.for_channel(f"user:{HR}")
        sender_events = publisher.for_channel(f"user:{EMPLOYEE}")

        assert [e for e, _ in recipient_events] == ["message:new", "conversation:updated"]
        assert [e for e, _ in sender_events] == ["conversation:updated"]

        message = recipient_events[0][1]
        assert message["_id"] == result.message.id.value
        assert message["from"] == EMPLOYEE
        assert message["to"] == HR
        assert message["text"] == "ping"

        summary = sender_events[0][1]
        assert summary["conversationId"] == result.conversation.id.value
        assert summary["lastMessageText"] == "ping"
        assert summary["lastMessageFrom"] == EMPLOYEE
        assert summary["unreadCounts"] == {EMPLOYEE: 0, HR: 1}

    def test_unknown_recipient_is_not_found(self, messaging):
        with pytest.raises(EntityNotFoundError):
            send(messaging, EMPLOYEE, "ghost-1")

    def test_unknown_sender_is_not_found(self, messaging):
        with pytest.raises(EntityNotFoundError):
            send(messaging, "ghost-1", DIRECTOR)

    def test_policy_denial_is_forbidden(self, messaging, publisher):
        with pytest.raises(AccessDeniedError):
            send(messaging, EMPLOYEE, OTHER_HR)
        with pytest.raises(AccessDeniedError):
            send(messaging, EMPLOYEE, OTHER_EMPLOYEE)
        assert publisher.events == []

    def test_empty_text_after_sanitizing_is_invalid(self, messaging):
        with pytest.raises(DomainValidationError):
            send(messaging, EMPLOYEE, HR, " \n\t\x00 ")

    def test_overlong_text_is_invalid(self, messaging):
        with pytest.raises(DomainValidationError):
            send(messaging, EMPLOYEE, HR, "x" * 5001)
        assert send(messaging, EMPLOYEE, HR, "x" * 5000).message.text == "x" * 5000

    def test_rejected_send_leaves_no_trace(self, messaging):
        with pytest.raises(AccessDeniedError):
            send(messaging, HR, OTHER_EMPLOYEE)
        assert asyncio.run(messaging.conversations.list_for_participant(eid(HR))) == []

    def test_rate_limit_rejects_the_31st_send(self, messaging):
        for i in range(30):
            send(messaging, EMPLOYEE, HR, f"message {i}")

        with pytest.raises(RateLimitExceededError):
            send(messaging, EMPLOYEE, HR, "one too many")

        # Another sender is unaffected
        send(messaging, HR, EMPLOYEE, "still fine")

        stored = thread(messaging, HR, conversation_between(messaging, EMPLOYEE, HR))
        assert len(stored.messages) == 31

    def test_rate_limit_admits_again_after_the_window(self, messaging):
        messaging.rate_limiter = SendRateLimiter(max_count=2, window_seconds=1)
        messaging.rewire()

        send(messaging, EMPLOYEE, HR, "one")
        send(messaging, EMPLOYEE, HR, "two")
        with pytest.raises(RateLimitExceededError):
            send(messaging, EMPLOYEE, HR, "three")

        time.sleep(1.1)
        assert send(messaging, EMPLOYEE, HR, "after the window").message.text == (
            "after the window"
        )

    def test_rate_limit_counts_rejected_attempts(self, messaging):
        """Every attempt is counted, including ones refused later by the policy."""
        messaging.rate_limiter = SendRateLimiter(max_count=2, window_seconds=60)
        messaging.rewire()

        with pytest.raises(AccessDeniedError):
            send(messaging, EMPLOYEE, OTHER_EMPLOYEE)
        send(messaging, EMPLOYEE, HR)
        with pytest.raises(RateLimitExceededError):
            send(messaging, EMPLOYEE, HR)

    def test_fanout_failure_does_not_undo_the_send(self, messaging):
        messaging.publisher = FailingPublisher()
        messaging.rewire()

        result = send(messaging, EMPLOYEE, HR, "durable")

        stored = thread(messaging, HR, result.conversation.id)
        assert [m.text for m in stored.messages] == ["durable"]
        assert stored.conversation.unread_for(eid(HR)) == 1

    def test_failed_metadata_update_leaves_no_message(self, messaging, publisher):
        """Message and conversation metadata commit together or not at all."""
        first = send(messaging, EMPLOYEE, HR, "kept")
        publisher.events.clear()

        class BrokenConversations(InMemoryConversationRepository):
            async def record_send(self, conversation_id, sender, text, now):
                raise ConnectionError("store unavailable")

        broken = BrokenConversations()
        broken._by_id = messaging.conversations._by_id
        broken._by_pair = messaging.conversations._by_pair
        healthy = messaging.conversations
        messaging.conversations = broken
        messaging.rewire()

        with pytest.raises(ConnectionError):
            send(messaging, EMPLOYEE, HR, "orphan")

        messaging.conversations = healthy
        messaging.rewire()
        stored = thread(messaging, HR, first.conversation.id)
        assert [m.text for m in stored.messages] == ["kept"]
        assert stored.conversation.unread_for(eid(HR)) == 1
        assert stored.conversation.last_message_text == "kept"
        assert publisher.events == []

    def test_concurrent_sends_keep_counters_exact(self, messaging):
        async def scenario():
            commands = [
                SendMessageCommand(sender_id=eid(EMPLOYEE), recipient_id=eid(HR), text=f"m{i}")
                for i in range(20)
            ]
            return await asyncio.gather(*(messaging.send.execute(c) for c in commands))

        results = asyncio.run(scenario())
        conversation_id = results[0].conversation.id
        assert all(r.conversation.id == conversation_id for r in results)

        stored = thread(messaging, EMPLOYEE, conversation_id)
        assert len(stored.messages) == 20
        assert stored.conversation.unread_for(eid(HR)) == 20


class TestThreadAndMarkSeen:
    def test_thread_returns_ordered_history(self, messaging, clock):
        first = send(messaging, EMPLOYEE, HR, "one")
        clock.advance(1)
        send(messaging, HR, EMPLOYEE, "two")
        clock.advance(1)
        send(messaging, EMPLOYEE, HR, "three")

        result = thread(messaging, HR, first.conversation.id)
        assert [m.text for m in result.messages] == ["one", "two", "three"]
        assert set(result.participants) == {eid(EMPLOYEE), eid(HR)}
        assert result.participants[eid(HR)].name == "Harper Reyes"

    def test_unknown_conversation_is_not_found(self, messaging):
        with pytest.raises(EntityNotFoundError):
            thread(messaging, EMPLOYEE, ConversationId.generate())

    def test_non_participant_is_not_found(self, messaging):
        result = send(messaging, EMPLOYEE, HR)
        with pytest.raises(EntityNotFoundError):
            thread(messaging, DIRECTOR, result.conversation.id)
        with pytest.raises(EntityNotFoundError):
            mark_seen(messaging, PM, result.conversation.id)

    def test_mark_seen_flips_received_messages(self, messaging, publisher):
        send(messaging, EMPLOYEE, HR, "one")
        send(messaging, EMPLOYEE, HR, "two")
        result = send(messaging, HR, EMPLOYEE, "reply")
        publisher.events.clear()

        seen = mark_seen(messaging, HR, result.conversation.id)

        assert seen.marked == 2
        assert seen.conversation.unread_for(eid(HR)) == 0
        assert seen.conversation.unread_for(eid(EMPLOYEE)) == 1

        stored = thread(messaging, HR, result.conversation.id)
        assert [(m.text, m.seen) for m in stored.messages] == [
            ("one", True),
            ("two", True),
            ("reply", False),
        ]

        assert publisher.for_channel(f"user:{EMPLOYEE}") == [
            (
                "message:seen",
                {"conversationId": result.conversation.id.value, "seenBy": HR},
            )
        ]
        [(event, payload)] = publisher.for_channel(f"user:{HR}")
        assert event == "conversation:updated"
        assert payload["unreadCounts"][HR] == 0

    def test_mark_seen_twice_is_harmless(self, messaging):
        result = send(messaging, EMPLOYEE, HR)
        assert mark_seen(messaging, HR, result.conversation.id).marked == 1
        assert mark_seen(messaging, HR, result.conversation.id).marked == 0

    def test_reassignment_revokes_thread_access(self, messaging, directory):
        result = send(messaging, EMPLOYEE, HR, "before the move")
        reassign(directory, EMPLOYEE, assignedHr=OTHER_HR)

        with pytest.raises(AccessDeniedError):
            thread(messaging, EMPLOYEE, result.conversation.id)
        with pytest.raises(AccessDeniedError):
            mark_seen(messaging, HR, result.conversation.id)

    def test_removed_participant_is_forbidden(self, messaging, directory):
        result = send(messaging, EMPLOYEE, HR)
        directory._employees.pop(eid(EMPLOYEE))

        with pytest.raises(AccessDeniedError):
            thread(messaging, HR, result.conversation.id)


class TestContactsAndUnread:
    def test_contacts_are_most_recent_first(self, messaging, clock):
        send(messaging, EMPLOYEE, HR, "to hr")
        clock.advance(5)
        send(messaging, PM, EMPLOYEE, "from pm")

        items = contacts(messaging, EMPLOYEE)
        assert [c.other_employee_id.value for c in items] == [PM, HR]

        pm = items[0]
        assert pm.other_name == "Priya Mehta"
        assert pm.other_role == "project managers"
        assert pm.last_message == "from pm"
        assert pm.unread_count == 1
        assert items[1].unread_count == 0

    def test_contacts_hide_conversations_after_reassignment(self, messaging, directory):
        send(messaging, EMPLOYEE, HR)
        send(messaging, EMPLOYEE, PM)
        reassign(directory, EMPLOYEE, assignedHr=None)

        assert [c.other_employee_id.value for c in contacts(messaging, EMPLOYEE)] == [PM]
        assert contacts(messaging, HR) == []

    def test_director_conversation_visible_both_ways(self, messaging):
        send(messaging, UNASSIGNED, DIRECTOR, "hello boss")
        assert [c.other_employee_id.value for c in contacts(messaging, DIRECTOR)] == [UNASSIGNED]

    def test_unknown_caller_is_not_found(self, messaging):
        with pytest.raises(EntityNotFoundError):
            contacts(messaging, "ghost-1")
        with pytest.raises(EntityNotFoundError):
            unread(messaging, "ghost-1")

    def test_unread_summary_lists_nonzero_counts(self, messaging, clock):
        send(messaging, EMPLOYEE, HR, "a")
        send(messaging, EMPLOYEE, HR, "b")
        clock.advance(10)
        send(messaging, DIRECTOR, HR, "c")
        # Not one of HR's conversations
        pm_chat = send(messaging, PM, DIRECTOR, "d")
        mark_seen(messaging, DIRECTOR, pm_chat.conversation.id)

        summary = unread(messaging, HR)
        assert summary.total_unread == 3
        assert [(i.last_message, i.unread_count) for i in summary.items] == [
            ("c", 1),
            ("b", 2),
        ]
        assert summary.items[0].last_message_from == eid(DIRECTOR)
        assert summary.items[0].sender.name == "Dana Director"
        assert summary.items[1].sender.id == eid(EMPLOYEE)

    def test_unread_summary_is_empty_when_caught_up(self, messaging):
        result = send(messaging, EMPLOYEE, HR)
        mark_seen(messaging, HR, result.conversation.id)

        summary = unread(messaging, HR)
        assert summary.total_unread == 0
        assert summary.items == []

    def test_unread_summary_skips_hidden_conversations(self, messaging, directory):
        send(messaging, EMPLOYEE, HR)
        reassign(directory, EMPLOYEE, assignedHr=OTHER_HR)

        assert unread(messaging, HR).total_unread == 0


class TestEndToEnd:
    def test_employee_and_hr_exchange(self, messaging, publisher, clock):
        """Employee writes, HR reads and answers, employee reads the answer."""
        first = send(messaging, EMPLOYEE, HR, "Can I take Friday off?")
        conversation_id = first.conversation.id

        assert unread(messaging, HR).total_unread == 1
        assert publisher.for_channel(f"user:{HR}")[0][0] == "message:new"

        mark_seen(messaging, HR, conversation_id)
        clock.advance(30)
        send(messaging, HR, EMPLOYEE, "Yes, approved.")

        assert unread(messaging, HR).total_unread == 0
        employee_summary = unread(messaging, EMPLOYEE)
        assert employee_summary.total_unread == 1
        assert employee_summary.items[0].last_message == "Yes, approved."

        mark_seen(messaging, EMPLOYEE, conversation_id)
        history = thread(messaging, EMPLOYEE, conversation_id).messages
        assert [(m.sender_id.value, m.seen) for m in history] == [
            (EMPLOYEE, True),
            (HR, True),
        ]
        assert unread(messaging, EMPLOYEE).total_unread == 0
