"""Message queries."""

from .list_contacts import ContactItem, ListContactsHandler, ListContactsQuery
from .get_thread import GetThreadHandler, GetThreadQuery, GetThreadResult
from .get_unread_summary import (
    GetUnreadSummaryHandler,
    GetUnreadSummaryQuery,
    UnreadItem,
    UnreadSummary,
)

__all__ = [
    "ContactItem",
    "ListContactsHandler",
    "ListContactsQuery",
    "GetThreadHandler",
    "GetThreadQuery",
    "GetThreadResult",
    "GetUnreadSummaryHandler",
    "GetUnreadSummaryQuery",
    "UnreadItem",
    "UnreadSummary",
]
