"""
API Routers - FastAPI endpoint definitions.
"""

from portal_chat.presentation.api.messages import router as messages_router
from portal_chat.presentation.api.realtime import router as realtime_router
from portal_chat.presentation.api.metrics import router as metrics_router

__all__ = [
    "messages_router",
    "realtime_router",
    "metrics_router",
]
