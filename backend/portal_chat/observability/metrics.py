"""
Prometheus Metrics for the portal chat backend.

DATA FLOW:
    This file                  presentation/api/metrics.py
    ─────────                  ───────────────────────────
    Define metrics ──────────► /metrics endpoint ──────────► Prometheus scraper

METRIC TYPES:
    - Gauge: Value goes up/down (current count, e.g., open sockets)
    - Counter: Value only goes up (total count, e.g., messages sent)
    - Histogram: Distribution (for percentiles like P95, e.g., latency)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
REQUEST_LATENCY = Histogram(
    "http_server_request_duration_seconds",
    "Http request latency in seconds",
    ["method", "route", "http_status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5],
)

MESSAGES_SENT_TOTAL = Counter(
    "chat_messages_sent_total",
    "Total number of chat messages durably recorded",
)

SEND_REJECTED_TOTAL = Counter(
    "chat_send_rejected_total",
    "Total number of rejected send attempts by reason",
    ["reason"],
)

REALTIME_EVENTS_TOTAL = Counter(
    "chat_realtime_events_total",
    "Total number of realtime events published by event name",
    ["event"],
)

REALTIME_FANOUT_FAILURES_TOTAL = Counter(
    "chat_realtime_fanout_failures_total",
    "Total number of realtime publishes that raised",
    ["event"],
)

ACTIVE_SOCKETS = Gauge(
    "chat_active_sockets",
    "Number of websocket sessions currently joined to a user channel",
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================
def record_request_latency(method: str, route: str, status_code: int, seconds: float):
    REQUEST_LATENCY.labels(
        method=method, route=route, http_status_code=str(status_code)
    ).observe(seconds)


def record_send_rejected(reason: str):
    SEND_REJECTED_TOTAL.labels(reason=reason).inc()


def get_metrics_content() -> tuple[bytes, str]:
    """Generate Prometheus metrics output."""
    return generate_latest(), CONTENT_TYPE_LATEST
