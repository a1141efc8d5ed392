"""
Prometheus instrumentation for the ticketing service.
Exposed at the /metrics endpoint.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Purchase metrics
purchase_attempts = Counter(
    "ticket_purchase_attempts_total",
    "Total ticket purchase attempts",
    ["outcome"],  # success, sold_out, duplicate, not_found, invalid, unavailable, error
)

purchase_latency = Histogram(
    "ticket_purchase_latency_seconds",
    "Ticket purchase latency",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Access metrics
access_checks = Counter(
    "ticket_access_checks_total",
    "Stream access checks",
    ["result"],  # granted, denied
)

# Cache metrics
cache_operations = Counter(
    "cache_operations_total",
    "Cache operations",
    ["operation", "result"],  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_purchase_attempt(outcome: str):
    purchase_attempts.labels(outcome=outcome).inc()


def record_access_check(granted: bool):
    access_checks.labels(result="granted" if granted else "denied").inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
