"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['operation', 'outcome']  # create/update; success, not_found, payment_required, room_capacity, ...
)

booking_retries = Counter(
    'booking_retry_attempts_total',
    'Booking retries caused by a concurrent change to the target room'
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)

# HTTP metrics
request_latency = Histogram(
    'http_request_latency_seconds',
    'Request latency by method and status',
    ['method', 'status_code'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(operation: str, outcome: str):
    """Record booking attempt. Operation: create, update"""
    booking_attempts.labels(operation=operation, outcome=outcome).inc()


def record_booking_retry():
    booking_retries.inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()


def record_request(method: str, status_code: int, seconds: float):
    request_latency.labels(method=method, status_code=str(status_code)).observe(seconds)
