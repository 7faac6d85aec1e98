"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_operations = Counter(
    'booking_operations_total',
    'Total booking operations',
    ['operation', 'outcome']  # get/create/update, success/not_found/forbidden
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking operation latency',
    ['operation'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Auth metrics
login_attempts = Counter(
    'login_attempts_total',
    'Total login attempts',
    ['result']  # success, failure
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )

# Convenience functions for instrumentation
def record_booking_operation(operation: str, outcome: str):
    """Record booking operation. Outcome: success, not_found, forbidden"""
    booking_operations.labels(operation=operation, outcome=outcome).inc()

def record_login(success: bool):
    """Record login attempt."""
    result = "success" if success else "failure"
    login_attempts.labels(result=result).inc()
