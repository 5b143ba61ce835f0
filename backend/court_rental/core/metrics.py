"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_submissions = Counter(
    'booking_submissions_total',
    'Booking submissions by outcome',
    ['outcome']  # created, rejected, error
)

booking_status_changes = Counter(
    'booking_status_changes_total',
    'Admin booking status updates',
    ['status']  # pending, confirmed, rejected
)

# Promo metrics
promo_evaluations = Counter(
    'promo_evaluations_total',
    'Promo code evaluations by resulting status',
    ['status']
)

# Notification metrics
notification_deliveries = Counter(
    'notification_deliveries_total',
    'Admin notification relay attempts',
    ['provider', 'result']  # sent, failed, skipped
)

feed_subscribers = Gauge(
    'admin_feed_subscribers',
    'Connected admin booking-stream subscribers'
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss/error
)


def metrics_endpoint() -> Response:
    """Render every registered metric in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_submission(outcome: str):
    """Record booking submission. Outcome: created, rejected, error"""
    booking_submissions.labels(outcome=outcome).inc()


def record_promo_evaluation(status: str):
    promo_evaluations.labels(status=status).inc()


def record_notification(provider: str, result: str):
    """Record relay attempt. Result: sent, failed, skipped"""
    notification_deliveries.labels(provider=provider, result=result).inc()


def record_cache_operation(operation: str, result: str):
    cache_operations.labels(operation=operation, result=result).inc()
