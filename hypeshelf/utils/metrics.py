"""Prometheus metrics configuration"""

from prometheus_client import Counter, Info
from prometheus_fastapi_instrumentator import Instrumentator

# Application info
app_info = Info('hypeshelf', 'HypeShelf backend information')
app_info.info({
    'version': '1.0.0',
    'service': 'hypeshelf-backend'
})

# Recommendation metrics
recommendations_created_total = Counter(
    'recommendations_created_total',
    'Total recommendations created',
    ['genre']
)

recommendations_removed_total = Counter(
    'recommendations_removed_total',
    'Total recommendations removed',
    ['by_role']
)

staff_picks_total = Counter(
    'staff_picks_total',
    'Total mark-as-staff-pick calls that succeeded'
)

# Authorization metrics
authorization_denials_total = Counter(
    'authorization_denials_total',
    'Total operations denied by the authorization policy',
    ['action', 'reason']
)

# Identity sync metrics
identity_events_total = Counter(
    'identity_events_total',
    'Total identity provider events processed',
    ['event_type', 'outcome']
)


def setup_metrics(app):
    """
    Setup Prometheus metrics for FastAPI app

    Args:
        app: FastAPI application instance
    """
    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics"],
        env_var_name="ENABLE_METRICS",
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True
    )

    instrumentator.instrument(app).expose(app, endpoint="/metrics")

    return instrumentator


def record_recommendation_created(genre: str):
    """Record a new recommendation"""
    recommendations_created_total.labels(genre=genre).inc()


def record_recommendation_removed(by_role: str):
    """Record a deleted recommendation"""
    recommendations_removed_total.labels(by_role=by_role).inc()


def record_staff_pick():
    """Record a staff pick"""
    staff_picks_total.inc()


def record_denial(action: str, reason: str):
    """Record an authorization denial"""
    authorization_denials_total.labels(action=action, reason=reason).inc()


def record_identity_event(event_type: str, outcome: str):
    """Record an identity sync outcome"""
    identity_events_total.labels(event_type=event_type, outcome=outcome).inc()
