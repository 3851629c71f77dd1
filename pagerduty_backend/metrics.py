"""Metrics for pagerduty-backend."""

from prometheus_client import Counter, Histogram

# Upstream APIs answer within a few seconds; the slow tail goes up to the client timeout.
DEFAULT_BUCKETS_EXTERNAL_API = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)

pagerduty_request = Counter(
    # Following naming convention (<app>_external_api_<component>_requests_total)
    "pagerduty_backend_external_api_pagerduty_requests_total",
    "Total number of PagerDuty API operation calls",
    ["method", "verb"],
)

pagerduty_request_errors = Counter(
    "pagerduty_backend_external_api_pagerduty_request_errors_total",
    "Total number of failed PagerDuty API operation calls",
    ["method", "verb"],
)

pagerduty_request_duration = Histogram(
    "pagerduty_backend_external_api_pagerduty_request_duration_seconds",
    "PagerDuty API operation duration in seconds, including all pages",
    ["method", "verb"],
    buckets=DEFAULT_BUCKETS_EXTERNAL_API,
)
