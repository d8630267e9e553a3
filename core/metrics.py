"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
    ["platform"],
)

license_verifications_total = Counter(
    "license_verifications_total",
    "Total license verifications by outcome",
    ["result"],
)

license_activations_total = Counter(
    "license_activations_total",
    "Total machine binding changes",
    ["result"],
)

# Webhook metrics
webhook_requests_total = Counter(
    "webhook_requests_total",
    "Total purchase webhooks received",
    ["platform", "outcome"],
)
