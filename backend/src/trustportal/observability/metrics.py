"""Prometheus metrics for the Trust Portal backend."""

from prometheus_client import Counter

inbound_emails_total = Counter(
    "trustportal_inbound_emails_total",
    "Inbound email webhook deliveries by outcome",
    ["outcome"]  # threaded|ignored_*|invalid|error
)

rate_limit_rejections_total = Counter(
    "trustportal_rate_limit_rejections_total",
    "Requests rejected by the email rate limiter",
    ["classifier"]  # ip|email
)
