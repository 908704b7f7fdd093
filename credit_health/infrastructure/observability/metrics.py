"""Prometheus metrics for monitoring score estimates, plan generation and refresh admission"""

from prometheus_client import Counter, Histogram

# Scoring metrics
estimated_score_histogram = Histogram(
    "credit_health_estimated_score",
    "Estimated credit scores computed from assessments",
    buckets=[300, 580, 670, 740, 800, 850],
)

# Plan generation metrics
plan_outcome_counter = Counter(
    "credit_health_plan_total",
    "Improvement plan generation attempts",
    ["outcome"],  # success | service_error | parse_error
)

text_generation_latency_histogram = Histogram(
    "text_generation_latency_seconds",
    "Text generation service response time",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0],
)

# Account refresh metrics
refresh_decision_counter = Counter(
    "credit_health_refresh_total",
    "Account refresh admission decisions",
    ["outcome"],  # allowed | rate_limited
)

aggregator_failures_counter = Counter(
    "aggregator_refresh_failures_total",
    "Failed account aggregation refresh calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_refresh_decision(allowed: bool) -> None:
    """Record refresh admission outcome"""
    outcome = "allowed" if allowed else "rate_limited"
    refresh_decision_counter.labels(outcome=outcome).inc()
