"""Prometheus metrics for monitoring overtime splits and compliance violations"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from timetrack_compliance.domain.models import ComplianceResult

# Evaluation metrics
evaluation_counter = Counter(
    "timetrack_evaluations_total",
    "Total time entries evaluated",
    ["jurisdiction"],
)

violation_counter = Counter(
    "timetrack_violations_total",
    "Compliance violations raised",
    ["violation_type"],  # daily_overtime | daily_doubletime | weekly_overtime | seven_day_violation | custom_rule
)

hours_histogram = Histogram(
    "timetrack_bucket_hours",
    "Hours per day by pay bucket",
    ["bucket"],  # regular | overtime | doubletime
    buckets=[0.5, 1.0, 2.0, 4.0, 8.0, 10.0, 12.0, 16.0, 24.0],
)

invalid_input_counter = Counter(
    "timetrack_invalid_input_total",
    "Requests rejected because a policy or entry record could not be parsed",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_results(jurisdiction: str, results: Iterable[ComplianceResult]) -> None:
    """Record per-day bucket hours and violation counts"""
    label = jurisdiction or "default"
    for result in results:
        evaluation_counter.labels(jurisdiction=label).inc()

        hours_histogram.labels(bucket="regular").observe(result.hours_regular)
        if result.is_overtime:
            hours_histogram.labels(bucket="overtime").observe(result.hours_overtime)
        if result.is_doubletime:
            hours_histogram.labels(bucket="doubletime").observe(result.hours_doubletime)

        for violation in result.violation_details:
            violation_counter.labels(violation_type=violation.violation_type.value).inc()
