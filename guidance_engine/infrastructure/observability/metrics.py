"""Prometheus metrics for monitoring guidance signals and simulations"""

from typing import List

from prometheus_client import Counter, Histogram

from guidance_engine.domain.models import Notification, SimulationSummary

# Evaluation metrics
evaluation_counter = Counter(
    "guidance_evaluations_total",
    "Total guidance evaluations run",
    ["rule"],  # all | cash-runway | payment-risk | ...
)

notification_counter = Counter(
    "guidance_notifications_total",
    "Notifications emitted by type and priority",
    ["type", "priority"],
)

# Simulation metrics
simulation_counter = Counter(
    "guidance_simulations_total",
    "Transaction simulations run",
    ["outcome"],  # clear | at_risk
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_evaluation(rule: str, notifications: List[Notification]) -> None:
    """Record one evaluation and the signals it produced"""
    evaluation_counter.labels(rule=rule).inc()
    for notification in notifications:
        notification_counter.labels(
            type=notification.type.value,
            priority=notification.priority.value,
        ).inc()


def record_simulation(summary: SimulationSummary) -> None:
    outcome = "at_risk" if summary.risks else "clear"
    simulation_counter.labels(outcome=outcome).inc()
