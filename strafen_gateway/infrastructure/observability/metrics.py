"""Prometheus metrics for interest calculations, configuration changes and function calls"""

from prometheus_client import Counter, Histogram

from strafen_gateway.domain.interest import InterestCalculation
from strafen_gateway.domain.models import PayedState, Settled

# Interest metrics
interest_calculation_counter = Counter(
    "strafen_interest_calculations_total",
    "Late payment interest calculations",
    ["outcome"],  # no_config | settled | interest_free | accruing
)

interest_amount_histogram = Histogram(
    "strafen_interest_amount",
    "Late payment interest charged per fine",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 50.0, 100.0],
)

interest_change_counter = Counter(
    "strafen_interest_changes_total",
    "Late payment interest configuration changes",
    ["change_type"],  # update | remove
)

# Callable function metrics
function_call_latency_histogram = Histogram(
    "function_call_latency_seconds",
    "Callable function response time",
    ["function"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

function_call_failure_counter = Counter(
    "function_call_failures_total",
    "Failed callable function attempts",
    ["function"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def interest_outcome(calculation: InterestCalculation, payed_state: PayedState) -> str:
    """Label describing why a fine does or doesn't accrue interest"""
    if isinstance(payed_state, Settled):
        return "settled"
    if calculation.late_payment_interest is None:
        return "no_config"
    if calculation.periods == 0:
        return "interest_free"
    return "accruing"


def record_interest_calculation(calculation: InterestCalculation, payed_state: PayedState) -> None:
    """Record calculation outcome and, when interest accrues, its amount"""
    outcome = interest_outcome(calculation, payed_state)
    interest_calculation_counter.labels(outcome=outcome).inc()

    if outcome == "accruing":
        interest_amount_histogram.observe(calculation.interest.float_value)


def record_interest_change(change_type: str) -> None:
    interest_change_counter.labels(change_type=change_type).inc()
