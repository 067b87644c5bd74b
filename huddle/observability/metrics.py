"""Prometheus metrics for huddle.

Run lifecycle, session outcomes, timeouts and external collaborator health.
"""

from prometheus_client import Counter, Gauge, Histogram

RUNS_STARTED = Counter(
    "huddle_runs_started_total",
    "Total number of standup runs started",
)

RUNS_COMPLETED = Counter(
    "huddle_runs_completed_total",
    "Total number of standup runs that reached COMPLETED",
)

ACTIVE_RUNS = Gauge(
    "huddle_active_runs",
    "Number of runs currently in progress",
)

SESSIONS_FINISHED = Counter(
    "huddle_sessions_finished_total",
    "Participant sessions by terminal state",
    labelnames=["state"],
)

PHASE_EXCHANGES = Histogram(
    "huddle_phase_exchanges",
    "Replies consumed before a phase closed",
    labelnames=["phase"],
    buckets=(1, 2, 3, 4, 5, 8),
)

TIMEOUTS = Counter(
    "huddle_timeouts_total",
    "Timeout windows that elapsed without a reply",
    labelnames=["stage"],
)

EXTERNAL_CALL_FAILURES = Counter(
    "huddle_external_call_failures_total",
    "External collaborator calls that failed and were degraded",
    labelnames=["collaborator", "operation"],
)

TRACKER_UPDATES = Counter(
    "huddle_tracker_updates_total",
    "Work-item updates sent to the tracker",
    labelnames=["operation", "outcome"],
)
