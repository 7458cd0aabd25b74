"""Prometheus workflow metrics.

Counters for the verification workflow, kept in their own registry so
tests can create isolated collectors.

Metrics:
- verification_transitions_total{event}: successful state machine events
- verification_version_conflicts_total{operation}: lost compare-and-swaps
- verification_rejected_requests_total{code}: requests failed with a workflow error
- verification_chat_messages_total: accepted chat messages
"""

import os
import threading

from prometheus_client import CollectorRegistry, Counter, generate_latest

from reunite.application.ports.workflow_metrics import WorkflowMetricsProtocol

# Content type for Prometheus metrics endpoint
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

# Thread lock for singleton initialization
_collector_lock = threading.Lock()


class PrometheusWorkflowMetrics(WorkflowMetricsProtocol):
    """Prometheus implementation of the workflow counters."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize counters.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")

        self.transitions_total = Counter(
            name="verification_transitions_total",
            documentation="Successful verification state machine events",
            labelnames=["environment", "event"],
            registry=self._registry,
        )
        self.version_conflicts_total = Counter(
            name="verification_version_conflicts_total",
            documentation="Compare-and-swap attempts that lost a race",
            labelnames=["environment", "operation"],
            registry=self._registry,
        )
        self.rejected_requests_total = Counter(
            name="verification_rejected_requests_total",
            documentation="Requests rejected with a workflow error",
            labelnames=["environment", "code"],
            registry=self._registry,
        )
        self.chat_messages_total = Counter(
            name="verification_chat_messages_total",
            documentation="Chat messages accepted",
            labelnames=["environment"],
            registry=self._registry,
        )

    def record_transition(self, event: str) -> None:
        self.transitions_total.labels(environment=self._environment, event=event).inc()

    def record_version_conflict(self, operation: str) -> None:
        self.version_conflicts_total.labels(
            environment=self._environment, operation=operation
        ).inc()

    def record_rejection(self, code: str) -> None:
        self.rejected_requests_total.labels(
            environment=self._environment, code=code
        ).inc()

    def record_message(self) -> None:
        self.chat_messages_total.labels(environment=self._environment).inc()

    def get_registry(self) -> CollectorRegistry:
        return self._registry

    def generate(self) -> bytes:
        """Render the registry in Prometheus exposition format."""
        return generate_latest(self._registry)


# Singleton instance
_workflow_metrics: PrometheusWorkflowMetrics | None = None


def get_workflow_metrics() -> PrometheusWorkflowMetrics:
    """Get the singleton metrics instance (thread-safe)."""
    global _workflow_metrics
    if _workflow_metrics is None:
        with _collector_lock:
            if _workflow_metrics is None:
                _workflow_metrics = PrometheusWorkflowMetrics()
    return _workflow_metrics


def reset_workflow_metrics() -> None:
    """Reset the singleton (for testing only)."""
    global _workflow_metrics
    with _collector_lock:
        _workflow_metrics = None
