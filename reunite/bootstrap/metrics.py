"""Bootstrap wiring for workflow metrics."""

from __future__ import annotations

from reunite.application.ports.metrics_exporter import MetricsExporterPort
from reunite.application.ports.workflow_metrics import WorkflowMetricsProtocol
from reunite.infrastructure.monitoring.workflow_metrics import (
    METRICS_CONTENT_TYPE,
    get_workflow_metrics as get_infra_workflow_metrics,
    reset_workflow_metrics,
)


class PrometheusMetricsExporter:
    """Prometheus metrics exporter implementation."""

    @property
    def content_type(self) -> str:
        return METRICS_CONTENT_TYPE

    def generate_metrics(self) -> bytes:
        return get_infra_workflow_metrics().generate()


_workflow_metrics: WorkflowMetricsProtocol | None = None
_metrics_exporter: MetricsExporterPort | None = None


def get_workflow_metrics() -> WorkflowMetricsProtocol:
    """Get the workflow metrics instance."""
    global _workflow_metrics
    if _workflow_metrics is None:
        _workflow_metrics = get_infra_workflow_metrics()
    return _workflow_metrics


def get_metrics_exporter() -> MetricsExporterPort:
    """Get the metrics exporter instance."""
    global _metrics_exporter
    if _metrics_exporter is None:
        _metrics_exporter = PrometheusMetricsExporter()
    return _metrics_exporter


def reset_metrics() -> None:
    """Reset metrics singletons (testing cleanup)."""
    global _workflow_metrics
    global _metrics_exporter
    _workflow_metrics = None
    _metrics_exporter = None
    reset_workflow_metrics()
