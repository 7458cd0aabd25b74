"""Workflow metrics port.

Lets the application layer count workflow outcomes without depending on
the metrics backend (Prometheus in production).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class WorkflowMetricsProtocol(ABC):
    """Abstract interface for workflow counters."""

    @abstractmethod
    def record_transition(self, event: str) -> None:
        """Count a successful state machine event."""
        ...

    @abstractmethod
    def record_version_conflict(self, operation: str) -> None:
        """Count a compare-and-swap that lost the race."""
        ...

    @abstractmethod
    def record_rejection(self, code: str) -> None:
        """Count a request rejected with a workflow error code."""
        ...

    @abstractmethod
    def record_message(self) -> None:
        """Count an accepted chat message."""
        ...
