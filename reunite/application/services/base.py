"""Structured logging shared by the verification handlers.

Handlers log through one logger per instance, bound with the handler's
class name. Each call site then asks for an operation logger:

    log = self._log_operation("decide", case_id=case_id, caller=email)
    log.info("decision_recorded", outcome="approved")

``case_id`` may be a UUID or a string; it is always logged as a string
so JSON output and log queries see one representation.
"""

from __future__ import annotations

from typing import ClassVar
from uuid import UUID

import structlog

from reunite.application.correlation import get_correlation_id


class LoggingMixin:
    """Per-handler structlog logger with correlation and case binding.

    Subclasses call ``_init_logger()`` once their collaborators are set.
    ``log_component`` groups handlers in log queries and may be overridden.
    """

    log_component: ClassVar[str] = "verification"

    _log: structlog.BoundLogger

    def _init_logger(self) -> None:
        self._log = structlog.get_logger().bind(
            service=type(self).__name__,
            component=self.log_component,
        )

    def _log_operation(
        self,
        operation: str,
        case_id: UUID | str | None = None,
        **context: object,
    ) -> structlog.BoundLogger:
        """Logger for one handler call.

        Binds the operation name, plus the correlation id when a request
        set one. The case id is bound only when the operation targets a
        single case.
        """
        if case_id is not None:
            context["case_id"] = str(case_id)
        correlation_id = get_correlation_id()
        if correlation_id:
            context["correlation_id"] = correlation_id
        return self._log.bind(operation=operation, **context)
