"""Domain services for Reunite.

Domain services contain business logic that doesn't naturally fit in the
case entity itself. They must NOT depend on infrastructure.

Available services:
- case_state_machine: transition table and apply functions
- case_versioning: projection-scoped optimistic versioning
- evidence_validator: typed parsing of evidence payloads
"""

from reunite.domain.services.case_state_machine import (
    TRANSITION_TABLE,
    CaseEvent,
    Transition,
    apply_decision,
    apply_dispute,
    apply_evidence,
    apply_ruling,
    available_events,
    check_transition,
)
from reunite.domain.services.case_versioning import (
    CaseMutator,
    CaseProjection,
    swap_projection,
)
from reunite.domain.services.evidence_validator import parse_evidence

__all__ = [
    "CaseEvent",
    "CaseMutator",
    "CaseProjection",
    "TRANSITION_TABLE",
    "Transition",
    "apply_decision",
    "apply_dispute",
    "apply_evidence",
    "apply_ruling",
    "available_events",
    "check_transition",
    "parse_evidence",
    "swap_projection",
]
