"""Test helpers for Reunite tests.

This package contains reusable test utilities and fake implementations
for dependency injection in unit tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    make_case / make_pet / party identities: Case builders
    InterleavingCaseStore: Store that lets N readers see the same version
    WorkflowFirstCaseStore: Orders a decision before a racing chat append
    RecordingWorkflowMetrics: In-memory WorkflowMetricsProtocol

Usage:
    from tests.helpers import FakeTimeAuthority, make_case
"""

from tests.helpers.case_factory import (
    ADMIN,
    CLAIMANT,
    CLAIMANT_CALLER,
    FINDER,
    FINDER_CALLER,
    STRANGER,
    evidence_payload,
    make_case,
    make_pet,
)
from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.interleaving_case_store import (
    InterleavingCaseStore,
    WorkflowFirstCaseStore,
)
from tests.helpers.recording_metrics import RecordingWorkflowMetrics

__all__ = [
    "ADMIN",
    "CLAIMANT",
    "CLAIMANT_CALLER",
    "FINDER",
    "FINDER_CALLER",
    "STRANGER",
    "FakeTimeAuthority",
    "InterleavingCaseStore",
    "RecordingWorkflowMetrics",
    "WorkflowFirstCaseStore",
    "evidence_payload",
    "make_case",
    "make_pet",
]
