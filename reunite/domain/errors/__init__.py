"""Domain errors for Reunite.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from ReuniteError.
"""

from reunite.domain.errors.authorization import UnauthorizedError
from reunite.domain.errors.case import (
    CaseAlreadyExistsError,
    CaseNotFoundError,
    ChannelFrozenError,
    InvalidMessageError,
    ReasonRequiredError,
)
from reunite.domain.errors.concurrent_modification import VersionConflictError
from reunite.domain.errors.evidence import MalformedEvidenceError
from reunite.domain.errors.state_transition import InvalidTransitionError
from reunite.domain.errors.workflow import VerificationWorkflowError

__all__: list[str] = [
    "CaseAlreadyExistsError",
    "CaseNotFoundError",
    "ChannelFrozenError",
    "InvalidMessageError",
    "InvalidTransitionError",
    "MalformedEvidenceError",
    "ReasonRequiredError",
    "UnauthorizedError",
    "VerificationWorkflowError",
    "VersionConflictError",
]
