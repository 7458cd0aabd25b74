"""Configuration for the Reunite verification service."""

from reunite.config.verification_config import (
    DEFAULT_VERIFICATION_CONFIG,
    TEST_VERIFICATION_CONFIG,
    CaseStoreBackend,
    CaseStoreConfig,
    VerificationWorkflowConfig,
)

__all__ = [
    "DEFAULT_VERIFICATION_CONFIG",
    "TEST_VERIFICATION_CONFIG",
    "CaseStoreBackend",
    "CaseStoreConfig",
    "VerificationWorkflowConfig",
]
