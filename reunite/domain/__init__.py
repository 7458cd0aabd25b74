"""
Domain layer - Pure business logic for the verification workflow.

This layer contains:
- Domain models (cases, identities, evidence variants)
- Domain services (state machine engine, evidence validation, versioning)
- Domain errors

CRITICAL: This layer must NOT import from application, infrastructure, or api.
Only stdlib and typing imports are allowed.
"""

from reunite.domain.exceptions import ReuniteError

__all__: list[str] = ["ReuniteError"]
