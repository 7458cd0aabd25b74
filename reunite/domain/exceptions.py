"""Root of the reunite error hierarchy.

Domain errors live in ``reunite.domain.errors``, one module per concern:

- case: missing or duplicate cases, frozen chat, bad reasons and messages
- evidence: payloads that do not fit the case's verification method
- state_transition and authorization: illegal actions and wrong roles
- concurrent_modification: lost compare-and-swap races

All of them derive from VerificationWorkflowError, which the API layer
maps to a problem response. A bare ReuniteError is not mapped.
"""


class ReuniteError(Exception):
    """Base class for every error raised inside the reunite domain.

    ``message`` keeps the text the error was raised with so handlers can
    surface it without going through ``str()``.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message
