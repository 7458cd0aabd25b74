"""
Infrastructure layer - Adapters for the verification workflow.

This layer contains:
- Case store implementations (in-memory stub, PostgreSQL)
- Collaborator stubs (notifications, listing status)
- Observability (structlog configuration) and Prometheus metrics

This layer may import from domain and application, but NOT from api.
"""
