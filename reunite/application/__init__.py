"""
Application layer - Use cases and orchestration.

This layer contains:
- Ports (Protocol interfaces for the case store and collaborators)
- Application services (workflow handlers and queries)

This layer may import from domain, but NOT from infrastructure or api.
"""
