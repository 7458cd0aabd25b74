"""Bootstrap wiring: selects and builds infrastructure for the API layer."""
