"""HTTP API for the Reunite verification workflow."""
