"""FastAPI dependencies for the verification API."""
