"""Caller authentication for the verification API."""

from reunite.api.auth.caller_auth import ADMIN_ROLE, get_caller

__all__ = ["ADMIN_ROLE", "get_caller"]
