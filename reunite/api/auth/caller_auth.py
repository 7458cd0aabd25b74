"""Caller identity extraction.

Authentication happens upstream: the identity provider in front of the
service asserts who the caller is through request headers. This module
only turns those headers into a CallerIdentity; role decisions per case
are made later by the IdentityResolver.

Headers:
- X-User-Email: required, the caller's email
- X-User-Name: optional display name
- X-User-Picture: optional avatar reference
- X-User-Roles: optional comma separated roles; "admin" grants the admin claim
"""

from typing import Annotated

import structlog
from fastapi import Header, HTTPException, Request, status

from reunite.domain.models.identity import CallerIdentity

logger = structlog.get_logger(__name__)

ADMIN_ROLE = "admin"


def _parse_roles(raw: str | None) -> set[str]:
    if not raw:
        return set()
    return {part.strip().lower() for part in raw.split(",") if part.strip()}


def get_caller(
    request: Request,
    x_user_email: Annotated[
        str | None,
        Header(description="Email of the authenticated caller. Required."),
    ] = None,
    x_user_name: Annotated[
        str | None,
        Header(description="Display name of the authenticated caller."),
    ] = None,
    x_user_picture: Annotated[
        str | None,
        Header(description="Avatar reference of the authenticated caller."),
    ] = None,
    x_user_roles: Annotated[
        str | None,
        Header(description="Comma separated roles; 'admin' grants the admin claim."),
    ] = None,
) -> CallerIdentity:
    """Build the caller identity from identity provider headers.

    Raises:
        HTTPException 401: If X-User-Email is missing or not an address.
    """
    log = logger.bind(component="caller_auth")
    request_ip = request.client.host if request.client else "unknown"

    email = (x_user_email or "").strip()
    if not email:
        log.warning("auth_failed", reason="missing_user_email", request_ip=request_ip)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "type": "urn:reunite:auth:missing-identity",
                "title": "Authentication Required",
                "status": 401,
                "detail": "X-User-Email header is required",
                "instance": str(request.url),
            },
        )
    if "@" not in email:
        log.warning("auth_failed", reason="invalid_user_email", request_ip=request_ip)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "type": "urn:reunite:auth:invalid-identity",
                "title": "Invalid Identity",
                "status": 401,
                "detail": "X-User-Email must be an email address",
                "instance": str(request.url),
            },
        )

    is_admin = ADMIN_ROLE in _parse_roles(x_user_roles)
    return CallerIdentity(
        email=email,
        display_name=(x_user_name or "").strip(),
        avatar_url=(x_user_picture or "").strip() or None,
        is_admin=is_admin,
    )
