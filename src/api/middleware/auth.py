"""
Authentication for the admin API

A FastAPI dependency that checks the "Bearer <token>" Authorization header
against the configured admin token. When no token is configured the API is
open (local development and the simulated host).

Usage:
    @router.put("/roles", dependencies=[Depends(require_admin)])
"""

import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from api.dependencies import get_service_container
from services.service_container import ServiceContainer


def parse_bearer(authorization: Optional[str]) -> str:
    """
    Extract the token from an Authorization header

    Raises:
        HTTPException: 401 if missing or malformed
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return parts[1]


async def require_admin(
    authorization: Optional[str] = Header(None),
    services: ServiceContainer = Depends(get_service_container),
) -> None:
    """
    Require the admin token when one is configured

    Raises:
        HTTPException: 401 if the header is missing/invalid, 403 on a wrong token
    """
    expected = services.config.api.admin_token
    if not expected:
        return

    token = parse_bearer(authorization)
    if not secrets.compare_digest(token, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token"
        )
