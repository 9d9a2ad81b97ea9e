"""Request-scoped dependencies shared by the v1 routes."""

from __future__ import annotations

import logging

import jwt
from fastapi import Header, HTTPException, Request, status

from ..domain.account import Principal
from ..domain.service import AccountService
from ..security.tokens import principal_from_token

logger = logging.getLogger(__name__)


def get_service(request: Request) -> AccountService:
    """Resolve the `AccountService` stored on the FastAPI application state."""
    service: AccountService = request.app.state.account_service
    return service


def get_principal(authorization: str | None = Header(default=None)) -> Principal:
    """Return the principal named by the request's bearer token."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return principal_from_token(token)
    except jwt.PyJWTError as exc:
        logger.info("rejected bearer token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


async def get_raw_body(request: Request) -> bytes:
    return await request.body()
