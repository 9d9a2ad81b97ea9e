"""Bearer token verification for authenticated requests."""

from __future__ import annotations

from typing import Any

import jwt

from ..config import get_settings
from ..domain.account import Principal


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT returning its payload.

    Parameters
    ----------
    token:
        Encoded JWT issued by the identity service.

    Returns
    -------
    dict[str, Any]
        The decoded payload if signature and issuer checks succeed.

    Raises
    ------
    jwt.PyJWTError
        Propagated when the token is invalid, expired, or signed by another issuer.
    """

    settings = get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=["HS256"],
        issuer=settings.jwt_issuer,
        options={"require": ["sub", "exp"]},
    )


def principal_from_token(token: str) -> Principal:
    """Return the principal a verified token speaks for.

    Raises
    ------
    jwt.PyJWTError
        When the token fails verification or lacks a tenant claim.
    """
    claims = decode_access_token(token)
    tenant_id = claims.get("tenant_id")
    if not tenant_id:
        raise jwt.InvalidTokenError("token is missing tenant_id")
    return Principal(
        account_id=str(claims["sub"]),
        tenant_id=str(tenant_id),
        scopes=tuple(claims.get("scopes") or ()),
    )
