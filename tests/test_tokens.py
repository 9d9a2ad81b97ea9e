from __future__ import annotations

import time

import jwt
import pytest

from accounts.security.tokens import principal_from_token


def test_principal_from_token(make_token):
    principal = principal_from_token(make_token("user-1", "tenant-1"))

    assert principal.account_id == "user-1"
    assert principal.tenant_id == "tenant-1"
    assert principal.scopes == ("accounts:write",)


def test_principal_requires_tenant(make_token):
    with pytest.raises(jwt.InvalidTokenError):
        principal_from_token(make_token("user-1", None))


def test_principal_rejects_expired_token(make_token):
    token = make_token("user-1", "tenant-1", exp=int(time.time()) - 60)

    with pytest.raises(jwt.ExpiredSignatureError):
        principal_from_token(token)


def test_principal_rejects_wrong_signature():
    token = jwt.encode(
        {"sub": "user-1", "tenant_id": "tenant-1", "exp": int(time.time()) + 60},
        "not-the-secret",
        algorithm="HS256",
    )

    with pytest.raises(jwt.InvalidSignatureError):
        principal_from_token(token)
