from __future__ import annotations

import time
import uuid
from dataclasses import replace
from datetime import datetime, timezone

import jwt
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from accounts.api import routes
from accounts.api.errors import register_exception_handlers
from accounts.config import get_settings
from accounts.domain.account import ServiceAccount, User
from accounts.domain.contracts import CreateServiceAccountInput
from accounts.domain.service import AccountService
from accounts.repository import RecordNotFoundError
from accounts.security.passwords import HashingError

STATIC_HASH = b"$2a$10$onMfkmQZtlkOfnZJe7GaiesbPBbXcyB53KyFKllWq829mxlhNoJSi"


class FakeRepository:
    """In-memory repository mimicking Postgres-backed behaviors.

    Records are copied on the way in and out, so callers only ever hold a
    transient copy, as they would with a real store.
    """

    def __init__(self) -> None:
        self.users: dict[tuple[str, str], User] = {}
        self.service_accounts: dict[tuple[str, str], ServiceAccount] = {}
        self.update_calls: list[User] = []
        self.find_error: Exception | None = None
        self.update_error: Exception | None = None
        self.create_error: Exception | None = None

    def add_user(self, user: User) -> User:
        self.users[(user.tenant_id, user.user_id)] = replace(user)
        return user

    def stored_user(self, user_id: str, tenant_id: str) -> User:
        return self.users[(tenant_id, user_id)]

    def find_user(self, user_id: str, tenant_id: str) -> User:
        if self.find_error:
            raise self.find_error
        user = self.users.get((tenant_id, user_id))
        if user is None:
            raise RecordNotFoundError(f"user {user_id} not found")
        return replace(user)

    def update_user(self, user: User) -> None:
        self.update_calls.append(user)
        if self.update_error:
            raise self.update_error
        self.users[(user.tenant_id, user.user_id)] = replace(user)

    def create_service_account(self, payload: CreateServiceAccountInput) -> ServiceAccount:
        if self.create_error:
            raise self.create_error
        account = ServiceAccount(
            service_account_id=str(uuid.uuid4()),
            tenant_id=payload.tenant_id,
            name=payload.name,
            parent_type=payload.parent_type,
            parent_id=payload.parent_id,
            created_at=datetime.now(timezone.utc),
        )
        self.service_accounts[(account.tenant_id, account.service_account_id)] = account
        return account

    def get_service_account(self, service_account_id: str, tenant_id: str) -> ServiceAccount:
        account = self.service_accounts.get((tenant_id, service_account_id))
        if account is None:
            raise RecordNotFoundError(f"service account {service_account_id} not found")
        return account


class StaticHasher:
    """Deterministic stand-in returning the same hash for every input."""

    def __init__(self) -> None:
        self.calls: list[bytes] = []

    def hash(self, plaintext: bytes) -> bytes:
        self.calls.append(plaintext)
        return STATIC_HASH


class FailingHasher:
    def hash(self, plaintext: bytes) -> bytes:
        raise HashingError("hash too short")


@pytest.fixture
def repository() -> FakeRepository:
    repo = FakeRepository()
    repo.add_user(
        User(
            user_id="user-1",
            tenant_id="tenant-1",
            email="octocat@github.com",
            display_name="Octocat",
            password_hash="acme",
            created_at=datetime(2021, 1, 1, tzinfo=timezone.utc),
            updated_at=datetime(2021, 1, 1, tzinfo=timezone.utc),
        )
    )
    return repo


@pytest.fixture
def static_hasher() -> StaticHasher:
    return StaticHasher()


@pytest.fixture
def failing_hasher() -> FailingHasher:
    return FailingHasher()


@pytest.fixture
def make_client(repository):
    """Return a factory building a test client around ``repository`` and a hasher."""
    clients: list[TestClient] = []

    def _make(hasher) -> TestClient:
        app = FastAPI()
        app.include_router(routes.router)
        register_exception_handlers(app)
        app.state.account_service = AccountService(repository, hasher)
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def api_client(make_client, static_hasher) -> TestClient:
    return make_client(static_hasher)


def mint_token(subject: str, tenant_id: str | None, **overrides) -> str:
    settings = get_settings()
    now = int(time.time())
    payload = {
        "iss": settings.jwt_issuer,
        "sub": subject,
        "tenant_id": tenant_id,
        "scopes": ["accounts:write"],
        "iat": now,
        "exp": now + 3600,
    }
    payload.update(overrides)
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


@pytest.fixture
def auth_headers():
    """Return a factory for bearer headers speaking for a given principal."""

    def _headers(subject: str = "user-1", tenant_id: str = "tenant-1", **overrides) -> dict[str, str]:
        return {"Authorization": f"Bearer {mint_token(subject, tenant_id, **overrides)}"}

    return _headers


@pytest.fixture
def make_token():
    return mint_token
