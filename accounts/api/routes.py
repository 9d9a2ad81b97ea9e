"""HTTP route definitions for the accounts service."""

from __future__ import annotations

import pydantic
from fastapi import APIRouter, Depends, status
from prometheus_client import Counter
from pydantic import BaseModel

from ..domain.account import Principal, ServiceAccount, User
from ..domain.contracts import CreateServiceAccountInput, UserInput
from ..domain.errors import BadRequestError, ClientFault, InternalFault
from ..domain.service import AccountService
from .deps import get_principal, get_raw_body, get_service

router = APIRouter(prefix="/v1")

ACCOUNT_UPDATES = Counter(
    "account_updates_total",
    "Self-service user updates by outcome.",
    ["outcome"],
)


class UserResponse(BaseModel):
    """Serialised representation of a `User` without its credential."""

    user_id: str
    tenant_id: str
    email: str
    display_name: str
    admin: bool
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        """Build a response model from the domain aggregate."""
        return cls(
            user_id=user.user_id,
            tenant_id=user.tenant_id,
            email=user.email,
            display_name=user.display_name,
            admin=user.admin,
            created_at=user.created_at.isoformat() if user.created_at else None,
            updated_at=user.updated_at.isoformat() if user.updated_at else None,
        )


class UpdateUserRequest(BaseModel):
    """Partial update body; omitted and null fields are left unchanged."""

    email: str | None = None
    password: str | None = None
    display_name: str | None = None


class CreateServiceAccountRequest(BaseModel):
    """Payload accepted when registering a service account."""

    name: str
    parent_type: str
    parent_id: str


class ServiceAccountResponse(BaseModel):
    service_account_id: str
    tenant_id: str
    name: str
    parent_type: str
    parent_id: str
    created_at: str | None = None

    @classmethod
    def from_domain(cls, account: ServiceAccount) -> "ServiceAccountResponse":
        return cls(
            service_account_id=account.service_account_id,
            tenant_id=account.tenant_id,
            name=account.name,
            parent_type=account.parent_type,
            parent_id=account.parent_id,
            created_at=account.created_at.isoformat() if account.created_at else None,
        )


def decode_user_input(body: bytes) -> UserInput:
    """Decode a JSON request body into a partial update.

    Raises
    ------
    BadRequestError
        When the body is empty, is not JSON, or carries wrongly typed fields.
    """
    if not body.strip():
        raise BadRequestError("Invalid request body: EOF.")
    try:
        request = UpdateUserRequest.model_validate_json(body)
    except pydantic.ValidationError as exc:
        raise BadRequestError(f"Invalid request body: {_describe(exc)}.") from exc
    return UserInput.from_mapping(request.model_dump(exclude_unset=True, exclude_none=True))


def _describe(exc: pydantic.ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]


@router.get("/user", response_model=UserResponse)
def find_self(
    principal: Principal = Depends(get_principal),
    service: AccountService = Depends(get_service),
) -> UserResponse:
    """Return the authenticated user's own record."""
    return UserResponse.from_domain(service.find_self(principal))


@router.patch("/user", response_model=UserResponse)
def update_self(
    principal: Principal = Depends(get_principal),
    body: bytes = Depends(get_raw_body),
    service: AccountService = Depends(get_service),
) -> UserResponse:
    """Apply a partial update to the authenticated user's own record."""
    try:
        user = service.find_self(principal)
        payload = decode_user_input(body)
        user = service.apply_update(user, payload)
    except ClientFault:
        ACCOUNT_UPDATES.labels(outcome="client_fault").inc()
        raise
    except InternalFault:
        ACCOUNT_UPDATES.labels(outcome="internal_fault").inc()
        raise
    ACCOUNT_UPDATES.labels(outcome="ok").inc()
    return UserResponse.from_domain(user)


@router.post(
    "/service-accounts",
    response_model=ServiceAccountResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_service_account(
    payload: CreateServiceAccountRequest,
    principal: Principal = Depends(get_principal),
    service: AccountService = Depends(get_service),
) -> ServiceAccountResponse:
    """Register a service account in the caller's tenant."""
    account = service.create_service_account(
        CreateServiceAccountInput(
            tenant_id=principal.tenant_id,
            name=payload.name,
            parent_type=payload.parent_type,
            parent_id=payload.parent_id,
        )
    )
    return ServiceAccountResponse.from_domain(account)


@router.get("/service-accounts/{service_account_id}", response_model=ServiceAccountResponse)
def get_service_account(
    service_account_id: str,
    principal: Principal = Depends(get_principal),
    service: AccountService = Depends(get_service),
) -> ServiceAccountResponse:
    """Retrieve a service account belonging to the caller's tenant."""
    account = service.get_service_account(service_account_id, principal.tenant_id)
    return ServiceAccountResponse.from_domain(account)
