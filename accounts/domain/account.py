from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ParentResourceType(str, Enum):
    """Resource kinds a service account may be scoped to."""

    repo = "repo"
    space = "space"


@dataclass(slots=True)
class User:
    """Aggregate root for a tenant-scoped user identity."""

    user_id: str
    tenant_id: str
    email: str
    display_name: str
    password_hash: str = field(default="", repr=False)
    admin: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class ServiceAccount:
    """Delegated identity owned by a repository or space.

    ``parent_type`` holds the raw stored value; it is only guaranteed to be a
    ``ParentResourceType`` value once validated.
    """

    service_account_id: str
    tenant_id: str
    name: str
    parent_type: str
    parent_id: str
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Principal:
    """Identity attached to an authenticated request."""

    account_id: str
    tenant_id: str
    scopes: tuple[str, ...] = ()
