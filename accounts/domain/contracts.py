"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Final, Union


class _Unset:
    """Marker type for a field the caller did not send."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


@dataclass(slots=True)
class UserInput:
    """Partial update of the caller's own user record.

    Each field is either a value or ``UNSET``. Only set fields are applied;
    an empty string is a value, not an absence.
    """

    email: Union[str, _Unset] = UNSET
    password: Union[str, _Unset] = UNSET
    display_name: Union[str, _Unset] = UNSET

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "UserInput":
        """Build an input from decoded JSON, treating ``None`` as absent."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known and value is not None})

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not UNSET


@dataclass(slots=True)
class CreateServiceAccountInput:
    """Inputs required to register a service account within a tenant."""

    tenant_id: str
    name: str
    parent_type: str
    parent_id: str
