"""Structural checks for account-like entities.

Every check returns ``None`` on success or raises exactly one
:class:`~accounts.domain.errors.ValidationError` for the first violated rule.
The functions hold no state and may be called from any thread.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .account import ParentResourceType, ServiceAccount
from .contracts import CreateServiceAccountInput
from .errors import InvalidNameError, InvalidParentTypeError

_PARENT_TYPES = frozenset(member.value for member in ParentResourceType)


@dataclass(frozen=True, slots=True)
class NameRule:
    """Grammar applied to entity names."""

    pattern: re.Pattern[str]
    max_length: int

    @classmethod
    def compile(cls, pattern: str, max_length: int) -> "NameRule":
        return cls(pattern=re.compile(pattern), max_length=max_length)


DEFAULT_NAME_RULE = NameRule.compile(r"^[a-zA-Z_][a-zA-Z0-9\-_.]*$", 64)


def validate_name(name: str, rule: NameRule = DEFAULT_NAME_RULE) -> None:
    """Raise :class:`InvalidNameError` unless ``name`` satisfies ``rule``.

    An empty name is rejected whatever the rule says.
    """
    if not name:
        raise InvalidNameError("Name cannot be empty.")
    if len(name) > rule.max_length:
        raise InvalidNameError(f"Name must be at most {rule.max_length} characters.")
    if not rule.pattern.fullmatch(name):
        raise InvalidNameError("Name contains invalid characters.")


def validate_service_account(
    account: ServiceAccount | CreateServiceAccountInput, rule: NameRule = DEFAULT_NAME_RULE
) -> None:
    """Check the name, then the parent type, of a service account."""
    validate_name(account.name, rule)

    if account.parent_type not in _PARENT_TYPES:
        raise InvalidParentTypeError("Provided parent type is invalid.")
