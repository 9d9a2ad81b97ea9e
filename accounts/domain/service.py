"""Account service orchestrating persistence, hashing, and validation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .account import Principal, ServiceAccount, User
from .contracts import CreateServiceAccountInput, UserInput
from .errors import BadRequestError, InternalFault, NotFoundError
from .validation import DEFAULT_NAME_RULE, NameRule, validate_service_account
from ..repository import AccountRepository, RecordNotFoundError, StoreError
from ..security.passwords import HashingError, PasswordHasher

logger = logging.getLogger(__name__)


class AccountService:
    """Account workflows backed by Postgres storage."""

    def __init__(
        self,
        repository: AccountRepository,
        hasher: PasswordHasher,
        name_rule: NameRule = DEFAULT_NAME_RULE,
    ) -> None:
        """Store dependencies used to orchestrate persistence and hashing."""
        self._repository = repository
        self._hasher = hasher
        self._name_rule = name_rule

    def find_self(self, principal: Principal) -> User:
        """Load the record the authenticated principal refers to.

        A missing record is an internal fault: the session already vouched
        for its existence.
        """
        try:
            return self._repository.find_user(principal.account_id, principal.tenant_id)
        except RecordNotFoundError as exc:
            logger.error(
                "principal %s has no user record in tenant %s", principal.account_id, principal.tenant_id
            )
            raise InternalFault() from exc
        except StoreError as exc:
            logger.error("failed to load user %s: %s", principal.account_id, exc)
            raise InternalFault() from exc

    def apply_update(self, user: User, payload: UserInput) -> User:
        """Apply the set fields of ``payload`` to ``user`` and persist it.

        Nothing is written when hashing fails. The in-memory ``user`` may
        already be mutated when persisting fails; callers must not treat it
        as committed in that case.
        """
        if payload.is_set("password") and not payload.password:
            raise BadRequestError("Password cannot be empty.")

        if payload.is_set("email"):
            user.email = payload.email
        if payload.is_set("password"):
            try:
                # stored as text, so the hash must be ASCII like a bcrypt digest
                password_hash = self._hasher.hash(payload.password.encode("utf-8")).decode("ascii")
            except HashingError as exc:
                logger.error("failed to hash password for user %s: %s", user.user_id, exc)
                raise InternalFault() from exc
            except Exception as exc:
                logger.exception("password hasher misbehaved for user %s", user.user_id)
                raise InternalFault() from exc
            user.password_hash = password_hash
        if payload.is_set("display_name"):
            user.display_name = payload.display_name
        user.updated_at = datetime.now(timezone.utc)

        try:
            self._repository.update_user(user)
        except StoreError as exc:
            logger.error("failed to update user %s: %s", user.user_id, exc)
            raise InternalFault() from exc

        logger.info("updated user %s in tenant %s", user.user_id, user.tenant_id)
        return user

    def create_service_account(self, payload: CreateServiceAccountInput) -> ServiceAccount:
        """Validate and persist a service account."""
        validate_service_account(payload, self._name_rule)
        try:
            account = self._repository.create_service_account(payload)
        except StoreError as exc:
            logger.error("failed to create service account %s: %s", payload.name, exc)
            raise InternalFault() from exc
        logger.info(
            "created service account %s for %s %s", account.service_account_id, account.parent_type, account.parent_id
        )
        return account

    def get_service_account(self, service_account_id: str, tenant_id: str) -> ServiceAccount:
        """Retrieve a service account ensuring the tenant scope matches."""
        try:
            return self._repository.get_service_account(service_account_id, tenant_id)
        except RecordNotFoundError as exc:
            raise NotFoundError("Service account not found.") from exc
        except StoreError as exc:
            logger.error("failed to load service account %s: %s", service_account_id, exc)
            raise InternalFault() from exc
