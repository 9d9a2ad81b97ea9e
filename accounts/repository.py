"""Database repository for user and service-account records."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

import psycopg
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import ServiceAccount, User
from .domain.contracts import CreateServiceAccountInput

logger = logging.getLogger(__name__)

_USER_COLUMNS = "user_id, tenant_id, email, display_name, password_hash, admin, created_at, updated_at"
_SERVICE_ACCOUNT_COLUMNS = "service_account_id, tenant_id, name, parent_type, parent_id, created_at"


class StoreError(Exception):
    """Generic failure talking to the backing store."""


class RecordNotFoundError(StoreError):
    """No record exists for the requested key."""


class AccountRepository:
    """Postgres-backed persistence for account records.

    Every public method raises :class:`StoreError` when the database fails, so
    callers never see driver exceptions.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def find_user(self, user_id: str, tenant_id: str) -> User:
        """Fetch a user belonging to the specified tenant."""
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute("SELECT set_config('app.tenant_id', %s, true)", (tenant_id,))
                    cur.execute(
                        f"""
                        SELECT {_USER_COLUMNS}
                        FROM users
                        WHERE user_id = %s AND tenant_id = %s
                        """,
                        (user_id, tenant_id),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise StoreError(f"find user {user_id}: {exc}") from exc
        if not row:
            raise RecordNotFoundError(f"user {user_id} not found")
        return self._map_user(row)

    def update_user(self, user: User) -> None:
        """Write the mutable fields of ``user`` back to its row."""
        try:
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT set_config('app.tenant_id', %s, true)", (user.tenant_id,))
                    cur.execute(
                        """
                        UPDATE users
                        SET email = %s, display_name = %s, password_hash = %s, admin = %s, updated_at = %s
                        WHERE user_id = %s AND tenant_id = %s
                        """,
                        (
                            user.email,
                            user.display_name,
                            user.password_hash,
                            user.admin,
                            user.updated_at,
                            user.user_id,
                            user.tenant_id,
                        ),
                    )
                    updated = cur.rowcount
                    conn.commit()
        except psycopg.Error as exc:
            raise StoreError(f"update user {user.user_id}: {exc}") from exc
        if updated == 0:
            raise RecordNotFoundError(f"user {user.user_id} not found")

    def create_service_account(self, payload: CreateServiceAccountInput) -> ServiceAccount:
        """Persist a service account and return the stored record."""
        service_account_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute("SELECT set_config('app.tenant_id', %s, true)", (payload.tenant_id,))
                    cur.execute(
                        f"""
                        INSERT INTO service_accounts ({_SERVICE_ACCOUNT_COLUMNS})
                        VALUES (%s, %s, %s, %s, %s, %s)
                        RETURNING {_SERVICE_ACCOUNT_COLUMNS}
                        """,
                        (
                            service_account_id,
                            payload.tenant_id,
                            payload.name,
                            payload.parent_type,
                            payload.parent_id,
                            now,
                        ),
                    )
                    row = cur.fetchone()
                    conn.commit()
        except psycopg.Error as exc:
            raise StoreError(f"create service account {payload.name}: {exc}") from exc
        logger.debug("stored service account %s for tenant %s", service_account_id, payload.tenant_id)
        return self._map_service_account(row)

    def get_service_account(self, service_account_id: str, tenant_id: str) -> ServiceAccount:
        """Fetch a service account belonging to the specified tenant."""
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute("SELECT set_config('app.tenant_id', %s, true)", (tenant_id,))
                    cur.execute(
                        f"""
                        SELECT {_SERVICE_ACCOUNT_COLUMNS}
                        FROM service_accounts
                        WHERE service_account_id = %s AND tenant_id = %s
                        """,
                        (service_account_id, tenant_id),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise StoreError(f"find service account {service_account_id}: {exc}") from exc
        if not row:
            raise RecordNotFoundError(f"service account {service_account_id} not found")
        return self._map_service_account(row)

    def _map_user(self, row: tuple) -> User:
        """Convert a raw database tuple into the domain ``User`` dataclass."""
        return User(
            user_id=str(row[0]),
            tenant_id=row[1],
            email=row[2],
            display_name=row[3],
            password_hash=row[4],
            admin=row[5],
            created_at=row[6],
            updated_at=row[7],
        )

    def _map_service_account(self, row: tuple) -> ServiceAccount:
        return ServiceAccount(
            service_account_id=str(row[0]),
            tenant_id=row[1],
            name=row[2],
            parent_type=row[3],
            parent_id=str(row[4]),
            created_at=row[5],
        )
