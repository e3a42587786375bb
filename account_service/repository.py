"""Database repository for account data."""

from __future__ import annotations

from datetime import datetime, timezone

from psycopg import errors
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account, Role
from .domain.contracts import CreateAccountInput
from .domain.errors import EmailInUseError

_ACCOUNT_COLUMNS = """
    id, full_name, birth_date, email, password_hash, role, is_active, created_at, updated_at
"""

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS accounts (
    id BIGINT GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
    full_name TEXT NOT NULL,
    birth_date TIMESTAMPTZ NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'USER' CHECK (role IN ('USER', 'ADMIN')),
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class AccountRepository:
    """Postgres-backed account persistence."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def ensure_schema(self) -> None:
        """Create the ``accounts`` table when it does not exist yet."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
                conn.commit()

    def create_account(self, payload: CreateAccountInput) -> Account:
        """Insert an account row, relying on the unique email constraint for duplicates."""
        now = datetime.now(timezone.utc)
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                try:
                    cur.execute(
                        f"""
                        INSERT INTO accounts (full_name, birth_date, email, password_hash, role, is_active, created_at, updated_at)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {_ACCOUNT_COLUMNS}
                        """,
                        (
                            payload.full_name,
                            payload.birth_date,
                            payload.email,
                            payload.password_hash,
                            payload.role.value,
                            payload.is_active,
                            now,
                            now,
                        ),
                    )
                except errors.UniqueViolation as exc:
                    conn.rollback()
                    raise EmailInUseError() from exc
                record = cur.fetchone()
                conn.commit()

        return self._map_record(record)

    def get_account(self, account_id: int) -> Account | None:
        """Fetch an account by identifier or return ``None``."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = %s",
                    (account_id,),
                )
                row = cur.fetchone()
                if not row:
                    return None
        return self._map_record(row)

    def get_account_by_email(self, email: str) -> Account | None:
        """Fetch an account by its login email or return ``None``."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE email = %s",
                    (email,),
                )
                row = cur.fetchone()
                if not row:
                    return None
        return self._map_record(row)

    def list_accounts(self) -> list[Account]:
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(f"SELECT {_ACCOUNT_COLUMNS} FROM accounts ORDER BY id")
                rows = cur.fetchall()
        return [self._map_record(row) for row in rows]

    def update_status(self, account_id: int, is_active: bool) -> Account | None:
        """Set the active flag in a single statement and return the updated row."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"""
                    UPDATE accounts
                    SET is_active = %s, updated_at = NOW()
                    WHERE id = %s
                    RETURNING {_ACCOUNT_COLUMNS}
                    """,
                    (is_active, account_id),
                )
                row = cur.fetchone()
                conn.commit()
        if not row:
            return None
        return self._map_record(row)

    def _map_record(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            id=row[0],
            full_name=row[1],
            birth_date=row[2],
            email=row[3],
            password_hash=row[4],
            role=Role(row[5]),
            is_active=row[6],
            created_at=row[7],
            updated_at=row[8],
        )
