"""
PostgreSQL credential store adapter - Implements CredentialStore protocol.

This module provides a PostgreSQL implementation of the domain's
key-value store port using psycopg3 with raw SQL, for deployments that
already run Postgres and do not want a separate Redis.

Expiry Design:
--------------
Every row carries an absolute ``expires_at`` computed from database time
(``NOW() + ttl``). Reads filter on ``expires_at > NOW()``, so an expired
row is invisible even before it is purged; writes and renames purge the
expired rows they touch.

Atomic Rename:
--------------
``rename`` runs ``DELETE ... RETURNING`` on the source row and an upsert
of the target row inside one transaction. Concurrent readers under READ
COMMITTED see either the pre-rename or the post-rename state, never both
keys and never neither. A concurrent second rename of the same source
blocks on the row lock, then finds the row gone and raises
``SourceKeyMissing``.
"""

import logging
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from guestpass.domain.exceptions import SourceKeyMissing, StoreError

logger = logging.getLogger(__name__)


class PostgresCredentialStore:
    """
    Implements CredentialStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def get(self, key: str) -> str | None:
        sql = """
            SELECT value FROM credential_store
            WHERE key = %s AND expires_at > NOW()
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (key,))
                row = cursor.fetchone()
        except psycopg.Error as e:
            logger.error("Store read failed for %s: %s", key, e)
            raise StoreError("get failed") from e
        return row[0] if row else None

    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        sql = """
            INSERT INTO credential_store (key, value, expires_at)
            VALUES (%s, %s, NOW() + %s * INTERVAL '1 second')
            ON CONFLICT (key) DO UPDATE
            SET value = EXCLUDED.value,
                expires_at = EXCLUDED.expires_at
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (key, value, ttl_seconds))
                conn.commit()
        except psycopg.Error as e:
            logger.error("Store write failed for %s: %s", key, e)
            raise StoreError("set failed") from e

    def rename(self, old_key: str, new_key: str) -> None:
        take_sql = """
            DELETE FROM credential_store
            WHERE key = %s
            RETURNING value, expires_at, expires_at > NOW()
        """
        put_sql = """
            INSERT INTO credential_store (key, value, expires_at)
            VALUES (%s, %s, %s)
            ON CONFLICT (key) DO UPDATE
            SET value = EXCLUDED.value,
                expires_at = EXCLUDED.expires_at
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(take_sql, (old_key,))
                row = cursor.fetchone()
                if row is None or not row[2]:
                    # Commit so an expired source row is purged
                    conn.commit()
                    raise SourceKeyMissing(old_key)
                value, expires_at, _ = row
                cursor.execute(put_sql, (new_key, value, expires_at))
                conn.commit()
        except psycopg.Error as e:
            logger.error("Store rename failed for %s -> %s: %s", old_key, new_key, e)
            raise StoreError("rename failed") from e

    def delete(self, key: str) -> None:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("DELETE FROM credential_store WHERE key = %s", (key,))
                conn.commit()
        except psycopg.Error as e:
            logger.error("Store delete failed for %s: %s", key, e)
            raise StoreError("delete failed") from e

    def ttl(self, key: str) -> int | None:
        sql = """
            SELECT CEIL(EXTRACT(EPOCH FROM expires_at - NOW()))::int
            FROM credential_store
            WHERE key = %s AND expires_at > NOW()
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (key,))
                row = cursor.fetchone()
        except psycopg.Error as e:
            raise StoreError("ttl failed") from e
        return row[0] if row else None

    def purge_expired(self) -> int:
        """Delete expired rows; returns how many were removed."""
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("DELETE FROM credential_store WHERE expires_at <= NOW()")
                conn.commit()
                return cursor.rowcount
        except psycopg.Error as e:
            raise StoreError("purge failed") from e


MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """
    Apply every ``*.sql`` file in filename order. Files must be idempotent.

    Raises:
        StoreError: If a migration fails; startup should stop
    """
    sql_files = sorted(migrations_dir.glob("*.sql"))
    if not sql_files:
        logger.warning("No migrations found in %s", migrations_dir)
        return

    for sql_file in sql_files:
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text(encoding="utf-8"))
        except psycopg.Error as e:
            logger.error("Migration %s failed: %s", sql_file.name, e)
            raise StoreError(f"migration {sql_file.name} failed") from e
        logger.info("Applied migration %s", sql_file.name)
