"""Credential store adapters - Key-value implementations with per-key TTL."""

from .memory import MemoryCredentialStore
from .postgres import PostgresCredentialStore, run_migrations
from .redis_backend import RedisCredentialStore

__all__ = [
    "MemoryCredentialStore",
    "PostgresCredentialStore",
    "RedisCredentialStore",
    "run_migrations",
]
