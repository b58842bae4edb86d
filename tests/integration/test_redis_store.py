"""
Integration tests for RedisCredentialStore.

Runs against a real Redis (via docker-compose); skipped otherwise.
Uses a key prefix per test run so a shared instance is left untouched.
"""

import secrets
from concurrent.futures import ThreadPoolExecutor

import pytest
import redis

from guestpass.adapters.store.redis_backend import RedisCredentialStore
from guestpass.config.settings import get_settings
from guestpass.domain.exceptions import SourceKeyMissing

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def store() -> RedisCredentialStore:
    store = RedisCredentialStore.from_url(get_settings().redis_url, timeout_seconds=1.0)
    try:
        store._client.ping()
    except redis.RedisError:
        store.close()
        pytest.skip("Redis not reachable")
    yield store
    store.close()


@pytest.fixture
def prefix(store: RedisCredentialStore) -> str:
    prefix = f"test:{secrets.token_hex(4)}:"
    yield prefix
    for key in store._client.scan_iter(f"{prefix}*"):
        store._client.delete(key)


class TestRedisStore:
    def test_set_then_get_with_ttl(self, store: RedisCredentialStore, prefix: str) -> None:
        store.set_with_ttl(f"{prefix}k", "v", 100)
        assert store.get(f"{prefix}k") == "v"
        assert 95 <= store.ttl(f"{prefix}k") <= 100

    def test_missing_key(self, store: RedisCredentialStore, prefix: str) -> None:
        assert store.get(f"{prefix}missing") is None
        assert store.ttl(f"{prefix}missing") is None

    def test_rename_keeps_ttl(self, store: RedisCredentialStore, prefix: str) -> None:
        store.set_with_ttl(f"{prefix}pending", "v", 300)

        store.rename(f"{prefix}pending", f"{prefix}active")

        assert store.get(f"{prefix}pending") is None
        assert store.get(f"{prefix}active") == "v"
        assert 290 <= store.ttl(f"{prefix}active") <= 300

    def test_rename_missing_source(self, store: RedisCredentialStore, prefix: str) -> None:
        with pytest.raises(SourceKeyMissing):
            store.rename(f"{prefix}a", f"{prefix}b")

    def test_concurrent_renames_exactly_one_succeeds(self, store: RedisCredentialStore, prefix: str) -> None:
        store.set_with_ttl(f"{prefix}src", "v", 60)

        def attempt(index: int) -> bool:
            try:
                store.rename(f"{prefix}src", f"{prefix}dst:{index}")
            except SourceKeyMissing:
                return False
            return True

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(attempt, range(8)))

        assert results.count(True) == 1

    def test_delete(self, store: RedisCredentialStore, prefix: str) -> None:
        store.set_with_ttl(f"{prefix}k", "v", 60)
        store.delete(f"{prefix}k")
        assert store.get(f"{prefix}k") is None
