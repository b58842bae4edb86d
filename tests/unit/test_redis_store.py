"""
Unit tests for RedisCredentialStore.

Uses a mocked redis client to verify command mapping and error
translation; live behaviour is covered by the integration suite.
"""

from unittest.mock import MagicMock

import pytest
import redis

from guestpass.adapters.store.redis_backend import RedisCredentialStore
from guestpass.domain.exceptions import SourceKeyMissing, StoreError


@pytest.fixture
def client() -> MagicMock:
    return MagicMock(spec=redis.Redis)


@pytest.fixture
def redis_store(client: MagicMock) -> RedisCredentialStore:
    return RedisCredentialStore(client)


class TestCommands:
    def test_get(self, redis_store: RedisCredentialStore, client: MagicMock) -> None:
        client.get.return_value = "v"
        assert redis_store.get("k") == "v"
        client.get.assert_called_once_with("k")

    def test_get_missing(self, redis_store: RedisCredentialStore, client: MagicMock) -> None:
        client.get.return_value = None
        assert redis_store.get("k") is None

    def test_set_uses_ex(self, redis_store: RedisCredentialStore, client: MagicMock) -> None:
        redis_store.set_with_ttl("k", "v", 259200)
        client.set.assert_called_once_with("k", "v", ex=259200)

    def test_rename(self, redis_store: RedisCredentialStore, client: MagicMock) -> None:
        redis_store.rename("old", "new")
        client.rename.assert_called_once_with("old", "new")

    def test_delete(self, redis_store: RedisCredentialStore, client: MagicMock) -> None:
        redis_store.delete("k")
        client.delete.assert_called_once_with("k")

    @pytest.mark.parametrize(("reply", "expected"), [(120, 120), (-2, None), (-1, -1)])
    def test_ttl(self, redis_store: RedisCredentialStore, client: MagicMock, reply: int, expected) -> None:
        client.ttl.return_value = reply
        assert redis_store.ttl("k") == expected


class TestErrors:
    def test_rename_missing_source(self, redis_store: RedisCredentialStore, client: MagicMock) -> None:
        client.rename.side_effect = redis.ResponseError("ERR no such key")
        with pytest.raises(SourceKeyMissing):
            redis_store.rename("old", "new")

    def test_rename_other_response_error(self, redis_store: RedisCredentialStore, client: MagicMock) -> None:
        client.rename.side_effect = redis.ResponseError("WRONGTYPE")
        with pytest.raises(StoreError) as exc_info:
            redis_store.rename("old", "new")
        assert not isinstance(exc_info.value, SourceKeyMissing)

    @pytest.mark.parametrize("method, args", [("get", ("k",)), ("set", ("k", "v", 1)), ("delete", ("k",))])
    def test_connection_errors_become_store_errors(
        self, redis_store: RedisCredentialStore, client: MagicMock, method: str, args: tuple
    ) -> None:
        getattr(client, method).side_effect = redis.ConnectionError("refused")
        call = {"get": redis_store.get, "set": redis_store.set_with_ttl, "delete": redis_store.delete}[method]
        with pytest.raises(StoreError):
            call(*args)

    def test_error_does_not_leak_details(self, redis_store: RedisCredentialStore, client: MagicMock) -> None:
        client.get.side_effect = redis.ConnectionError("redis://secret-host:6379 refused")
        with pytest.raises(StoreError) as exc_info:
            redis_store.get("k")
        assert "secret-host" not in str(exc_info.value)


class TestFromUrl:
    def test_from_url_decodes_responses(self) -> None:
        store = RedisCredentialStore.from_url("redis://localhost:6379/0", timeout_seconds=2.0)
        kwargs = store._client.connection_pool.connection_kwargs
        assert kwargs["decode_responses"] is True
        assert kwargs["socket_timeout"] == 2.0
        store.close()
