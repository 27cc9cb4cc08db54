"""Testes do RedisTokenStore com mock."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.domain.oauth_tokens import OAuthTokenSet
from app.infra.stores.redis_token_store import RedisTokenStore
from utils.errors import TokenStoreError

TOKENS = OAuthTokenSet(
    access_token="access-1",
    refresh_token="refresh-1",
    expiry_epoch_ms=1_800_000_000_000,
    scope="calendar.readonly",
)


class TestRedisTokenStore:
    """Testes do RedisTokenStore (API assíncrona)."""

    @pytest.mark.asyncio
    async def test_store_writes_json_without_ttl(self) -> None:
        redis = AsyncMock()
        store = RedisTokenStore(redis, "user-1")

        await store.store(TOKENS)

        redis.set.assert_awaited_once()
        key, value = redis.set.call_args.args
        assert key == "calendar_tokens:user-1"
        assert OAuthTokenSet.model_validate_json(value) == TOKENS
        assert "ex" not in redis.set.call_args.kwargs

    @pytest.mark.asyncio
    async def test_load_parses_stored_value(self) -> None:
        redis = AsyncMock()
        redis.get.return_value = TOKENS.model_dump_json().encode()

        loaded = await RedisTokenStore(redis, "user-1").load()

        assert loaded == TOKENS
        redis.get.assert_awaited_once_with("calendar_tokens:user-1")

    @pytest.mark.asyncio
    async def test_load_missing_returns_none(self) -> None:
        redis = AsyncMock()
        redis.get.return_value = None

        assert await RedisTokenStore(redis, "user-1").load() is None

    @pytest.mark.asyncio
    async def test_corrupted_value_returns_none(self) -> None:
        redis = AsyncMock()
        redis.get.return_value = b"{not json"

        assert await RedisTokenStore(redis, "user-1").load() is None

    @pytest.mark.asyncio
    async def test_clear_deletes_key(self) -> None:
        redis = AsyncMock()

        await RedisTokenStore(redis, "user-1", key_prefix="t:").clear()

        redis.delete.assert_awaited_once_with("t:user-1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["store", "load", "clear"])
    async def test_redis_failure_raises_token_store_error(self, operation: str) -> None:
        redis = AsyncMock()
        failure = RedisConnectionError("down")
        redis.set.side_effect = failure
        redis.get.side_effect = failure
        redis.delete.side_effect = failure
        store = RedisTokenStore(redis, "user-1")

        with pytest.raises(TokenStoreError):
            if operation == "store":
                await store.store(TOKENS)
            elif operation == "load":
                await store.load()
            else:
                await store.clear()

    def test_requires_account_id(self) -> None:
        with pytest.raises(ValueError):
            RedisTokenStore(AsyncMock(), "")
