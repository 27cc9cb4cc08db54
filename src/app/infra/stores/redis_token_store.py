"""Redis Token Store — credenciais OAuth por conta em Redis.

Valor JSON sem TTL: o refresh token vive até sign-out ou revogação.
Falhas do Redis sobem como TokenStoreError em vez de serem engolidas.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError
from redis.exceptions import RedisError

from app.domain.oauth_tokens import OAuthTokenSet
from app.protocols.token_store import TokenStoreProtocol
from utils.errors import TokenStoreError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "calendar_tokens:"


class RedisTokenStore(TokenStoreProtocol):
    """TokenStore assíncrono sobre Redis (Upstash compatível).

    Args:
        redis_client: Cliente Redis assíncrono
        account_id: Conta dona do token set (id do usuário)
        key_prefix: Namespace das chaves
    """

    def __init__(
        self,
        redis_client: AsyncRedis[bytes],
        account_id: str,
        key_prefix: str = TOKEN_PREFIX,
    ) -> None:
        if not account_id:
            raise ValueError("account_id obrigatório")
        self._redis = redis_client
        self._key = f"{key_prefix}{account_id}"

    async def store(self, tokens: OAuthTokenSet) -> None:
        try:
            await self._redis.set(self._key, tokens.model_dump_json())
        except RedisError as exc:
            logger.error(
                "token_store_write_failed",
                extra={"action": "store", "error_type": type(exc).__name__},
            )
            raise TokenStoreError("token_store_write_failed") from exc
        logger.debug("token_set_stored", extra={"action": "store"})

    async def load(self) -> OAuthTokenSet | None:
        try:
            data = await self._redis.get(self._key)
        except RedisError as exc:
            logger.error(
                "token_store_read_failed",
                extra={"action": "load", "error_type": type(exc).__name__},
            )
            raise TokenStoreError("token_store_read_failed") from exc
        if data is None:
            return None
        try:
            return OAuthTokenSet.model_validate_json(data)
        except ValidationError:
            # Valor corrompido equivale a ausência: o usuário reautentica
            logger.warning("token_set_corrupted", extra={"action": "load"})
            return None

    async def clear(self) -> None:
        try:
            await self._redis.delete(self._key)
        except RedisError as exc:
            logger.error(
                "token_store_delete_failed",
                extra={"action": "clear", "error_type": type(exc).__name__},
            )
            raise TokenStoreError("token_store_delete_failed") from exc
