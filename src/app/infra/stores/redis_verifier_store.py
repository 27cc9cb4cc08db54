"""Verifier PKCE em Redis: valor de sessão curto e de uso único."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from app.protocols.verifier_store import CODE_VERIFIER_SESSION_KEY, VerifierStoreProtocol
from utils.errors import TokenStoreError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


class RedisVerifierStore(VerifierStoreProtocol):
    """Guarda o verifier com TTL e o consome com GETDEL (leitura + remoção atômica)."""

    def __init__(self, redis_client: AsyncRedis[bytes], ttl_seconds: int = 600) -> None:
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{CODE_VERIFIER_SESSION_KEY}:{session_id}"

    async def save(self, session_id: str, verifier: str) -> None:
        try:
            await self._redis.set(self._key(session_id), verifier, ex=self._ttl_seconds)
        except RedisError as exc:
            logger.error("code_verifier_save_failed", extra={"error_type": type(exc).__name__})
            raise TokenStoreError("code_verifier_save_failed") from exc

    async def consume(self, session_id: str) -> str | None:
        try:
            raw = await self._redis.getdel(self._key(session_id))
        except RedisError as exc:
            logger.error("code_verifier_consume_failed", extra={"error_type": type(exc).__name__})
            raise TokenStoreError("code_verifier_consume_failed") from exc
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)
