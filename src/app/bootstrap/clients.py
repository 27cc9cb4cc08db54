"""Clientes de infraestrutura criados no startup (Redis, Firestore, HTTP).

Redis e Firestore são singletons do processo, chaveados pela configuração
recebida; o cliente HTTP pertence aos recursos e é fechado no shutdown.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from redis.asyncio import Redis as AsyncRedis

    from config.settings import CalendarOAuthSettings

logger = logging.getLogger(__name__)

REDIS_SOCKET_TIMEOUT_SECONDS = 5.0
HTTP_USER_AGENT = "schedule-sync/1.0"


@lru_cache(maxsize=4)
def create_async_redis_client(redis_url: str) -> AsyncRedis[bytes]:
    """Cliente Redis assíncrono para tokens e verifiers.

    Raises:
        ValueError: Se a URL estiver vazia.
    """
    from redis.asyncio import Redis as AsyncRedis

    if not redis_url:
        raise ValueError("REDIS_URL não configurado")

    client: AsyncRedis[bytes] = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
    )
    logger.info("async_redis_client_created", extra={"component": "bootstrap"})
    return client


@lru_cache(maxsize=4)
def create_firestore_client(project_id: str | None = None) -> FirestoreClient:
    """Cliente Firestore; sem projeto, usa o das credenciais padrão."""
    from google.cloud import firestore

    client = firestore.Client(project=project_id)
    logger.info(
        "firestore_client_created",
        extra={"component": "bootstrap", "project": project_id or "default"},
    )
    return client


def create_http_client(settings: CalendarOAuthSettings) -> httpx.AsyncClient:
    """Cliente do token endpoint, com o timeout das settings de calendário."""
    return httpx.AsyncClient(
        timeout=settings.http_timeout_seconds,
        headers={"User-Agent": HTTP_USER_AGENT},
    )
