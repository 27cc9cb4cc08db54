"""Composition root do pipeline de agenda.

Recursos de processo (clientes, stores compartilhados) são criados uma vez
no startup; o `ScheduleImportService` é montado por request/usuário sobre
esses recursos, sem singleton de serviço.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.bootstrap.clients import (
    create_async_redis_client,
    create_firestore_client,
    create_http_client,
)
from app.infra.calendar.google_calendar_client import GoogleCalendarClient
from app.infra.calendar.google_oauth_client import GoogleOAuthClient
from app.infra.stores import (
    FirestoreScheduleRepository,
    MemoryScheduleRepository,
    MemoryTokenStore,
    MemoryVerifierStore,
    RedisTokenStore,
    RedisVerifierStore,
)
from app.use_cases.schedule import ScheduleImportService
from config.settings import get_calendar_oauth_settings, get_store_settings

if TYPE_CHECKING:
    import httpx

    from app.domain.oauth_tokens import OAuthTokenSet
    from app.protocols import (
        EventFetcherProtocol,
        ScheduleRepositoryProtocol,
        TokenStoreProtocol,
        VerifierStoreProtocol,
    )
    from config.settings import CalendarOAuthSettings, StoreSettings

logger = logging.getLogger(__name__)


@dataclass
class ScheduleSyncResources:
    """Recursos compartilhados pelo processo, injetados em cada serviço."""

    calendar_settings: CalendarOAuthSettings
    store_settings: StoreSettings
    http_client: httpx.AsyncClient
    verifier_store: VerifierStoreProtocol
    repository: ScheduleRepositoryProtocol
    event_fetcher: EventFetcherProtocol
    redis_client: Any | None = None
    token_registry: dict[str, OAuthTokenSet] = field(default_factory=dict)

    async def aclose(self) -> None:
        await self.http_client.aclose()
        if self.redis_client is not None:
            await self.redis_client.aclose()


def create_resources(
    calendar_settings: CalendarOAuthSettings | None = None,
    store_settings: StoreSettings | None = None,
) -> ScheduleSyncResources:
    """Cria os recursos conforme backends configurados."""
    calendar_settings = calendar_settings or get_calendar_oauth_settings()
    store_settings = store_settings or get_store_settings()

    redis_client = (
        create_async_redis_client(store_settings.redis_url)
        if store_settings.token_store_backend == "redis"
        else None
    )
    return ScheduleSyncResources(
        calendar_settings=calendar_settings,
        store_settings=store_settings,
        http_client=create_http_client(calendar_settings),
        verifier_store=create_verifier_store(store_settings, redis_client),
        repository=create_schedule_repository(store_settings),
        event_fetcher=GoogleCalendarClient(
            calendar_id=calendar_settings.google_calendar_id,
            page_size=calendar_settings.events_page_size,
        ),
        redis_client=redis_client,
    )


def create_verifier_store(
    store_settings: StoreSettings,
    redis_client: Any | None = None,
) -> VerifierStoreProtocol:
    """Cria store do code verifier no mesmo backend do TokenStore."""
    backend = store_settings.token_store_backend
    if backend == "redis":
        if redis_client is None:
            redis_client = create_async_redis_client(store_settings.redis_url)
        logger.info("verifier_store_created", extra={"backend": "redis"})
        return RedisVerifierStore(redis_client, ttl_seconds=store_settings.verifier_ttl_seconds)
    if backend == "memory":
        logger.info("verifier_store_created", extra={"backend": "memory"})
        return MemoryVerifierStore(ttl_seconds=store_settings.verifier_ttl_seconds)
    msg = f"TOKEN_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)


def create_schedule_repository(store_settings: StoreSettings) -> ScheduleRepositoryProtocol:
    """Cria repositório de aulas baseado na configuração."""
    backend = store_settings.schedule_repository_backend
    if backend == "firestore":
        logger.info("schedule_repository_created", extra={"backend": "firestore"})
        return FirestoreScheduleRepository(
            create_firestore_client(store_settings.firestore_project or None)
        )
    if backend == "memory":
        logger.info("schedule_repository_created", extra={"backend": "memory"})
        return MemoryScheduleRepository()
    msg = f"SCHEDULE_REPOSITORY_BACKEND inválido: {backend}"
    raise ValueError(msg)


def create_token_store(resources: ScheduleSyncResources, account_id: str) -> TokenStoreProtocol:
    """TokenStore ligado a uma conta (o id do usuário)."""
    backend = resources.store_settings.token_store_backend
    if backend == "redis":
        client = resources.redis_client or create_async_redis_client(
            resources.store_settings.redis_url
        )
        return RedisTokenStore(
            client,
            account_id,
            key_prefix=resources.store_settings.token_key_prefix,
        )
    if backend == "memory":
        return MemoryTokenStore(account_id, resources.token_registry)
    msg = f"TOKEN_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)


def build_schedule_import_service(
    resources: ScheduleSyncResources,
    user_id: str,
) -> ScheduleImportService:
    """Monta um serviço novo para a sessão do usuário."""
    oauth_client = GoogleOAuthClient(
        http_client=resources.http_client,
        settings=resources.calendar_settings,
        token_store=create_token_store(resources, user_id),
    )
    return ScheduleImportService(
        session_id=user_id,
        oauth_client=oauth_client,
        event_fetcher=resources.event_fetcher,
        repository=resources.repository,
        verifier_store=resources.verifier_store,
        settings=resources.calendar_settings,
    )
