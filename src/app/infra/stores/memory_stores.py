"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import itertools
import time
from typing import TYPE_CHECKING

from app.protocols.schedule_repository import ScheduleRepositoryProtocol
from app.protocols.token_store import TokenStoreProtocol
from app.protocols.verifier_store import VerifierStoreProtocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.oauth_tokens import OAuthTokenSet
    from app.domain.schedule import ScheduleItem, ScheduleWindow, SourceKind


class MemoryTokenStore(TokenStoreProtocol):
    """TokenStore em memória ligado a uma conta.

    `registry` permite que várias instâncias (uma por request) compartilhem
    o mesmo armazenamento do processo.
    """

    def __init__(
        self,
        account_id: str,
        registry: dict[str, OAuthTokenSet] | None = None,
    ) -> None:
        self._account_id = account_id
        self._registry: dict[str, OAuthTokenSet] = {} if registry is None else registry

    async def store(self, tokens: OAuthTokenSet) -> None:
        self._registry[self._account_id] = tokens

    async def load(self) -> OAuthTokenSet | None:
        return self._registry.get(self._account_id)

    async def clear(self) -> None:
        self._registry.pop(self._account_id, None)


class MemoryVerifierStore(VerifierStoreProtocol):
    """Verifier PKCE em memória com expiração."""

    def __init__(
        self,
        ttl_seconds: int = 600,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._store: dict[str, tuple[str, float]] = {}  # session_id -> (verifier, expires_at)

    async def save(self, session_id: str, verifier: str) -> None:
        now = self._clock()
        # Autorizações abandonadas nunca chegam ao consume; descartadas aqui
        expired = [key for key, (_, expires_at) in self._store.items() if now > expires_at]
        for key in expired:
            del self._store[key]
        self._store[session_id] = (verifier, now + self._ttl_seconds)

    @property
    def pending_count(self) -> int:
        """Verifiers guardados (inclui expirados ainda não descartados)."""
        return len(self._store)

    async def consume(self, session_id: str) -> str | None:
        entry = self._store.pop(session_id, None)
        if entry is None:
            return None
        verifier, expires_at = entry
        if self._clock() > expires_at:
            return None
        return verifier


class MemoryScheduleRepository(ScheduleRepositoryProtocol):
    """Repositório de aulas em memória, agrupado por usuário."""

    def __init__(self) -> None:
        self._entities: dict[str, dict[str, ScheduleItem]] = {}
        self._ids = itertools.count(1)

    async def create_schedule_entity(self, user_id: str, item: ScheduleItem) -> str:
        entity_id = f"cls_{next(self._ids):06d}"
        self._entities.setdefault(user_id, {})[entity_id] = item.model_copy(
            update={"id": entity_id}
        )
        return entity_id

    async def list_schedule_entities(
        self,
        user_id: str,
        window: ScheduleWindow | None = None,
    ) -> list[ScheduleItem]:
        items = [item for item in self._entities.get(user_id, {}).values() if item.active]
        if window is None:
            return items
        return [
            item
            for item in items
            if item.event_date is None or window.contains_date(item.event_date)
        ]

    async def retire_source_entities(
        self,
        user_id: str,
        source_kind: SourceKind,
        *,
        delete: bool = False,
    ) -> int:
        entities = self._entities.get(user_id, {})
        targets = [
            entity_id
            for entity_id, item in entities.items()
            if item.source_kind is source_kind and item.active
        ]
        for entity_id in targets:
            if delete:
                del entities[entity_id]
            else:
                entities[entity_id] = entities[entity_id].model_copy(update={"active": False})
        return len(targets)
