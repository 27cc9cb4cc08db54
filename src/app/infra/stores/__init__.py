"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - redis_token_store: TokenStore usando Redis (Upstash)
    - redis_verifier_store: verifier PKCE de uso único em Redis
    - firestore_schedule_repository: aulas importadas no Firestore
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_schedule_repository import FirestoreScheduleRepository
from app.infra.stores.memory_stores import (
    MemoryScheduleRepository,
    MemoryTokenStore,
    MemoryVerifierStore,
)
from app.infra.stores.redis_token_store import RedisTokenStore
from app.infra.stores.redis_verifier_store import RedisVerifierStore

__all__ = [
    # Firestore
    "FirestoreScheduleRepository",
    # Memory (dev/test)
    "MemoryScheduleRepository",
    "MemoryTokenStore",
    "MemoryVerifierStore",
    # Redis (Upstash)
    "RedisTokenStore",
    "RedisVerifierStore",
]
