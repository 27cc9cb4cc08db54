"""Settings dos backends de persistência (tokens, verifier e agenda).

Backends em memória existem para desenvolvimento e testes; em produção
o bootstrap exige Redis para tokens e Firestore para a agenda.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TokenStoreBackend = Literal["memory", "redis"]
ScheduleRepositoryBackend = Literal["memory", "firestore"]


class StoreSettings(BaseModel):
    """Seleção e parâmetros dos stores usados pelo pipeline."""

    model_config = ConfigDict(extra="ignore")

    token_store_backend: TokenStoreBackend = Field(
        default="memory",
        description="Backend do TokenStore e do verifier PKCE.",
    )
    schedule_repository_backend: ScheduleRepositoryBackend = Field(
        default="memory",
        description="Backend de persistência das aulas importadas.",
    )
    redis_url: str = Field(default="", description="URL de conexão Redis.")
    firestore_project: str = Field(default="", description="Projeto GCP do Firestore.")
    token_key_prefix: str = Field(default="calendar_tokens:")
    verifier_ttl_seconds: int = Field(
        default=600,
        ge=1,
        description="Vida máxima do code verifier entre autorização e callback.",
    )
    guest_user_id: str | None = Field(
        default=None,
        description="Identificador usado em importações sem usuário autenticado.",
    )

    def validate(self, is_production: bool = False) -> list[str]:  # type: ignore[override]
        """Valida combinações de backend.

        Args:
            is_production: Quando True, backends em memória são rejeitados.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []
        if self.token_store_backend == "redis" and not self.redis_url:
            errors.append("REDIS_URL obrigatório para TOKEN_STORE_BACKEND=redis")
        if is_production and self.token_store_backend == "memory":
            errors.append("TOKEN_STORE_BACKEND=memory não permitido em produção")
        if is_production and self.schedule_repository_backend == "memory":
            errors.append("SCHEDULE_REPOSITORY_BACKEND=memory não permitido em produção")
        return errors


def _load_store_from_env() -> StoreSettings:
    """Carrega StoreSettings de variáveis de ambiente."""
    guest_user_id = os.getenv("GUEST_USER_ID", "").strip() or None
    return StoreSettings(
        token_store_backend=os.getenv("TOKEN_STORE_BACKEND", "memory").lower(),  # type: ignore[arg-type]
        schedule_repository_backend=os.getenv(  # type: ignore[arg-type]
            "SCHEDULE_REPOSITORY_BACKEND", "memory"
        ).lower(),
        redis_url=os.getenv("REDIS_URL", ""),
        firestore_project=os.getenv(
            "FIRESTORE_PROJECT_ID", os.getenv("GOOGLE_CLOUD_PROJECT", "")
        ),
        token_key_prefix=os.getenv("TOKEN_KEY_PREFIX", "calendar_tokens:"),
        verifier_ttl_seconds=int(os.getenv("PKCE_VERIFIER_TTL_SECONDS", "600")),
        guest_user_id=guest_user_id,
    )


@lru_cache(maxsize=1)
def get_store_settings() -> StoreSettings:
    """Retorna instância cacheada de StoreSettings."""
    return _load_store_from_env()


__all__ = [
    "ScheduleRepositoryBackend",
    "StoreSettings",
    "TokenStoreBackend",
    "get_store_settings",
]
