"""Settings comuns ao serviço: ambiente, nome e nível de log.

Lidas uma vez do ambiente (`get_base_settings`) e compartilhadas pelo
bootstrap, pelo logging e pelo health check.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal, get_args

Environment = Literal["development", "staging", "production"]

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Apelidos aceitos em ENVIRONMENT; qualquer outro valor cai em development
_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "prod": "production",
    "production": "production",
    "stage": "staging",
    "staging": "staging",
}

_TRUTHY = frozenset({"true", "1", "yes"})


@dataclass(frozen=True)
class BaseSettings:
    """Identidade e modo de execução do serviço.

    Attributes:
        environment: development | staging | production
        service_name: Valor do campo `service` nos logs e no /health
        log_level: Nível do handler JSON
        debug: Liga detalhes extras em desenvolvimento
    """

    environment: Environment = "development"
    service_name: str = "schedule-sync"
    log_level: str = "INFO"
    debug: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Retorna a lista de problemas encontrados (vazia = OK)."""
        errors: list[str] = []
        if self.environment not in get_args(Environment):
            errors.append(f"ENVIRONMENT inválido: {self.environment}")
        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")
        return errors


def _env_flag(key: str) -> bool:
    return os.getenv(key, "").strip().lower() in _TRUTHY


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """BaseSettings do processo, carregada do ambiente na primeira chamada."""
    raw_environment = os.getenv("ENVIRONMENT", "development").strip().lower()
    return BaseSettings(
        environment=_ENVIRONMENT_ALIASES.get(raw_environment, "development"),
        service_name=os.getenv("SERVICE_NAME", "schedule-sync"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        debug=_env_flag("DEBUG"),
    )
