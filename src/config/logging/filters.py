"""Filters de logging para injeção de contexto e proteção de segredos.

- ImportRunFilter: adiciona service e run_id da importação corrente.
- SecretRedactionFilter: mascara tokens OAuth e o code verifier PKCE
  caso algum chamador os passe em `extra`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[REDACTED]"

SENSITIVE_KEYS = frozenset(
    {
        "access_token",
        "refresh_token",
        "code",
        "code_verifier",
        "client_secret",
    }
)


class ImportRunFilter(logging.Filter):
    """Injeta run_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        run_id_getter: Função que retorna o run_id atual.
            Se não fornecida, usa string vazia.
    """

    def __init__(
        self,
        service_name: str,
        run_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_run_id = run_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        # run_id explícito via `extra` tem precedência
        existing = getattr(record, "run_id", None)
        record.run_id = existing if existing else self._get_run_id()
        record.service = self._service_name
        return True


class SecretRedactionFilter(logging.Filter):
    """Substitui valores de chaves sensíveis por um marcador fixo.

    Nunca descarta o record; apenas reescreve atributos vindos de `extra`.
    """

    def __init__(self, keys: frozenset[str] = SENSITIVE_KEYS) -> None:
        super().__init__()
        self._keys = keys

    def filter(self, record: logging.LogRecord) -> bool:
        for key in self._keys:
            if key in record.__dict__ and record.__dict__[key] is not None:
                record.__dict__[key] = REDACTED
        return True
