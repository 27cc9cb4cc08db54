"""Exceções do domínio de sincronização de agenda.

Cada família carrega um `kind` explícito para que o caller decida a política
de retry sem inspecionar mensagens de texto.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitorias."""


class TokenStoreError(InfrastructureError):
    """Falha ao persistir ou remover credenciais OAuth em storage durável."""


class AuthErrorKind(StrEnum):
    INVALID_GRANT = "invalid_grant"
    REAUTH_REQUIRED = "reauth_required"
    NETWORK_ERROR = "network_error"


class FetchErrorKind(StrEnum):
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"


class ValidationErrorKind(StrEnum):
    UNPARSABLE_TIME = "unparsable_time"
    MISSING_FIELD = "missing_field"


class PersistenceErrorKind(StrEnum):
    TRANSIENT = "transient"
    PERMANENT = "permanent"


_RETRYABLE_KINDS: frozenset[str] = frozenset(
    {
        AuthErrorKind.NETWORK_ERROR,
        FetchErrorKind.RATE_LIMITED,
        FetchErrorKind.NETWORK_ERROR,
        PersistenceErrorKind.TRANSIENT,
    }
)


class ScheduleSyncError(RuntimeError):
    """Base tipada para falhas do pipeline de importação."""

    family = "schedule_sync"

    def __init__(self, kind: StrEnum, message: str = "") -> None:
        super().__init__(message or str(kind))
        self.kind = kind
        self.message = message or str(kind)

    @property
    def code(self) -> str:
        """Código estável no formato `<família>.<kind>`."""
        return f"{self.family}.{self.kind}"

    @property
    def retryable(self) -> bool:
        return self.kind in _RETRYABLE_KINDS

    def to_log_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.code,
            "error_type": type(self).__name__,
            "retryable": self.retryable,
        }


class AuthError(ScheduleSyncError):
    """Falha no ciclo de vida OAuth (troca de code ou refresh)."""

    family = "auth"

    def __init__(self, kind: AuthErrorKind, message: str = "") -> None:
        super().__init__(kind, message)


class FetchError(ScheduleSyncError):
    """Falha ao buscar eventos no calendário externo."""

    family = "fetch"

    def __init__(
        self,
        kind: FetchErrorKind,
        message: str = "",
        *,
        retry_after_seconds: float | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(kind, message)
        self.retry_after_seconds = retry_after_seconds
        self.status_code = status_code

    def to_log_dict(self) -> dict[str, Any]:
        data = super().to_log_dict()
        data["status_code"] = self.status_code
        if self.retry_after_seconds is not None:
            data["retry_after_seconds"] = self.retry_after_seconds
        return data


class ScheduleValidationError(ScheduleSyncError):
    """Item de agenda não confiável que falhou na validação."""

    family = "validation"

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: str = "",
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(kind, message)
        self.field = field


class PersistenceError(ScheduleSyncError):
    """Falha do colaborador de persistência ao gravar uma entidade."""

    family = "persistence"

    def __init__(self, kind: PersistenceErrorKind, message: str = "") -> None:
        super().__init__(kind, message)
