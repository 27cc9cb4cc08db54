"""Settings de integração OAuth com Google Calendar.

Centralizar a leitura de env aqui evita espalhar parse de configuração
pelo pipeline de importação e pela API.
"""

from __future__ import annotations

import os
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field

GOOGLE_AUTH_ENDPOINT = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"
CALENDAR_READONLY_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"


class CalendarOAuthSettings(BaseModel):
    """Configurações do cliente OAuth e da janela de sincronização."""

    model_config = ConfigDict(extra="ignore")

    google_client_id: str = Field(
        default="",
        description="Client ID OAuth registrado no Google Cloud.",
    )
    google_client_secret: str | None = Field(
        default=None,
        description="Client secret; opcional para clientes públicos com PKCE.",
    )
    google_redirect_uri: str = Field(
        default="",
        description="Redirect URI padrão registrado no console OAuth.",
    )
    google_auth_endpoint: str = Field(default=GOOGLE_AUTH_ENDPOINT)
    google_token_endpoint: str = Field(default=GOOGLE_TOKEN_ENDPOINT)
    google_calendar_scopes: tuple[str, ...] = Field(
        default=(CALENDAR_READONLY_SCOPE,),
        description="Escopos solicitados no consentimento.",
    )
    google_calendar_id: str = Field(
        default="primary",
        description="Calendário lido na sincronização.",
    )
    schedule_timezone: str = Field(
        default="UTC",
        description="Timezone local do usuário para derivar dia e horário.",
    )
    token_refresh_margin_seconds: int = Field(
        default=60,
        ge=0,
        description="Margem antes do vencimento que dispara refresh.",
    )
    http_timeout_seconds: float = Field(default=15.0, gt=0)
    events_page_size: int = Field(default=250, ge=1, le=2500)
    sync_lookback_days: int = Field(default=7, ge=0)
    sync_lookahead_days: int = Field(default=90, ge=1)

    def validate(self) -> list[str]:  # type: ignore[override]
        """Valida configurações obrigatórias.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []
        if not self.google_client_id:
            errors.append("GOOGLE_CLIENT_ID não configurado")
        try:
            ZoneInfo(self.schedule_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"SCHEDULE_TIMEZONE inválido: {self.schedule_timezone}")
        return errors


def _read_optional_env(key: str) -> str | None:
    """Retorna valor opcional da env sem propagar string vazia."""
    raw_value = os.getenv(key)
    if raw_value is None:
        return None
    stripped_value = raw_value.strip()
    return stripped_value or None


def _parse_scopes(value: str) -> tuple[str, ...]:
    """Aceita escopos separados por espaco ou virgula."""
    parts = value.replace(",", " ").split()
    return tuple(parts) or (CALENDAR_READONLY_SCOPE,)


def _load_calendar_oauth_from_env() -> CalendarOAuthSettings:
    """Carrega CalendarOAuthSettings a partir de variáveis de ambiente."""
    return CalendarOAuthSettings(
        google_client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        google_client_secret=_read_optional_env("GOOGLE_CLIENT_SECRET"),
        google_redirect_uri=os.getenv("GOOGLE_REDIRECT_URI", ""),
        google_auth_endpoint=os.getenv("GOOGLE_AUTH_ENDPOINT", GOOGLE_AUTH_ENDPOINT),
        google_token_endpoint=os.getenv("GOOGLE_TOKEN_ENDPOINT", GOOGLE_TOKEN_ENDPOINT),
        google_calendar_scopes=_parse_scopes(
            os.getenv("GOOGLE_CALENDAR_SCOPES", CALENDAR_READONLY_SCOPE)
        ),
        google_calendar_id=os.getenv("GOOGLE_CALENDAR_ID", "primary"),
        schedule_timezone=os.getenv("SCHEDULE_TIMEZONE", "UTC"),
        token_refresh_margin_seconds=int(os.getenv("TOKEN_REFRESH_MARGIN_SECONDS", "60")),
        http_timeout_seconds=float(os.getenv("CALENDAR_HTTP_TIMEOUT_SECONDS", "15")),
        events_page_size=int(os.getenv("CALENDAR_EVENTS_PAGE_SIZE", "250")),
        sync_lookback_days=int(os.getenv("SYNC_LOOKBACK_DAYS", "7")),
        sync_lookahead_days=int(os.getenv("SYNC_LOOKAHEAD_DAYS", "90")),
    )


@lru_cache(maxsize=1)
def get_calendar_oauth_settings() -> CalendarOAuthSettings:
    """Retorna instância cacheada de CalendarOAuthSettings."""
    return _load_calendar_oauth_from_env()


__all__ = [
    "CALENDAR_READONLY_SCOPE",
    "GOOGLE_AUTH_ENDPOINT",
    "GOOGLE_TOKEN_ENDPOINT",
    "CalendarOAuthSettings",
    "get_calendar_oauth_settings",
]
