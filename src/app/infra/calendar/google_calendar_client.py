"""Client de leitura de eventos do Google Calendar com credenciais do usuário."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC
from typing import TYPE_CHECKING, Any

from google.auth.exceptions import TransportError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.infra.calendar.google_calendar_parsers import (
    http_status,
    is_rate_limited,
    retry_after_seconds,
)
from utils.errors import FetchError, FetchErrorKind

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

    from app.domain.oauth_tokens import OAuthTokenSet

logger = logging.getLogger(__name__)

_COMPONENT = "google_calendar_client"


class GoogleCalendarClient:
    """Busca paginada de eventos (`events.list`) numa janela de datas.

    Series recorrentes são expandidas pelo provedor (`singleEvents=true`).
    """

    __slots__ = ("_calendar_id", "_page_size")

    def __init__(self, *, calendar_id: str = "primary", page_size: int = 250) -> None:
        self._calendar_id = calendar_id
        self._page_size = page_size

    async def fetch_range(
        self,
        tokens: OAuthTokenSet,
        start: datetime,
        end: datetime,
        calendar_id: str | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Drena todas as páginas da janela antes de retornar.

        `calendar_id` sobrescreve, nesta chamada, o calendário configurado.

        Uma rejeição do token no meio da paginação descarta as páginas já lidas:
        o caller renova o token e repete a janela inteira.
        """
        if start >= end:
            raise ValueError("start deve ser anterior a end")

        events: list[dict[str, Any]] = []
        page_token: str | None = None
        pages = 0
        while True:
            params = self._list_params(calendar_id or self._calendar_id, start, end, page_token)
            try:
                response = await asyncio.to_thread(
                    self._list_events_sync, tokens.access_token, params
                )
            except HttpError as exc:
                raise self._map_http_error(exc, pages) from exc
            except (TransportError, OSError) as exc:
                self._log_fetch_error(pages, status_code=None, kind=FetchErrorKind.NETWORK_ERROR)
                raise FetchError(FetchErrorKind.NETWORK_ERROR, "calendar_unreachable") from exc

            pages += 1
            items = response.get("items") if isinstance(response, dict) else None
            if isinstance(items, list):
                events.extend(item for item in items if isinstance(item, dict))
            page_token = response.get("nextPageToken") if isinstance(response, dict) else None
            if not page_token:
                break

        logger.info(
            "calendar_events_fetched",
            extra={
                "component": _COMPONENT,
                "action": "fetch_range",
                "result": "ok",
                "page_count": pages,
                "event_count": len(events),
            },
        )
        return iter(events)

    def _list_params(
        self,
        calendar_id: str,
        start: datetime,
        end: datetime,
        page_token: str | None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "calendarId": calendar_id,
            "timeMin": _rfc3339(start),
            "timeMax": _rfc3339(end),
            "singleEvents": True,
            "orderBy": "startTime",
            "maxResults": self._page_size,
        }
        if page_token:
            params["pageToken"] = page_token
        return params

    def _list_events_sync(self, access_token: str, params: dict[str, Any]) -> dict[str, Any]:
        # Service local à chamada: httplib2 não é thread-safe
        credentials = Credentials(token=access_token)
        service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        return service.events().list(**params).execute()

    def _map_http_error(self, exc: HttpError, pages: int) -> FetchError:
        status_code = http_status(exc)
        if is_rate_limited(exc):
            error = FetchError(
                FetchErrorKind.RATE_LIMITED,
                "calendar_rate_limited",
                retry_after_seconds=retry_after_seconds(exc),
                status_code=status_code,
            )
        elif status_code in {401, 403}:
            error = FetchError(
                FetchErrorKind.UNAUTHORIZED,
                "calendar_token_rejected",
                status_code=status_code,
            )
        else:
            error = FetchError(
                FetchErrorKind.NETWORK_ERROR,
                "calendar_http_error",
                status_code=status_code,
            )
        self._log_fetch_error(pages, status_code=status_code, kind=error.kind)
        return error

    def _log_fetch_error(
        self,
        pages: int,
        *,
        status_code: int | None,
        kind: FetchErrorKind,
    ) -> None:
        logger.warning(
            "calendar_fetch_failed",
            extra={
                "component": _COMPONENT,
                "action": "fetch_range",
                "result": str(kind),
                "status_code": status_code,
                "pages_read": pages,
            },
        )


def _rfc3339(value: datetime) -> str:
    # A API exige offset explícito; datetimes ingenuos são tratados como UTC
    aware = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return aware.isoformat()


__all__ = ["GoogleCalendarClient"]
