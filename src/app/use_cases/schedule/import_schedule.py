"""Use case de importação de agenda: calendário externo ou itens extraídos.

Fluxo estritamente sequencial por execução:
fetch -> normalize -> reconcile -> commit.

Uma instância por sessão/usuário, com colaboradores injetados. O caso de
uso não serializa execuções concorrentes do mesmo usuário; essa política
fica com o caller (ex: desabilitar o gatilho enquanto há uma em andamento).
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from app.domain.schedule import ImportResult, ScheduleWindow, SourceKind
from app.infra.calendar.pkce import (
    build_authorization_url,
    code_challenge_s256,
    generate_code_verifier,
)
from app.observability import import_run
from app.services.import_committer import ImportCommitter
from app.services.schedule_normalizer import ScheduleNormalizer
from app.services.schedule_reconciler import reconcile
from utils.errors import AuthError, AuthErrorKind, FetchError, FetchErrorKind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from app.domain.oauth_tokens import OAuthTokenSet
    from app.domain.schedule import NormalizationResult
    from app.protocols.event_fetcher import EventFetcherProtocol, OAuthExchangerProtocol
    from app.protocols.schedule_repository import ScheduleRepositoryProtocol
    from app.protocols.verifier_store import VerifierStoreProtocol
    from config.settings.calendar import CalendarOAuthSettings

logger = logging.getLogger(__name__)

_COMPONENT = "schedule_import"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ScheduleImportService:
    """Orquestra autorização, sincronização e importação para um usuário."""

    def __init__(
        self,
        *,
        session_id: str,
        oauth_client: OAuthExchangerProtocol,
        event_fetcher: EventFetcherProtocol,
        repository: ScheduleRepositoryProtocol,
        verifier_store: VerifierStoreProtocol,
        settings: CalendarOAuthSettings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not session_id:
            raise ValueError("session_id obrigatório")
        self._session_id = session_id
        self._oauth = oauth_client
        self._fetcher = event_fetcher
        self._repository = repository
        self._verifier_store = verifier_store
        self._settings = settings
        self._clock = clock or _utc_now
        self._normalizer = ScheduleNormalizer(settings.schedule_timezone)
        self._committer = ImportCommitter(repository)

    async def start_authorization(self, redirect_uri: str | None = None) -> str:
        """Gera verifier novo, guarda na sessão e retorna a URL de consentimento."""
        verifier = generate_code_verifier()
        await self._verifier_store.save(self._session_id, verifier)
        url = build_authorization_url(
            self._settings,
            redirect_uri=redirect_uri or self._settings.google_redirect_uri,
            code_challenge=code_challenge_s256(verifier),
        )
        logger.info(
            "oauth_authorization_started",
            extra={"component": _COMPONENT, "action": "start_authorization", "result": "ok"},
        )
        return url

    async def complete_authorization(
        self,
        code: str,
        redirect_uri: str | None = None,
    ) -> OAuthTokenSet:
        """Consome o verifier da sessão (uso único) e troca o code por tokens.

        Raises:
            AuthError: INVALID_GRANT quando não há verifier pendente ou o
                provedor rejeita o code.
        """
        if not code:
            raise AuthError(AuthErrorKind.INVALID_GRANT, "authorization_code_missing")
        verifier = await self._verifier_store.consume(self._session_id)
        if verifier is None:
            raise AuthError(AuthErrorKind.INVALID_GRANT, "code_verifier_missing")
        return await self._oauth.exchange_code(
            code,
            verifier,
            redirect_uri or self._settings.google_redirect_uri,
        )

    async def sync_calendar(
        self,
        user_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        calendar_id: str | None = None,
    ) -> ImportResult:
        """Importa eventos da janela; repete a janela inteira uma vez se o token for rejeitado.

        `calendar_id` substitui o calendário configurado apenas nesta execução.

        Raises:
            AuthError: REAUTH_REQUIRED sem tokens ou com refresh rejeitado.
            FetchError: RATE_LIMITED/NETWORK_ERROR, ou UNAUTHORIZED na segunda tentativa.
        """
        _require_user(user_id)
        window = self._resolve_window(start, end)

        with import_run() as run_id:
            logger.info(
                "schedule_sync_started",
                extra={
                    "component": _COMPONENT,
                    "action": "sync_calendar",
                    "run_id": run_id,
                    "window_start": window.start.isoformat(),
                    "window_end": window.end.isoformat(),
                },
            )
            tokens = await self._oauth.restore()
            if tokens is None:
                raise AuthError(AuthErrorKind.REAUTH_REQUIRED, "no_token")
            tokens = await self._oauth.ensure_fresh_token(tokens)

            try:
                events = list(
                    await self._fetcher.fetch_range(tokens, window.start, window.end, calendar_id)
                )
            except FetchError as exc:
                if exc.kind is not FetchErrorKind.UNAUTHORIZED:
                    raise
                logger.info(
                    "schedule_sync_retrying_after_refresh",
                    extra={"component": _COMPONENT, "action": "sync_calendar"},
                )
                tokens = await self._oauth.ensure_fresh_token(tokens, force=True)
                events = list(
                    await self._fetcher.fetch_range(tokens, window.start, window.end, calendar_id)
                )

            normalized = self._normalizer.normalize(SourceKind.CALENDAR, events)
            return await self._reconcile_and_commit(user_id, normalized, window, "sync_calendar")

    async def import_extracted(self, user_id: str, items: Iterable[Any]) -> ImportResult:
        """Importa itens extraídos de imagem (entrada não confiável)."""
        _require_user(user_id)
        with import_run():
            normalized = self._normalizer.normalize(SourceKind.IMAGE, items)
            return await self._reconcile_and_commit(user_id, normalized, None, "import_extracted")

    async def disconnect(self, *, delete_imported: bool = False) -> int:
        """Sign-out: remove tokens e aposenta os itens importados do calendário.

        Os itens de origem CALENDAR do usuário da sessão são desativados (ou
        removidos com `delete_imported=True`) e deixam de contar na
        reconciliação; um novo vínculo volta a importá-los.

        Returns:
            Quantidade de itens desativados ou removidos.
        """
        await self._oauth.sign_out()
        retired = await self._repository.retire_source_entities(
            self._session_id,
            SourceKind.CALENDAR,
            delete=delete_imported,
        )
        logger.info(
            "calendar_disconnected",
            extra={
                "component": _COMPONENT,
                "action": "disconnect",
                "result": "ok",
                "retired_count": retired,
                "deleted": delete_imported,
            },
        )
        return retired

    def _resolve_window(self, start: datetime | None, end: datetime | None) -> ScheduleWindow:
        now = self._clock()
        return ScheduleWindow(
            start=_as_utc(start) or now - timedelta(days=self._settings.sync_lookback_days),
            end=_as_utc(end) or now + timedelta(days=self._settings.sync_lookahead_days),
        )

    async def _reconcile_and_commit(
        self,
        user_id: str,
        normalized: NormalizationResult,
        window: ScheduleWindow | None,
        action: str,
    ) -> ImportResult:
        existing = await self._repository.list_schedule_entities(user_id, window)
        decision = reconcile(existing, normalized.items)
        committed = await self._committer.commit(user_id, decision.to_create)

        result = ImportResult(
            count=committed.count,
            created_ids=committed.created_ids,
            skipped_count=len(decision.to_skip),
            errors=normalized.errors + committed.errors,
        )
        logger.info(
            "schedule_import_finished",
            extra={
                "component": _COMPONENT,
                "action": action,
                "result": "partial" if result.errors else "ok",
                "created_count": result.count,
                "skipped_count": result.skipped_count,
                "error_count": len(result.errors),
            },
        )
        return result


def _as_utc(value: datetime | None) -> datetime | None:
    """Datetime sem fuso é interpretado como UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _require_user(user_id: str) -> None:
    if not user_id or not user_id.strip():
        raise ValueError("user_id obrigatório")


__all__ = ["ScheduleImportService"]
