"""Client OAuth (authorization code + PKCE) para o Google Calendar.

Conduz a FSM do vínculo: NO_TOKEN -> EXCHANGING -> AUTHENTICATED ->
REFRESHING -> (AUTHENTICATED | NO_TOKEN). Não faz retry interno; erros de
rede sobem como AuthError(NETWORK_ERROR) para a política do caller.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from app.domain.oauth_tokens import OAuthTokenSet
from fsm import OAuthState, OAuthStateMachine
from utils.errors import AuthError, AuthErrorKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.token_store import TokenStoreProtocol
    from config.settings.calendar import CalendarOAuthSettings

logger = logging.getLogger(__name__)

_COMPONENT = "google_oauth_client"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class GoogleOAuthClient:
    """Troca de code e refresh contra o token endpoint do Google."""

    __slots__ = ("_clock_ms", "_fsm", "_http", "_settings", "_token_store")

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        settings: CalendarOAuthSettings,
        token_store: TokenStoreProtocol,
        fsm: OAuthStateMachine | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._http = http_client
        self._settings = settings
        self._token_store = token_store
        self._fsm = fsm or OAuthStateMachine()
        self._clock_ms = clock_ms or _epoch_ms

    @property
    def state(self) -> OAuthState:
        return self._fsm.current_state

    @property
    def state_machine(self) -> OAuthStateMachine:
        return self._fsm

    async def restore(self) -> OAuthTokenSet | None:
        """Carrega tokens persistidos e alinha a FSM com o que foi encontrado."""
        tokens = await self._token_store.load()
        if tokens is not None:
            self._transition(OAuthState.AUTHENTICATED, "tokens_restored")
        return tokens

    async def exchange_code(
        self,
        code: str,
        code_verifier: str,
        redirect_uri: str,
    ) -> OAuthTokenSet:
        """Troca o authorization code por tokens e persiste o resultado.

        O verifier só existe no form desta chamada, descartado ao final
        independente do resultado.

        Raises:
            AuthError: INVALID_GRANT se o provedor rejeitar o code/verifier;
                NETWORK_ERROR em falha de transporte ou resposta invalida.
            TokenStoreError: se a gravação dos tokens falhar.
        """
        self._transition(OAuthState.EXCHANGING, "code_exchange_started")
        form = self._client_form(
            grant_type="authorization_code",
            code=code,
            redirect_uri=redirect_uri,
            code_verifier=code_verifier,
        )
        try:
            payload = await self._post_token_request(form, action="exchange_code")
            tokens = self._build_token_set(payload)
            await self._token_store.store(tokens)
        except Exception as exc:
            # Qualquer falha encerra a troca: a FSM nunca fica presa em EXCHANGING
            self._transition(OAuthState.NO_TOKEN, "code_exchange_failed")
            self._log_failure("exchange_code", exc)
            raise
        finally:
            form.clear()

        self._transition(OAuthState.AUTHENTICATED, "code_exchange_succeeded")
        logger.info(
            "oauth_code_exchanged",
            extra={
                "component": _COMPONENT,
                "action": "exchange_code",
                "result": "ok",
                "has_refresh_token": tokens.refresh_token is not None,
                "scope": tokens.scope,
            },
        )
        return tokens

    async def ensure_fresh_token(
        self,
        tokens: OAuthTokenSet,
        *,
        force: bool = False,
    ) -> OAuthTokenSet:
        """Retorna `tokens` intacto se vence depois da margem; senão renova.

        `force=True` renova mesmo dentro da validade (usado quando o provedor
        rejeita o access token no meio da paginação).

        Raises:
            AuthError: REAUTH_REQUIRED sem refresh token ou com refresh rejeitado
                (tokens removidos do store); NETWORK_ERROR em falha de transporte.
        """
        if self._fsm.current_state is OAuthState.NO_TOKEN:
            self._transition(OAuthState.AUTHENTICATED, "tokens_restored")

        margin = self._settings.token_refresh_margin_seconds
        if not force and not tokens.expires_within(self._clock_ms(), margin):
            return tokens

        if not tokens.refresh_token:
            await self._drop_linkage("refresh_token_missing")
            raise AuthError(AuthErrorKind.REAUTH_REQUIRED, "refresh_token_missing")

        self._transition(OAuthState.REFRESHING, "refresh_started")
        form = self._client_form(
            grant_type="refresh_token",
            refresh_token=tokens.refresh_token,
        )
        try:
            payload = await self._post_token_request(form, action="refresh")
            # O Google normalmente omite refresh_token na renovação; mantemos o anterior
            refreshed = self._build_token_set(
                payload,
                fallback_refresh_token=tokens.refresh_token,
                fallback_scope=tokens.scope,
            )
            await self._token_store.store(refreshed)
        except AuthError as exc:
            if exc.kind is AuthErrorKind.INVALID_GRANT:
                await self._drop_linkage("refresh_rejected")
                raise AuthError(AuthErrorKind.REAUTH_REQUIRED, "refresh_rejected") from exc
            self._transition(OAuthState.AUTHENTICATED, "refresh_failed")
            self._log_failure("refresh", exc)
            raise
        except Exception as exc:
            # Token anterior segue no store; o vínculo volta para AUTHENTICATED
            self._transition(OAuthState.AUTHENTICATED, "refresh_failed")
            self._log_failure("refresh", exc)
            raise
        finally:
            form.clear()

        self._transition(OAuthState.AUTHENTICATED, "refresh_succeeded")
        logger.info(
            "oauth_token_refreshed",
            extra={
                "component": _COMPONENT,
                "action": "refresh",
                "result": "ok",
                "forced": force,
            },
        )
        return refreshed

    async def sign_out(self) -> None:
        """Remove tokens persistidos e volta a FSM para NO_TOKEN."""
        await self._drop_linkage("signed_out")

    def _client_form(self, **fields: str) -> dict[str, str]:
        form = {"client_id": self._settings.google_client_id, **fields}
        if self._settings.google_client_secret:
            form["client_secret"] = self._settings.google_client_secret
        return form

    async def _post_token_request(self, form: dict[str, str], *, action: str) -> dict[str, Any]:
        try:
            response = await self._http.post(
                self._settings.google_token_endpoint,
                data=form,
                headers={"Accept": "application/json"},
                timeout=self._settings.http_timeout_seconds,
            )
        except httpx.TransportError as exc:
            raise AuthError(AuthErrorKind.NETWORK_ERROR, "token_endpoint_unreachable") from exc

        status_code = response.status_code
        if status_code == 429 or status_code >= 500:
            raise AuthError(AuthErrorKind.NETWORK_ERROR, f"token_endpoint_status_{status_code}")
        if status_code >= 400:
            raise AuthError(AuthErrorKind.INVALID_GRANT, _provider_error_code(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthError(AuthErrorKind.NETWORK_ERROR, "token_response_not_json") from exc
        if not isinstance(payload, dict):
            raise AuthError(AuthErrorKind.NETWORK_ERROR, "token_response_not_object")
        logger.debug(
            "oauth_token_endpoint_ok",
            extra={"component": _COMPONENT, "action": action, "status_code": status_code},
        )
        return payload

    def _build_token_set(
        self,
        payload: dict[str, Any],
        *,
        fallback_refresh_token: str | None = None,
        fallback_scope: str = "",
    ) -> OAuthTokenSet:
        access_token = payload.get("access_token")
        expires_in = payload.get("expires_in")
        # Sem expires_in do provedor não há vencimento confiável para gravar
        if not isinstance(access_token, str) or not access_token:
            raise AuthError(AuthErrorKind.NETWORK_ERROR, "token_response_missing_access_token")
        if isinstance(expires_in, bool) or not isinstance(expires_in, int | float):
            raise AuthError(AuthErrorKind.NETWORK_ERROR, "token_response_missing_expires_in")

        refresh_token = payload.get("refresh_token") or fallback_refresh_token
        scope = payload.get("scope") or fallback_scope
        try:
            return OAuthTokenSet(
                access_token=access_token,
                refresh_token=refresh_token,
                expiry_epoch_ms=self._clock_ms() + int(expires_in * 1000),
                scope=str(scope),
            )
        except ValidationError as exc:
            raise AuthError(AuthErrorKind.NETWORK_ERROR, "token_response_invalid") from exc

    async def _drop_linkage(self, trigger: str) -> None:
        await self._token_store.clear()
        self._transition(OAuthState.NO_TOKEN, trigger)
        logger.info(
            "oauth_linkage_dropped",
            extra={"component": _COMPONENT, "action": trigger, "result": "no_token"},
        )

    def _transition(self, target: OAuthState, trigger: str) -> None:
        if self._fsm.current_state is target:
            return
        result = self._fsm.transition(target, trigger)
        if not result.success:
            logger.warning(
                "oauth_transition_refused",
                extra={
                    "component": _COMPONENT,
                    "trigger": trigger,
                    "from_state": self._fsm.current_state.name,
                    "to_state": target.name,
                },
            )

    def _log_failure(self, action: str, exc: Exception) -> None:
        extra: dict[str, Any] = {"component": _COMPONENT, "action": action, "result": "error"}
        if isinstance(exc, AuthError):
            extra.update(exc.to_log_dict())
        else:
            extra["error_type"] = type(exc).__name__
        logger.warning("oauth_request_failed", extra=extra)


def _provider_error_code(response: httpx.Response) -> str:
    """Extrai o código de erro OAuth (ex: invalid_grant) sem ecoar o corpo."""
    try:
        body = response.json()
    except ValueError:
        return f"token_endpoint_status_{response.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    return str(error) if isinstance(error, str) and error else "invalid_grant"


__all__ = ["GoogleOAuthClient"]
