"""Contratos dos colaboradores externos do fluxo OAuth/calendário."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

    from app.domain.oauth_tokens import OAuthTokenSet


@runtime_checkable
class EventFetcherProtocol(Protocol):
    """Leitura paginada de eventos do calendário externo."""

    async def fetch_range(
        self,
        tokens: OAuthTokenSet,
        start: datetime,
        end: datetime,
        calendar_id: str | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Retorna todos os eventos da janela, com todas as páginas drenadas.

        Raises:
            FetchError: UNAUTHORIZED, RATE_LIMITED ou NETWORK_ERROR.
        """
        ...


@runtime_checkable
class OAuthExchangerProtocol(Protocol):
    """Troca de authorization code e refresh de tokens."""

    async def exchange_code(
        self,
        code: str,
        code_verifier: str,
        redirect_uri: str,
    ) -> OAuthTokenSet:
        ...

    async def ensure_fresh_token(
        self,
        tokens: OAuthTokenSet,
        *,
        force: bool = False,
    ) -> OAuthTokenSet:
        ...

    async def restore(self) -> OAuthTokenSet | None:
        ...

    async def sign_out(self) -> None:
        ...
