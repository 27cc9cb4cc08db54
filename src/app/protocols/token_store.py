"""Contrato de persistência das credenciais OAuth de uma conta."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.domain.oauth_tokens import OAuthTokenSet


@runtime_checkable
class TokenStoreProtocol(Protocol):
    """Store de tokens ligado a uma única conta externa.

    Falhas de gravação propagam como TokenStoreError: perder o refresh
    token obriga o usuário a autenticar de novo.
    """

    async def store(self, tokens: OAuthTokenSet) -> None:
        """Sobrescreve o token set anterior por inteiro (sem merge de campos)."""
        ...

    async def load(self) -> OAuthTokenSet | None:
        """Retorna None quando não há token; nunca lança para 'não encontrado'."""
        ...

    async def clear(self) -> None:
        """Remove o token set (sign-out ou falha irrecuperável)."""
        ...
