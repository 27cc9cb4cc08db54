"""Contrato do valor de sessão de uso único que guarda o code verifier PKCE."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

CODE_VERIFIER_SESSION_KEY = "google_calendar_code_verifier"


@runtime_checkable
class VerifierStoreProtocol(Protocol):
    """Guarda o verifier entre o início da autorização e o callback."""

    async def save(self, session_id: str, verifier: str) -> None:
        """Grava o verifier da sessão, substituindo qualquer valor anterior."""
        ...

    async def consume(self, session_id: str) -> str | None:
        """Lê e remove atomicamente; None se ausente ou expirado."""
        ...
