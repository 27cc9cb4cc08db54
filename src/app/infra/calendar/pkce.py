"""Helpers PKCE (RFC 7636) e montagem da URL de consentimento do Google."""

from __future__ import annotations

import base64
import hashlib
import secrets
from typing import TYPE_CHECKING
from urllib.parse import urlencode

if TYPE_CHECKING:
    from config.settings.calendar import CalendarOAuthSettings

# 64 bytes aleatórios -> 86 caracteres base64url (limite da RFC: 43..128)
_VERIFIER_ENTROPY_BYTES = 64


def generate_code_verifier() -> str:
    """Gera code verifier de alta entropia, URL-safe, sem padding."""
    return secrets.token_urlsafe(_VERIFIER_ENTROPY_BYTES)


def code_challenge_s256(code_verifier: str) -> str:
    """Deriva o code challenge S256: base64url(sha256(verifier)) sem '='."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def build_authorization_url(
    settings: CalendarOAuthSettings,
    *,
    redirect_uri: str,
    code_challenge: str,
    state: str | None = None,
) -> str:
    """URL de consentimento com acesso offline para obter refresh token."""
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": " ".join(settings.google_calendar_scopes),
        "access_type": "offline",
        # prompt=consent garante refresh_token mesmo em reconexoes
        "prompt": "consent",
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
    }
    if state:
        params["state"] = state
    return f"{settings.google_auth_endpoint}?{urlencode(params)}"


__all__ = ["build_authorization_url", "code_challenge_s256", "generate_code_verifier"]
