"""Modelo de domínio das credenciais OAuth do calendário externo."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OAuthTokenSet(BaseModel):
    """Credenciais de uma conta vinculada.

    `expiry_epoch_ms` sempre deriva do `expires_in` informado pelo provedor
    no momento da gravação; nunca é estimado localmente.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    access_token: str = Field(..., min_length=1, description="Access token vigente.")
    refresh_token: str | None = Field(
        default=None,
        description="Refresh token; ausente quando o provedor não concede acesso offline.",
    )
    expiry_epoch_ms: int = Field(..., ge=0, description="Vencimento em epoch ms.")
    scope: str = Field(default="", description="Escopos concedidos, separados por espaco.")

    def expires_within(self, now_ms: int, margin_seconds: int) -> bool:
        """True quando restam `margin_seconds` ou menos até o vencimento."""
        return self.expiry_epoch_ms - now_ms <= margin_seconds * 1000

    def __repr__(self) -> str:
        # Nunca expor tokens em repr/logs
        return (
            f"OAuthTokenSet(expiry_epoch_ms={self.expiry_epoch_ms}, "
            f"scope={self.scope!r}, has_refresh_token={self.refresh_token is not None})"
        )

    __str__ = __repr__


__all__ = ["OAuthTokenSet"]
