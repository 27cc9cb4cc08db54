"""Registros imutáveis das mudanças de estado do vínculo OAuth."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.oauth import OAuthState


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class StateTransition:
    """Uma mudança aplicada: origem, destino e o gatilho que a causou.

    `metadata` vai para os logs; nunca carrega tokens nem code verifier.
    """

    from_state: OAuthState
    to_state: OAuthState
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    def to_log_dict(self) -> dict[str, Any]:
        return {
            "from_state": self.from_state.name,
            "to_state": self.to_state.name,
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """Resultado de `OAuthStateMachine.transition`: aplicada ou recusada."""

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success != (self.transition is not None):
            raise ValueError("transition presente se e somente se success=True")
        if not self.success and not self.error_reason:
            raise ValueError("Transição recusada exige error_reason")

    @classmethod
    def accepted(cls, transition: StateTransition) -> TransitionResult:
        return cls(success=True, transition=transition)

    @classmethod
    def refused(cls, reason: str) -> TransitionResult:
        return cls(success=False, error_reason=reason)
