"""Máquina de estados de uma conta de calendário vinculada.

Transições fora de VALID_TRANSITIONS são recusadas com um TransitionResult
(sem exceção); o chamador decide se isso é erro.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from fsm.states.oauth import DEFAULT_INITIAL_STATE, OAuthState, is_in_flight
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

# Uma conta troca de estado poucas vezes por sessão; o limite só evita
# crescimento sem fim em processos longos.
MAX_HISTORY = 100


class OAuthStateMachine:
    """Estado atual do vínculo OAuth mais o histórico recente de transições."""

    __slots__ = ("_account_id", "_history", "_state")

    def __init__(
        self,
        initial_state: OAuthState | None = None,
        account_id: str = "",
    ) -> None:
        self._state = initial_state or DEFAULT_INITIAL_STATE
        self._account_id = account_id
        self._history: deque[StateTransition] = deque(maxlen=MAX_HISTORY)

    @property
    def current_state(self) -> OAuthState:
        return self._state

    @property
    def account_id(self) -> str:
        return self._account_id

    @property
    def history(self) -> list[StateTransition]:
        return list(self._history)

    @property
    def is_in_flight(self) -> bool:
        return is_in_flight(self._state)

    def can_transition_to(self, target: OAuthState) -> bool:
        return is_transition_valid(self._state, target)

    def transition(
        self,
        target: OAuthState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """Aplica `current_state -> target` se o mapa permitir.

        Args:
            target: Estado de destino.
            trigger: Nome do evento (ex: 'refresh_started').
            metadata: Campos de auditoria, sem segredos.
        """
        if not self.can_transition_to(target):
            return TransitionResult.refused(
                f"Transição inválida: {self._state.name} → {target.name}"
            )
        applied = StateTransition(
            from_state=self._state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._state = target
        self._history.append(applied)
        return TransitionResult.accepted(applied)

    def get_state_summary(self) -> dict[str, Any]:
        return {
            "account_id": self._account_id,
            "current_state": self._state.name,
            "transition_count": len(self._history),
            "valid_targets": sorted(state.name for state in get_valid_targets(self._state)),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        return [transition.to_log_dict() for transition in self._history]

    def reset(self) -> None:
        """Volta para NO_TOKEN e esquece o histórico."""
        self._state = DEFAULT_INITIAL_STATE
        self._history.clear()


def create_oauth_fsm(
    account_id: str,
    initial_state: OAuthState | None = None,
) -> OAuthStateMachine:
    return OAuthStateMachine(initial_state=initial_state, account_id=account_id)
