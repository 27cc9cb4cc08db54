"""
Módulo FSM — máquina de estados do vínculo OAuth.

Estrutura:
    - states/: OAuthState
    - transitions/: VALID_TRANSITIONS
    - manager/: OAuthStateMachine
    - types/: StateTransition, TransitionResult
"""

from fsm.manager import OAuthStateMachine, create_oauth_fsm
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    IN_FLIGHT_STATES,
    OAuthState,
    is_in_flight,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "IN_FLIGHT_STATES",
    "VALID_TRANSITIONS",
    "OAuthState",
    "OAuthStateMachine",
    "StateTransition",
    "TransitionResult",
    "create_oauth_fsm",
    "get_valid_targets",
    "is_in_flight",
    "is_transition_valid",
    "validate_transition_map",
]
