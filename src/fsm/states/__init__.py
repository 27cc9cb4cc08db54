"""Estados da FSM OAuth."""

from fsm.states.oauth import (
    DEFAULT_INITIAL_STATE,
    IN_FLIGHT_STATES,
    OAuthState,
    is_in_flight,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "IN_FLIGHT_STATES",
    "OAuthState",
    "is_in_flight",
]
