"""
Estados do vínculo OAuth com o calendário externo.

NO_TOKEN → EXCHANGING → AUTHENTICATED → REFRESHING → (AUTHENTICATED | NO_TOKEN)
"""

from enum import StrEnum


class OAuthState(StrEnum):
    """
    Estados canônicos do ciclo de vida do token OAuth.

    - NO_TOKEN: Nenhum token utilizável; exige consentimento do usuário
    - EXCHANGING: Troca do authorization code em andamento
    - AUTHENTICATED: Token válido disponível no TokenStore
    - REFRESHING: Renovação via refresh_token em andamento
    """

    NO_TOKEN = "NO_TOKEN"
    EXCHANGING = "EXCHANGING"
    AUTHENTICATED = "AUTHENTICATED"
    REFRESHING = "REFRESHING"

    def __str__(self) -> str:
        return self.value


DEFAULT_INITIAL_STATE: OAuthState = OAuthState.NO_TOKEN

# Estados em que há uma chamada de rede pendente
IN_FLIGHT_STATES: frozenset[OAuthState] = frozenset({
    OAuthState.EXCHANGING,
    OAuthState.REFRESHING,
})


def is_in_flight(state: OAuthState) -> bool:
    """Verifica se o estado representa uma chamada ao provedor em andamento."""
    return state in IN_FLIGHT_STATES
