"""
Regras de transição válidas entre estados do vínculo OAuth.

Chave: estado de origem; valor: estados de destino permitidos.
"""

from fsm.states.oauth import OAuthState

TransitionMap = dict[OAuthState, frozenset[OAuthState]]

VALID_TRANSITIONS: TransitionMap = {
    # NO_TOKEN: inicia consentimento ou restaura token persistido
    OAuthState.NO_TOKEN: frozenset({
        OAuthState.EXCHANGING,
        OAuthState.AUTHENTICATED,
    }),

    # EXCHANGING: provedor aceitou ou rejeitou o code
    OAuthState.EXCHANGING: frozenset({
        OAuthState.AUTHENTICATED,
        OAuthState.NO_TOKEN,
    }),

    # AUTHENTICATED: renova, reconecta ou desconecta
    OAuthState.AUTHENTICATED: frozenset({
        OAuthState.REFRESHING,
        OAuthState.EXCHANGING,
        OAuthState.NO_TOKEN,
    }),

    # REFRESHING: renovado (ou falha de rede) ou reautenticação exigida
    OAuthState.REFRESHING: frozenset({
        OAuthState.AUTHENTICATED,
        OAuthState.NO_TOKEN,
    }),
}


def get_valid_targets(state: OAuthState) -> frozenset[OAuthState]:
    """Retorna os estados de destino válidos para um estado de origem."""
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: OAuthState, to_state: OAuthState) -> bool:
    """Verifica se uma transição é permitida pelo mapa."""
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in OAuthState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for from_state, targets in VALID_TRANSITIONS.items():
        if from_state in targets:
            errors.append(f"Estado {from_state.name} não deve transitar para si mesmo")
        for target in targets:
            if not isinstance(target, OAuthState):
                errors.append(
                    f"Transição {from_state.name} → {target}: destino inválido"
                )

    return errors
