"""
Exports públicos do módulo fsm/manager.
"""

from fsm.manager.machine import OAuthStateMachine, create_oauth_fsm

__all__ = [
    "OAuthStateMachine",
    "create_oauth_fsm",
]
