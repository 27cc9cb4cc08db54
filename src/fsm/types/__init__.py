"""Registros de transição do vínculo OAuth (histórico auditável)."""

from fsm.types.transition import StateTransition, TransitionResult

__all__ = ["StateTransition", "TransitionResult"]
