"""Protocolos e contratos do core da aplicação."""

from .event_fetcher import EventFetcherProtocol, OAuthExchangerProtocol
from .schedule_repository import ScheduleRepositoryProtocol
from .token_store import TokenStoreProtocol
from .verifier_store import CODE_VERIFIER_SESSION_KEY, VerifierStoreProtocol

__all__ = [
    "CODE_VERIFIER_SESSION_KEY",
    "EventFetcherProtocol",
    "OAuthExchangerProtocol",
    "ScheduleRepositoryProtocol",
    "TokenStoreProtocol",
    "VerifierStoreProtocol",
]
