"""Montagem de recursos falsos para testes dos routers."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from app.bootstrap.dependencies import ScheduleSyncResources
from app.domain.oauth_tokens import OAuthTokenSet
from app.infra.stores import MemoryVerifierStore
from config.settings import CalendarOAuthSettings, StoreSettings
from tests.fakes.fake_event_fetcher import FakeEventFetcher
from tests.fakes.fake_schedule_repository import FakeScheduleRepository
from tests.fakes.token_endpoint import FakeTokenEndpoint, token_payload

if TYPE_CHECKING:
    from app.protocols import EventFetcherProtocol, VerifierStoreProtocol


def build_resources(
    *,
    fetcher: EventFetcherProtocol | None = None,
    endpoint: FakeTokenEndpoint | None = None,
    repository: FakeScheduleRepository | None = None,
    verifier_store: VerifierStoreProtocol | None = None,
    guest_user_id: str | None = None,
) -> ScheduleSyncResources:
    endpoint = endpoint or FakeTokenEndpoint((200, token_payload()))
    return ScheduleSyncResources(
        calendar_settings=CalendarOAuthSettings(
            google_client_id="client-123",
            google_redirect_uri="https://app.test/cb",
            google_token_endpoint="https://oauth.test/token",
        ),
        store_settings=StoreSettings(guest_user_id=guest_user_id),
        http_client=endpoint.client(),
        verifier_store=verifier_store or MemoryVerifierStore(),
        repository=repository or FakeScheduleRepository(),
        event_fetcher=fetcher or FakeEventFetcher([]),
    )


def link_account(resources: ScheduleSyncResources, user_id: str = "user-1") -> OAuthTokenSet:
    tokens = OAuthTokenSet(
        access_token="access-linked",
        refresh_token="refresh-linked",
        expiry_epoch_ms=int(time.time() * 1000) + 3_600_000,
        scope="calendar.readonly",
    )
    resources.token_registry[user_id] = tokens
    return tokens
