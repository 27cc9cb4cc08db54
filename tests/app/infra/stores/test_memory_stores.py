"""Testes dos stores em memória."""

from __future__ import annotations

from datetime import UTC, date, datetime, time

import pytest

from app.domain.oauth_tokens import OAuthTokenSet
from app.domain.schedule import ScheduleItem, ScheduleWindow, SourceKind
from app.infra.stores.memory_stores import (
    MemoryScheduleRepository,
    MemoryTokenStore,
    MemoryVerifierStore,
)

TOKENS = OAuthTokenSet(access_token="a", refresh_token="r", expiry_epoch_ms=1_000)


def _item(
    event_date: date | None = None,
    source_kind: SourceKind = SourceKind.IMAGE,
) -> ScheduleItem:
    return ScheduleItem(
        id="image-0-x",
        title="CS101",
        day="Monday",
        start_time=time(10, 0),
        end_time=time(11, 0),
        source_kind=source_kind,
        event_date=event_date,
    )


class TestMemoryTokenStore:
    """Testes do MemoryTokenStore."""

    @pytest.mark.asyncio
    async def test_store_load_and_clear(self) -> None:
        store = MemoryTokenStore("user-1")

        await store.store(TOKENS)
        loaded = await store.load()
        await store.clear()

        assert loaded == TOKENS
        assert await store.load() is None

    @pytest.mark.asyncio
    async def test_shared_registry_isolates_accounts(self) -> None:
        registry: dict[str, OAuthTokenSet] = {}
        first = MemoryTokenStore("user-1", registry)
        second = MemoryTokenStore("user-2", registry)

        await first.store(TOKENS)

        assert await MemoryTokenStore("user-1", registry).load() == TOKENS
        assert await second.load() is None

    @pytest.mark.asyncio
    async def test_clear_without_tokens_is_noop(self) -> None:
        await MemoryTokenStore("user-1").clear()


class TestMemoryVerifierStore:
    """Verifier de uso único com expiração."""

    @pytest.mark.asyncio
    async def test_consume_is_single_use(self) -> None:
        store = MemoryVerifierStore()

        await store.save("user-1", "verifier-abc")

        assert await store.consume("user-1") == "verifier-abc"
        assert await store.consume("user-1") is None

    @pytest.mark.asyncio
    async def test_expired_verifier_is_not_returned(self) -> None:
        now = [100.0]
        store = MemoryVerifierStore(ttl_seconds=10, clock=lambda: now[0])

        await store.save("user-1", "verifier-abc")
        now[0] = 111.0

        assert await store.consume("user-1") is None

    @pytest.mark.asyncio
    async def test_save_discards_abandoned_sessions(self) -> None:
        now = [100.0]
        store = MemoryVerifierStore(ttl_seconds=10, clock=lambda: now[0])
        await store.save("abandoned", "verifier-old")
        await store.save("pending", "verifier-live")

        now[0] = 105.0
        await store.save("user-2", "verifier-new")
        assert store.pending_count == 3

        now[0] = 111.0
        await store.save("user-3", "verifier-late")

        assert store.pending_count == 2
        assert await store.consume("abandoned") is None
        assert await store.consume("user-2") == "verifier-new"


class TestMemoryScheduleRepository:
    """Repositório de aulas em memória."""

    @pytest.mark.asyncio
    async def test_create_assigns_entity_id(self) -> None:
        repository = MemoryScheduleRepository()

        first = await repository.create_schedule_entity("user-1", _item())
        second = await repository.create_schedule_entity("user-1", _item())
        listed = await repository.list_schedule_entities("user-1")

        assert (first, second) == ("cls_000001", "cls_000002")
        assert [item.id for item in listed] == ["cls_000001", "cls_000002"]
        assert await repository.list_schedule_entities("user-2") == []

    @pytest.mark.asyncio
    async def test_window_filters_dated_items_only(self) -> None:
        repository = MemoryScheduleRepository()
        await repository.create_schedule_entity("user-1", _item())
        await repository.create_schedule_entity("user-1", _item(date(2026, 10, 20)))
        await repository.create_schedule_entity("user-1", _item(date(2027, 6, 1)))
        window = ScheduleWindow(
            start=datetime(2026, 10, 12, tzinfo=UTC),
            end=datetime(2027, 1, 17, tzinfo=UTC),
        )

        listed = await repository.list_schedule_entities("user-1", window)

        assert [item.event_date for item in listed] == [None, date(2026, 10, 20)]

    @pytest.mark.asyncio
    async def test_retire_deactivates_only_matching_source(self) -> None:
        repository = MemoryScheduleRepository()
        await repository.create_schedule_entity("user-1", _item(source_kind=SourceKind.CALENDAR))
        await repository.create_schedule_entity("user-1", _item(source_kind=SourceKind.CALENDAR))
        await repository.create_schedule_entity("user-1", _item())
        await repository.create_schedule_entity("user-2", _item(source_kind=SourceKind.CALENDAR))

        retired = await repository.retire_source_entities("user-1", SourceKind.CALENDAR)

        assert retired == 2
        listed = await repository.list_schedule_entities("user-1")
        assert [item.source_kind for item in listed] == [SourceKind.IMAGE]
        assert len(repository._entities["user-1"]) == 3
        assert len(await repository.list_schedule_entities("user-2")) == 1

    @pytest.mark.asyncio
    async def test_retire_twice_counts_only_active_items(self) -> None:
        repository = MemoryScheduleRepository()
        await repository.create_schedule_entity("user-1", _item(source_kind=SourceKind.CALENDAR))

        assert await repository.retire_source_entities("user-1", SourceKind.CALENDAR) == 1
        assert await repository.retire_source_entities("user-1", SourceKind.CALENDAR) == 0

    @pytest.mark.asyncio
    async def test_retire_with_delete_removes_items(self) -> None:
        repository = MemoryScheduleRepository()
        await repository.create_schedule_entity("user-1", _item(source_kind=SourceKind.CALENDAR))
        await repository.create_schedule_entity("user-1", _item())

        retired = await repository.retire_source_entities(
            "user-1", SourceKind.CALENDAR, delete=True
        )

        assert retired == 1
        assert [item.id for item in repository._entities["user-1"].values()] == ["cls_000002"]
