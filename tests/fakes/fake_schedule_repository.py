"""Fake de repositório de agenda com falhas programáveis por chamada."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.schedule import ScheduleItem, ScheduleWindow, SourceKind


class FakeScheduleRepository:
    """Registra gravações e permite falhar na N-ésima chamada (1-based)."""

    def __init__(
        self,
        existing: list[ScheduleItem] | None = None,
        failures: dict[int, Exception] | None = None,
    ) -> None:
        self._existing = list(existing or [])
        self._failures = failures or {}
        self.create_calls = 0
        self.created: list[tuple[str, ScheduleItem]] = []
        self.list_calls: list[tuple[str, ScheduleWindow | None]] = []
        self.retire_calls: list[tuple[str, SourceKind, bool]] = []

    async def create_schedule_entity(self, user_id: str, item: ScheduleItem) -> str:
        self.create_calls += 1
        failure = self._failures.get(self.create_calls)
        if failure is not None:
            raise failure
        entity_id = f"ent-{self.create_calls}"
        self.created.append((user_id, item))
        return entity_id

    async def list_schedule_entities(
        self,
        user_id: str,
        window: ScheduleWindow | None = None,
    ) -> list[ScheduleItem]:
        self.list_calls.append((user_id, window))
        return self._existing + [item for owner, item in self.created if owner == user_id]

    async def retire_source_entities(
        self,
        user_id: str,
        source_kind: SourceKind,
        *,
        delete: bool = False,
    ) -> int:
        self.retire_calls.append((user_id, source_kind, delete))
        owned = [item for owner, item in self.created if owner == user_id]
        return sum(1 for item in self._existing + owned if item.source_kind is source_kind)
