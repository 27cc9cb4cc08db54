"""Contrato do colaborador de persistência das aulas importadas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.domain.schedule import ScheduleItem, ScheduleWindow, SourceKind


@runtime_checkable
class ScheduleRepositoryProtocol(Protocol):
    """Persistência de entidades de aula por usuário."""

    async def create_schedule_entity(self, user_id: str, item: ScheduleItem) -> str:
        """Grava o item e retorna o id da entidade criada.

        Raises:
            PersistenceError: TRANSIENT ou PERMANENT conforme a causa.
        """
        ...

    async def list_schedule_entities(
        self,
        user_id: str,
        window: ScheduleWindow | None = None,
    ) -> list[ScheduleItem]:
        """Snapshot dos itens ativos já persistidos do usuário para a janela."""
        ...

    async def retire_source_entities(
        self,
        user_id: str,
        source_kind: SourceKind,
        *,
        delete: bool = False,
    ) -> int:
        """Desativa (ou remove, com `delete=True`) os itens ativos de uma origem.

        Retorna quantos itens foram afetados.

        Raises:
            PersistenceError: se a leitura dos itens falhar.
        """
        ...
