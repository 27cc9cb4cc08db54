"""Gravação dos itens aceitos, um a um, com falha parcial reportada."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.schedule import ImportIssue, ImportResult
from utils.errors import PersistenceError, PersistenceErrorKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.schedule import ScheduleItem
    from app.protocols.schedule_repository import ScheduleRepositoryProtocol

logger = logging.getLogger(__name__)

_COMPONENT = "import_committer"


class ImportCommitter:
    """Persiste cada item de forma independente; nunca lança por falha de item.

    Sem retry interno (at-least-once por chamada). `created_ids` segue a
    ordem de `to_create`, omitindo os itens que falharam.
    """

    __slots__ = ("_repository",)

    def __init__(self, repository: ScheduleRepositoryProtocol) -> None:
        self._repository = repository

    async def commit(self, user_id: str, to_create: Sequence[ScheduleItem]) -> ImportResult:
        created_ids: list[str] = []
        errors: list[ImportIssue] = []

        for item in to_create:
            try:
                entity_id = await self._repository.create_schedule_entity(user_id, item)
            except PersistenceError as exc:
                errors.append(_issue(item, exc.message, exc.code, exc.retryable))
            except Exception as exc:  # noqa: BLE001 - falha de um item não aborta o lote
                errors.append(
                    _issue(
                        item,
                        type(exc).__name__,
                        f"persistence.{PersistenceErrorKind.PERMANENT}",
                        retryable=False,
                    )
                )
            else:
                created_ids.append(entity_id)

        logger.info(
            "schedule_import_committed",
            extra={
                "component": _COMPONENT,
                "action": "commit",
                "result": "partial" if errors else "ok",
                "created_count": len(created_ids),
                "failed_count": len(errors),
            },
        )
        return ImportResult(
            count=len(created_ids),
            created_ids=tuple(created_ids),
            errors=tuple(errors),
        )


def _issue(item: ScheduleItem, reason: str, code: str, retryable: bool) -> ImportIssue:
    ref = f"calendar:{item.external_id}" if item.external_id else f"{item.id}:{item.title}"
    return ImportIssue(item=ref, reason=reason, stage="commit", code=code, retryable=retryable)


__all__ = ["ImportCommitter"]
