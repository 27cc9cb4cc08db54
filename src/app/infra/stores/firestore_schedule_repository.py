"""Firestore Schedule Repository — aulas importadas por usuário.

Estrutura: users/{user_id}/schedule_classes/{entity_id}
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from google.api_core import exceptions as gexc
from pydantic import ValidationError

from app.domain.schedule import ScheduleItem, SourceKind
from app.protocols.schedule_repository import ScheduleRepositoryProtocol
from utils.errors import PersistenceError, PersistenceErrorKind

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore import CollectionReference

    from app.domain.schedule import ScheduleWindow

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
SCHEDULE_SUBCOLLECTION = "schedule_classes"

_TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    gexc.ServiceUnavailable,
    gexc.DeadlineExceeded,
    gexc.InternalServerError,
    gexc.TooManyRequests,
    gexc.RetryError,
)


class FirestoreScheduleRepository(ScheduleRepositoryProtocol):
    """Repositório de aulas usando Firestore (client síncrono em thread)."""

    def __init__(self, firestore_client: FirestoreClient) -> None:
        self._db = firestore_client

    def _collection(self, user_id: str) -> CollectionReference:
        return (
            self._db.collection(USERS_COLLECTION)
            .document(user_id)
            .collection(SCHEDULE_SUBCOLLECTION)
        )

    async def create_schedule_entity(self, user_id: str, item: ScheduleItem) -> str:
        return await asyncio.to_thread(self._create_sync, user_id, item)

    def _create_sync(self, user_id: str, item: ScheduleItem) -> str:
        data: dict[str, Any] = item.to_entity_dict()
        data["imported_at"] = datetime.now(UTC)
        try:
            doc_ref = self._collection(user_id).document()
            doc_ref.set(data)
        except (*_TRANSIENT_ERRORS, gexc.GoogleAPICallError) as exc:
            raise _to_persistence_error(exc, "schedule_entity_create_failed") from exc
        logger.debug(
            "schedule_entity_created",
            extra={"source_kind": item.source_kind.value},
        )
        return doc_ref.id

    async def list_schedule_entities(
        self,
        user_id: str,
        window: ScheduleWindow | None = None,
    ) -> list[ScheduleItem]:
        return await asyncio.to_thread(self._list_sync, user_id, window)

    def _list_sync(self, user_id: str, window: ScheduleWindow | None) -> list[ScheduleItem]:
        try:
            snapshots = list(self._collection(user_id).stream())
        except (*_TRANSIENT_ERRORS, gexc.GoogleAPICallError) as exc:
            raise _to_persistence_error(exc, "schedule_entities_list_failed") from exc

        items: list[ScheduleItem] = []
        for snapshot in snapshots:
            data = snapshot.to_dict() or {}
            data.pop("imported_at", None)
            try:
                item = ScheduleItem.from_entity_dict(snapshot.id, data)
            except ValidationError:
                logger.warning("schedule_entity_skipped_invalid", extra={"entity_id": snapshot.id})
                continue
            if not item.active:
                continue
            if window is not None and item.event_date is not None:
                if not window.contains_date(item.event_date):
                    continue
            items.append(item)
        return items

    async def retire_source_entities(
        self,
        user_id: str,
        source_kind: SourceKind,
        *,
        delete: bool = False,
    ) -> int:
        return await asyncio.to_thread(self._retire_sync, user_id, source_kind, delete)

    def _retire_sync(self, user_id: str, source_kind: SourceKind, delete: bool) -> int:
        try:
            snapshots = list(self._collection(user_id).stream())
        except (*_TRANSIENT_ERRORS, gexc.GoogleAPICallError) as exc:
            raise _to_persistence_error(exc, "schedule_entities_retire_failed") from exc

        retired = 0
        failed = 0
        for snapshot in snapshots:
            data = snapshot.to_dict() or {}
            if data.get("source_kind") != source_kind.value or data.get("active") is False:
                continue
            try:
                if delete:
                    snapshot.reference.delete()
                else:
                    snapshot.reference.update({"active": False})
            except (*_TRANSIENT_ERRORS, gexc.GoogleAPICallError) as exc:
                # Falha por documento não interrompe os demais; fica fora da contagem
                logger.warning(
                    "schedule_entity_retire_failed",
                    extra={"entity_id": snapshot.id, "error_type": type(exc).__name__},
                )
                failed += 1
                continue
            retired += 1

        logger.info(
            "schedule_entities_retired",
            extra={
                "source_kind": source_kind.value,
                "deleted": delete,
                "retired_count": retired,
                "failed_count": failed,
            },
        )
        return retired


def _to_persistence_error(exc: Exception, message: str) -> PersistenceError:
    kind = (
        PersistenceErrorKind.TRANSIENT
        if isinstance(exc, _TRANSIENT_ERRORS)
        else PersistenceErrorKind.PERMANENT
    )
    logger.error(
        message,
        extra={"error_type": type(exc).__name__, "persistence_kind": str(kind)},
    )
    return PersistenceError(kind, message)
