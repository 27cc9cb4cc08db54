"""Reconciliação de itens normalizados contra o snapshot já persistido.

Computação pura: o caller fornece um snapshot consistente da janela.
Itens de calendário casam por `external_id`; itens de imagem por
igualdade estrutural (título sem caixa, dia, início, fim). Qualquer
diferença gera um item novo: duplicata é preferível a perda silenciosa.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.schedule import ReconcileResult, ScheduleItem, SourceKind

if TYPE_CHECKING:
    from collections.abc import Iterable


def reconcile(
    existing_items: Iterable[ScheduleItem],
    incoming_items: Iterable[ScheduleItem],
) -> ReconcileResult:
    """Separa `incoming_items` em `to_create` e `to_skip`, preservando a ordem.

    Itens aceitos passam a fazer parte do conjunto de comparação, então
    repetições dentro do mesmo lote também são puladas.
    """
    known_external_ids: set[str] = set()
    known_structural: set[tuple[object, ...]] = set()
    for item in existing_items:
        _remember(item, known_external_ids, known_structural)

    to_create: list[ScheduleItem] = []
    to_skip: list[ScheduleItem] = []
    for item in incoming_items:
        if _is_known(item, known_external_ids, known_structural):
            to_skip.append(item)
            continue
        to_create.append(item)
        _remember(item, known_external_ids, known_structural)

    return ReconcileResult(to_create=tuple(to_create), to_skip=tuple(to_skip))


def _remember(
    item: ScheduleItem,
    known_external_ids: set[str],
    known_structural: set[tuple[object, ...]],
) -> None:
    if item.source_kind is SourceKind.CALENDAR:
        if item.external_id:
            known_external_ids.add(item.external_id)
    else:
        known_structural.add(item.structural_key())


def _is_known(
    item: ScheduleItem,
    known_external_ids: set[str],
    known_structural: set[tuple[object, ...]],
) -> bool:
    if item.source_kind is SourceKind.CALENDAR:
        return bool(item.external_id) and item.external_id in known_external_ids
    return item.structural_key() in known_structural


__all__ = ["reconcile"]
