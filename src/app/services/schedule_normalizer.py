"""Normalização de itens de agenda para o formato canônico `ScheduleItem`.

Função pura: sem IO, sem relógio. A única dependência de ambiente é o fuso
do usuário, usado para converter timestamps do calendário em dia/horário.
Itens inválidos viram `ImportIssue` e nunca abortam o lote.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from app.domain.schedule import (
    DEFAULT_ITEM_TYPE,
    ExtractedScheduleItem,
    ImportIssue,
    NormalizationResult,
    ScheduleItem,
    SourceKind,
)
from app.services.schedule_time_parsing import (
    parse_clock,
    parse_day,
    parse_event_datetime,
    split_time_range,
)
from utils.errors import ScheduleValidationError, ValidationErrorKind

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date, time

UNTITLED_EVENT = "Untitled Event"
_PLACEHOLDER_LOCATION = "room tbd"


class ScheduleNormalizer:
    """Converte itens extraídos de imagem ou eventos do calendário."""

    __slots__ = ("_zone",)

    def __init__(self, timezone: str = "UTC") -> None:
        self._zone = ZoneInfo(timezone)

    def normalize(
        self,
        source_kind: SourceKind,
        raw_items: Iterable[Any],
    ) -> NormalizationResult:
        items: list[ScheduleItem] = []
        errors: list[ImportIssue] = []
        seen_series: set[str] = set()

        for index, raw in enumerate(raw_items):
            try:
                if source_kind is SourceKind.IMAGE:
                    item = self._from_extracted(index, raw)
                else:
                    item = self._from_calendar_event(index, raw, seen_series)
            except ScheduleValidationError as exc:
                errors.append(
                    ImportIssue(
                        item=_describe_raw(source_kind, index, raw),
                        reason=exc.message,
                        stage="normalize",
                        code=exc.code,
                        retryable=exc.retryable,
                    )
                )
                continue
            if item is not None:
                items.append(item)

        return NormalizationResult(items=tuple(items), errors=tuple(errors))

    def _from_extracted(self, index: int, raw: Any) -> ScheduleItem:
        extracted = _coerce_extracted(raw)

        title = (extracted.title or "").strip()
        if not title:
            raise _missing("title")

        parsed_day = parse_day(extracted.day)

        start_raw, end_raw = extracted.start_time, extracted.end_time
        if not start_raw and not end_raw and extracted.time:
            split = split_time_range(extracted.time)
            if split is None:
                raise _unparsable("time", f"faixa de horário invalida: {extracted.time!r}")
            start_raw, end_raw = split
        if not start_raw:
            raise _missing("start_time")
        if not end_raw:
            raise _missing("end_time")

        start = parse_clock(start_raw, self._zone)
        if start is None:
            raise _unparsable("start_time", f"horário inválido: {start_raw!r}")
        end = parse_clock(end_raw, self._zone)
        if end is None:
            raise _unparsable("end_time", f"horário inválido: {end_raw!r}")

        start_time, start_date = start
        end_time, _ = end
        if start_time >= end_time:
            raise _unparsable("end_time", "end_time deve ser posterior a start_time")

        if parsed_day is not None:
            day, event_date = parsed_day
        elif start_date is not None:
            day, event_date = start_date.strftime("%A"), start_date
        elif extracted.day:
            raise _missing("day", f"dia inválido: {extracted.day!r}")
        else:
            raise _missing("day")

        item_type = (extracted.item_type or "").strip().lower() or DEFAULT_ITEM_TYPE
        return ScheduleItem(
            id=_stable_id(SourceKind.IMAGE, index, title, day, start_time, end_time, event_date),
            title=title,
            day=day,
            start_time=start_time,
            end_time=end_time,
            location=clean_location(extracted.location),
            source_kind=SourceKind.IMAGE,
            event_date=event_date,
            item_type=item_type,
            color=(extracted.color or "").strip() or None,
        )

    def _from_calendar_event(
        self,
        index: int,
        raw: Any,
        seen_series: set[str],
    ) -> ScheduleItem | None:
        if not isinstance(raw, dict):
            raise _missing("id", "evento não é um objeto")
        event_id = raw.get("id")
        if not isinstance(event_id, str) or not event_id:
            raise _missing("id")

        series_id = raw.get("recurringEventId")
        if isinstance(series_id, str) and series_id:
            # Provedor expande séries; a primeira ocorrência representa a aula
            if series_id in seen_series:
                return None
            seen_series.add(series_id)

        start_payload = raw.get("start") if isinstance(raw.get("start"), dict) else {}
        end_payload = raw.get("end") if isinstance(raw.get("end"), dict) else {}
        if not start_payload.get("dateTime"):
            raise _missing("start.dateTime")
        if not end_payload.get("dateTime"):
            raise _missing("end.dateTime")

        start_dt = parse_event_datetime(start_payload.get("dateTime"), self._zone)
        if start_dt is None:
            raise _unparsable("start.dateTime", "timestamp de início inválido")
        end_dt = parse_event_datetime(end_payload.get("dateTime"), self._zone)
        if end_dt is None:
            raise _unparsable("end.dateTime", "timestamp de fim inválido")
        if start_dt.date() != end_dt.date():
            raise _unparsable("end.dateTime", "evento atravessa mais de um dia local")

        start_time = start_dt.time().replace(microsecond=0)
        end_time = end_dt.time().replace(microsecond=0)
        if start_time >= end_time:
            raise _unparsable("end.dateTime", "end deve ser posterior a start")

        recurring = isinstance(series_id, str) and bool(series_id)
        external_id = series_id if recurring else event_id
        event_date = None if recurring else start_dt.date()
        title = str(raw.get("summary") or "").strip() or UNTITLED_EVENT
        day = start_dt.strftime("%A")
        return ScheduleItem(
            id=_stable_id(
                SourceKind.CALENDAR, index, title, day, start_time, end_time, event_date,
                external_id=external_id,
            ),
            title=title,
            day=day,
            start_time=start_time,
            end_time=end_time,
            location=clean_location(raw.get("location")),
            source_kind=SourceKind.CALENDAR,
            external_id=external_id,
            event_date=event_date,
        )


def normalize(
    source_kind: SourceKind,
    raw_items: Iterable[Any],
    *,
    timezone: str = "UTC",
) -> NormalizationResult:
    """Atalho funcional para `ScheduleNormalizer(timezone).normalize(...)`."""
    return ScheduleNormalizer(timezone).normalize(source_kind, raw_items)


def clean_location(value: Any) -> str | None:
    """Local vazio ou placeholder ('Room TBD' em qualquer caixa) vira ausente."""
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped or _PLACEHOLDER_LOCATION in stripped.casefold():
        return None
    return stripped


def _coerce_extracted(raw: Any) -> ExtractedScheduleItem:
    if isinstance(raw, ExtractedScheduleItem):
        return raw
    if not isinstance(raw, dict):
        raise _missing("title", "item extraído não é um objeto")
    try:
        return ExtractedScheduleItem.model_validate(raw)
    except ValidationError as exc:
        field = str(exc.errors()[0]["loc"][0]) if exc.errors() else None
        raise ScheduleValidationError(
            ValidationErrorKind.MISSING_FIELD,
            "item extraído com campos de tipo inválido",
            field=field,
        ) from exc


def _stable_id(
    source_kind: SourceKind,
    index: int,
    title: str,
    day: str,
    start_time: time,
    end_time: time,
    event_date: date | None,
    *,
    external_id: str | None = None,
) -> str:
    material = "|".join(
        (
            source_kind.value,
            title,
            day,
            start_time.isoformat(),
            end_time.isoformat(),
            event_date.isoformat() if event_date else "",
            external_id or "",
        )
    )
    digest = hashlib.sha256(material.encode("utf-8")).hexdigest()[:12]
    return f"{source_kind.value}-{index}-{digest}"


def _describe_raw(source_kind: SourceKind, index: int, raw: Any) -> str:
    if source_kind is SourceKind.CALENDAR and isinstance(raw, dict) and raw.get("id"):
        return f"calendar:{raw['id']}"
    title = None
    if isinstance(raw, ExtractedScheduleItem):
        title = raw.title
    elif isinstance(raw, dict):
        title = raw.get("title") or raw.get("name") or raw.get("summary")
    label = f"{source_kind.value}#{index}"
    return f"{label}:{title}" if isinstance(title, str) and title.strip() else label


def _missing(field: str, message: str | None = None) -> ScheduleValidationError:
    return ScheduleValidationError(
        ValidationErrorKind.MISSING_FIELD,
        message or f"campo obrigatório ausente: {field}",
        field=field,
    )


def _unparsable(field: str, message: str) -> ScheduleValidationError:
    return ScheduleValidationError(ValidationErrorKind.UNPARSABLE_TIME, message, field=field)


__all__ = ["UNTITLED_EVENT", "ScheduleNormalizer", "clean_location", "normalize"]
