"""Modelos de domínio do pipeline de importação de agenda.

Entradas não confiáveis (itens extraídos de imagem, eventos do calendário)
convergem para `ScheduleItem`, que é a única forma comparada pelo
reconciliador e gravada pelo committer.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

DEFAULT_ITEM_TYPE = "class"


class SourceKind(StrEnum):
    IMAGE = "image"
    CALENDAR = "calendar"


class ExtractedScheduleItem(BaseModel):
    """Item produzido pelo serviço de extração a partir de uma imagem.

    Todos os campos são opcionais no schema: a validação de título e
    horários acontece no normalizador, que registra o erro por item em vez
    de abortar o lote. Aceita também o formato legado `{day, name, place, time}`.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str | None = Field(
        default=None,
        validation_alias=AliasChoices("title", "name"),
    )
    day: str | None = Field(default=None, description="Dia da semana ou data ISO.")
    start_time: str | None = Field(
        default=None,
        validation_alias=AliasChoices("start_time", "startTime"),
    )
    end_time: str | None = Field(
        default=None,
        validation_alias=AliasChoices("end_time", "endTime"),
    )
    time: str | None = Field(
        default=None,
        description="Faixa de horário única, ex: '10:00 AM - 12:00 PM'.",
    )
    location: str | None = Field(
        default=None,
        validation_alias=AliasChoices("location", "place"),
    )
    item_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("item_type", "type"),
    )
    color: str | None = None


class ScheduleItem(BaseModel):
    """Item canônico de agenda (aula/palestra recorrente ou datada).

    Invariante: `start_time < end_time`. Imutável após criado.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1, description="Id estável dentro do lote.")
    title: str = Field(..., min_length=1)
    day: str = Field(..., description="Dia da semana canônico (Monday..Sunday).")
    start_time: dt.time
    end_time: dt.time
    location: str | None = None
    source_kind: SourceKind
    external_id: str | None = Field(
        default=None,
        description="Id do evento no provedor; chave de dedup de itens de calendário.",
    )
    event_date: dt.date | None = Field(
        default=None,
        description="Data específica quando o item não é semanal.",
    )
    item_type: str = DEFAULT_ITEM_TYPE
    color: str | None = None
    active: bool = Field(
        default=True,
        description="False quando o vínculo de origem foi desconectado.",
    )

    @model_validator(mode="after")
    def _check_invariants(self) -> ScheduleItem:
        if self.day not in WEEKDAYS:
            raise ValueError(f"day inválido: {self.day}")
        if self.start_time >= self.end_time:
            raise ValueError("start_time deve ser anterior a end_time")
        return self

    def structural_key(self) -> tuple[str, str, dt.time, dt.time]:
        """Chave de dedup de itens sem id externo."""
        return (self.title.casefold(), self.day, self.start_time, self.end_time)

    def to_entity_dict(self) -> dict[str, Any]:
        """Serializa para documento de persistência (sem o id de lote)."""
        return {
            "title": self.title,
            "day": self.day,
            "start_time": self.start_time.strftime("%H:%M:%S"),
            "end_time": self.end_time.strftime("%H:%M:%S"),
            "location": self.location,
            "source_kind": self.source_kind.value,
            "external_id": self.external_id,
            "event_date": self.event_date.isoformat() if self.event_date else None,
            "item_type": self.item_type,
            "color": self.color,
            "active": self.active,
        }

    @classmethod
    def from_entity_dict(cls, entity_id: str, data: dict[str, Any]) -> ScheduleItem:
        """Reconstroi item a partir de um documento persistido."""
        return cls.model_validate({"id": entity_id, **data})


class ScheduleWindow(BaseModel):
    """Janela temporal consultada na sincronização."""

    model_config = ConfigDict(frozen=True)

    start: dt.datetime
    end: dt.datetime

    @model_validator(mode="after")
    def _check_order(self) -> ScheduleWindow:
        if self.start >= self.end:
            raise ValueError("start deve ser anterior a end")
        return self

    def contains_date(self, value: dt.date) -> bool:
        return self.start.date() <= value <= self.end.date()


class ImportIssue(BaseModel):
    """Falha registrada para um item específico; nunca aborta o lote."""

    model_config = ConfigDict(frozen=True)

    item: str = Field(..., description="Identificação do item de origem.")
    reason: str
    stage: Literal["normalize", "commit"]
    code: str = Field(..., description="Código estável, ex: validation.unparsable_time.")
    retryable: bool = False


class ImportResult(BaseModel):
    """Manifesto imutável de uma execução do pipeline."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(default=0, ge=0)
    created_ids: tuple[str, ...] = ()
    skipped_count: int = Field(default=0, ge=0)
    errors: tuple[ImportIssue, ...] = ()

    @model_validator(mode="after")
    def _check_count(self) -> ImportResult:
        if self.count != len(self.created_ids):
            raise ValueError("count deve ser igual a len(created_ids)")
        return self


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    """Saída do normalizador: itens aceitos e problemas por item."""

    items: tuple[ScheduleItem, ...]
    errors: tuple[ImportIssue, ...]


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Decisão do reconciliador, preservando a ordem de entrada."""

    to_create: tuple[ScheduleItem, ...]
    to_skip: tuple[ScheduleItem, ...]


__all__ = [
    "DEFAULT_ITEM_TYPE",
    "WEEKDAYS",
    "ExtractedScheduleItem",
    "ImportIssue",
    "ImportResult",
    "NormalizationResult",
    "ReconcileResult",
    "ScheduleItem",
    "ScheduleWindow",
    "SourceKind",
]
