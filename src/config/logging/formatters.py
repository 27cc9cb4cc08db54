"""Formatter JSON dos logs do serviço.

Cada linha sai como um objeto JSON com run_id, service, nível, logger,
mensagem (o nome snake_case do evento) e os campos passados em `extra`.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pythonjsonlogger.json import JsonFormatter

# Ordem fixa para que a saída seja estável entre execuções
REQUIRED_LOG_FIELDS: tuple[str, ...] = (
    "asctime",
    "levelname",
    "name",
    "message",
    "run_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def _json_default(value: Any) -> Any:
    """Serializa tipos de domínio que aparecem em `extra` (enums, datas)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def create_json_formatter() -> JsonFormatter:
    """Formatter JSON com os campos obrigatórios renomeados.

    Saída típica de `schedule_import_finished`:
        {"asctime": "...", "level": "INFO", "logger": "app.use_cases...",
         "message": "schedule_import_finished", "run_id": "3f1c...",
         "service": "schedule-sync", "created_count": 3}
    """
    return JsonFormatter(
        " ".join(f"%({name})s" for name in REQUIRED_LOG_FIELDS),
        rename_fields=FIELD_RENAME_MAP,
        json_default=_json_default,
    )
