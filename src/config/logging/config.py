"""Setup do logging raiz do serviço.

`configure_logging` roda uma vez no bootstrap (`app.bootstrap.initialize_app`);
os módulos usam `logging.getLogger(__name__)` ou `get_logger`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import ImportRunFilter, SecretRedactionFilter
from config.logging.formatters import create_json_formatter
from config.settings.base import VALID_LOG_LEVELS

if TYPE_CHECKING:
    from collections.abc import Callable

DEFAULT_SERVICE_NAME = "schedule-sync"

# Bibliotecas que logam cada request HTTP em INFO
NOISY_LOGGERS: tuple[str, ...] = (
    "httpx",
    "httpcore",
    "googleapiclient.discovery_cache",
)


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    run_id_getter: Callable[[], str] | None = None,
) -> None:
    """Instala um único handler JSON no logger raiz.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Valor do campo `service` em cada linha.
        run_id_getter: Retorna o run_id da importação corrente, se houver.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    normalized_level = level.upper()
    if normalized_level not in VALID_LOG_LEVELS:
        valid = ", ".join(sorted(VALID_LOG_LEVELS))
        raise ValueError(f"Nível de log inválido: {level}. Válidos: {valid}")

    handler = logging.StreamHandler()
    handler.setLevel(normalized_level)
    handler.setFormatter(create_json_formatter())
    # Redação antes do enriquecimento: o run_id nunca é segredo
    handler.addFilter(SecretRedactionFilter())
    handler.addFilter(ImportRunFilter(service_name, run_id_getter))

    root = logging.getLogger()
    root.setLevel(normalized_level)
    root.handlers = [handler]

    if normalized_level != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Atalho para `logging.getLogger`, exportado junto do setup."""
    return logging.getLogger(name)
