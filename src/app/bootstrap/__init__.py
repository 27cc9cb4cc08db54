"""Bootstrap do processo: logging e validação de settings no startup."""

from __future__ import annotations

import logging

from app.observability import get_run_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_calendar_oauth_settings,
    get_store_settings,
)

# Ambientes em que settings inválidas impedem o boot
STRICT_VALIDATION_ENVS = frozenset({"staging", "production"})

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Instala o logging JSON com o run_id da importação corrente."""
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        run_id_getter=get_run_id,
    )


def collect_settings_errors() -> list[str]:
    """Erros de todas as settings, prefixados pelo grupo."""
    base = get_base_settings()
    groups = {
        "base": base.validate(),
        "calendar": get_calendar_oauth_settings().validate(),
        "stores": get_store_settings().validate(is_production=base.is_production),
    }
    return [f"{group}: {error}" for group, errors in groups.items() for error in errors]


def validate_runtime_settings() -> None:
    """Falha o boot em staging/production; em development só avisa.

    Raises:
        RuntimeError: Settings inválidas em ambiente estrito.
    """
    environment = get_base_settings().environment
    errors = collect_settings_errors()
    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
