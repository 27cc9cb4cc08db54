"""Configuração de logging estruturado.

Campos obrigatórios em todo log:
- run_id
- service
- level
- logger
- message
- asctime

Tokens OAuth e o code verifier nunca aparecem nos logs.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import (
    REDACTED,
    SENSITIVE_KEYS,
    ImportRunFilter,
    SecretRedactionFilter,
)
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REDACTED",
    "REQUIRED_LOG_FIELDS",
    "SENSITIVE_KEYS",
    "ImportRunFilter",
    "SecretRedactionFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
]
