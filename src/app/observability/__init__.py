"""Observabilidade do pipeline de importação.

Uso:
    from app.observability import get_run_id, import_run
"""

from app.observability.run_context import (
    get_run_id,
    import_run,
    reset_run_id,
    set_run_id,
)

__all__ = [
    "get_run_id",
    "import_run",
    "reset_run_id",
    "set_run_id",
]
