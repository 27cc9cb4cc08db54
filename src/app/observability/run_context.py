"""run_id da importação corrente, propagado para os logs.

Cada execução do pipeline (sync de calendário ou import de imagem) recebe
um run_id próprio. Usa ContextVar para ser async-safe.

Uso:
    from app.observability import import_run

    with import_run() as run_id:
        ...  # todos os logs deste bloco carregam run_id
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_run_id: ContextVar[str] = ContextVar("run_id", default="")


def get_run_id() -> str:
    """Retorna o run_id do contexto atual (string vazia fora de uma execução)."""
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> Token[str]:
    """Define o run_id no contexto atual; gera UUID quando None."""
    return _run_id.set(run_id or str(uuid.uuid4()))


def reset_run_id(token: Token[str]) -> None:
    _run_id.reset(token)


@contextmanager
def import_run(run_id: str | None = None) -> Iterator[str]:
    """Escopo de uma execução do pipeline; restaura o run_id anterior ao sair."""
    token = set_run_id(run_id)
    try:
        yield _run_id.get()
    finally:
        reset_run_id(token)
