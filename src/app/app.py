"""Aplicação ASGI do schedule-sync.

    uvicorn app.app:app --host 0.0.0.0 --port 8080

`create_app` aceita recursos prontos (testes); sem eles, o lifespan valida
as settings e cria clientes e stores no startup.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from api.routes.errors import register_exception_handlers
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.dependencies import create_resources
from config.logging import get_logger
from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from app.bootstrap.dependencies import ScheduleSyncResources

# Logging JSON antes de qualquer log de import
initialize_app()

logger = get_logger(__name__)

DEFAULT_PORT = 8080


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Cria os recursos no startup e fecha os que criou no shutdown."""
    injected = app.state.resources is not None
    if not injected:
        validate_runtime_settings()
        app.state.resources = create_resources()
    logger.info(
        "app_started",
        extra={"component": "app", "resources": "injected" if injected else "created"},
    )
    try:
        yield
    finally:
        logger.info("app_stopping", extra={"component": "app"})
        if not injected and app.state.resources is not None:
            await app.state.resources.aclose()
            app.state.resources = None


def create_app(resources: ScheduleSyncResources | None = None) -> FastAPI:
    """FastAPI com handlers de erro de domínio e as rotas da API."""
    fastapi_app = FastAPI(
        title="schedule-sync",
        description="Importação de agenda via Google Calendar e itens extraídos de imagem",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.state.resources = resources
    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(create_api_router())
    return fastapi_app


app = create_app()


def main() -> None:
    """Script `schedule-sync`: sobe o uvicorn (reload só em development)."""
    import uvicorn

    base = get_base_settings()
    port = int(os.getenv("PORT", str(DEFAULT_PORT)))
    logger.info(
        "server_starting",
        extra={"component": "app", "environment": base.environment, "port": port},
    )
    uvicorn.run(
        "app.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        reload=base.is_development,
    )


if __name__ == "__main__":
    main()
