"""Monta o router raiz da API a partir dos routers de cada área."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.calendar.router import router as calendar_router
from api.routes.health.router import router as health_router
from api.routes.schedule.router import router as schedule_router

# (router, prefixo, tag); health fica na raiz para liveness e readiness
_ROUTERS: tuple[tuple[APIRouter, str, str], ...] = (
    (health_router, "", "health"),
    (calendar_router, "/calendar", "calendar"),
    (schedule_router, "/schedule", "schedule"),
)


def create_api_router() -> APIRouter:
    """Router com /health, /ready, /calendar/* e /schedule/*."""
    api_router = APIRouter()
    for router, prefix, tag in _ROUTERS:
        api_router.include_router(router, prefix=prefix, tags=[tag])
    return api_router
