"""Dependências FastAPI compartilhadas pelos routers."""

from __future__ import annotations

from fastapi import HTTPException, Request

from app.bootstrap.dependencies import ScheduleSyncResources


def get_resources(request: Request) -> ScheduleSyncResources:
    """Recursos criados no lifespan (ou injetados em `create_app`)."""
    resources = getattr(request.app.state, "resources", None)
    if resources is None:
        raise HTTPException(status_code=503, detail="service_not_ready")
    return resources
