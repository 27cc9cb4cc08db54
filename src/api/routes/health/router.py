"""Liveness (`/health`) e readiness (`/ready`) do serviço."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_VERSION = "1.0.0"

# Usuário sintético: a listagem de um usuário inexistente é a leitura mais barata
READINESS_CHECK_USER = "_readiness_check"

REDIS_TIMEOUT_SECONDS = 2.0
REPOSITORY_TIMEOUT_SECONDS = 3.0


class HealthResponse(BaseModel):
    """Corpo do `/health`."""

    status: str
    service: str
    environment: str
    timestamp: str
    version: str = SERVICE_VERSION


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    status: Literal["ok", "skipped", "failed"]
    latency_ms: float | None = None
    error: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: o processo responde; não toca dependências."""
    base = get_base_settings()
    return HealthResponse(
        status="healthy",
        service=base.service_name,
        environment=base.environment,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness: recursos montados, Redis (se configurado) e repositório respondendo."""
    resources = getattr(request.app.state, "resources", None)
    if resources is None:
        not_initialized = DependencyCheck(status="failed", error="not_initialized")
        checks = {"redis": not_initialized, "repository": not_initialized}
    else:
        redis_check, repository_check = await asyncio.gather(
            _check_redis(resources.redis_client),
            _check_repository(resources.repository),
        )
        checks = {"redis": redis_check, "repository": repository_check}

    ready = all(check.status != "failed" for check in checks.values())
    if not ready:
        logger.warning(
            "readiness_check_failed",
            extra={
                "component": "health",
                "result": "failed",
                "failed_checks": sorted(k for k, v in checks.items() if v.status == "failed"),
            },
        )
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {name: asdict(check) for name, check in checks.items()},
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_redis(redis_client: Any | None) -> DependencyCheck:
    if redis_client is None:
        return DependencyCheck(status="skipped")
    return await _timed(redis_client.ping(), REDIS_TIMEOUT_SECONDS)


async def _check_repository(repository: Any) -> DependencyCheck:
    return await _timed(
        repository.list_schedule_entities(READINESS_CHECK_USER, None),
        REPOSITORY_TIMEOUT_SECONDS,
    )


async def _timed(check: Awaitable[Any], timeout: float) -> DependencyCheck:
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(check, timeout=timeout)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
