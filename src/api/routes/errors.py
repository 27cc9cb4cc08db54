"""Mapeamento das exceções tipadas do pipeline para respostas HTTP."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from fastapi.responses import JSONResponse

from utils.errors import (
    AuthError,
    AuthErrorKind,
    FetchError,
    FetchErrorKind,
    PersistenceError,
    PersistenceErrorKind,
    TokenStoreError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def _error_body(error: str, code: str, retryable: bool) -> dict[str, object]:
    return {"error": error, "code": code, "retryable": retryable}


async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    if exc.kind is AuthErrorKind.NETWORK_ERROR:
        return JSONResponse(
            status_code=502,
            content=_error_body("oauth_provider_unavailable", exc.code, exc.retryable),
        )
    return JSONResponse(
        status_code=401,
        content=_error_body("reauth_required", exc.code, exc.retryable),
    )


async def handle_fetch_error(request: Request, exc: FetchError) -> JSONResponse:
    if exc.kind is FetchErrorKind.RATE_LIMITED:
        headers: dict[str, str] = {}
        if exc.retry_after_seconds is not None:
            headers["Retry-After"] = str(math.ceil(exc.retry_after_seconds))
        return JSONResponse(
            status_code=429,
            content=_error_body("calendar_rate_limited", exc.code, exc.retryable),
            headers=headers,
        )
    if exc.kind is FetchErrorKind.UNAUTHORIZED:
        return JSONResponse(
            status_code=401,
            content=_error_body("calendar_unauthorized", exc.code, exc.retryable),
        )
    return JSONResponse(
        status_code=502,
        content=_error_body("calendar_unavailable", exc.code, exc.retryable),
    )


async def handle_token_store_error(request: Request, exc: TokenStoreError) -> JSONResponse:
    logger.error("token_store_unavailable", extra={"path": request.url.path})
    return JSONResponse(
        status_code=503,
        content=_error_body("token_store_unavailable", "token_store.unavailable", True),
    )


async def handle_persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    status_code = 503 if exc.kind is PersistenceErrorKind.TRANSIENT else 500
    return JSONResponse(
        status_code=status_code,
        content=_error_body("schedule_storage_failed", exc.code, exc.retryable),
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    # O texto da exceção pode ecoar a entrada; só o tipo vai para o log
    logger.info(
        "request_rejected",
        extra={"path": request.url.path, "result": "invalid", "error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=400,
        content=_error_body("invalid_request", "request.invalid", False),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, handle_auth_error)  # type: ignore[arg-type]
    app.add_exception_handler(FetchError, handle_fetch_error)  # type: ignore[arg-type]
    app.add_exception_handler(TokenStoreError, handle_token_store_error)  # type: ignore[arg-type]
    app.add_exception_handler(PersistenceError, handle_persistence_error)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, handle_value_error)  # type: ignore[arg-type]
