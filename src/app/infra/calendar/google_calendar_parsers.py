"""Helpers internos de parsing para respostas de erro da Google Calendar API."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from googleapiclient.errors import HttpError

RATE_LIMIT_REASONS = frozenset({"rateLimitExceeded", "userRateLimitExceeded", "quotaExceeded"})


def http_status(exc: HttpError) -> int | None:
    response = getattr(exc, "resp", None)
    status = getattr(response, "status", None)
    return int(status) if status else None


def http_error_reasons(exc: HttpError) -> set[str]:
    """Lê `error.errors[].reason` do corpo de erro da API."""
    content = getattr(exc, "content", None)
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    if not isinstance(content, str) or not content:
        return set()
    try:
        body = json.loads(content)
    except ValueError:
        return set()
    error = body.get("error") if isinstance(body, dict) else None
    errors = error.get("errors") if isinstance(error, dict) else None
    if not isinstance(errors, list):
        return set()
    return {
        str(entry["reason"])
        for entry in errors
        if isinstance(entry, dict) and entry.get("reason")
    }


def retry_after_seconds(exc: HttpError) -> float | None:
    """Header Retry-After em segundos; None quando ausente ou em formato de data."""
    response = getattr(exc, "resp", None)
    getter = getattr(response, "get", None)
    if getter is None:
        return None
    raw = getter("retry-after") or getter("Retry-After")
    if raw is None:
        return None
    try:
        seconds = float(raw)
    except (TypeError, ValueError):
        return None
    return seconds if seconds >= 0 else None


def is_rate_limited(exc: HttpError) -> bool:
    status_code = http_status(exc)
    if status_code == 429:
        return True
    return status_code == 403 and bool(http_error_reasons(exc) & RATE_LIMIT_REASONS)
