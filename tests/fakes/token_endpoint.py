"""Token endpoint falso baseado em httpx.MockTransport."""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qs

import httpx


class FakeTokenEndpoint:
    """Responde com a fila de (status, body); registra o form de cada request."""

    def __init__(self, *responses: tuple[int, dict[str, Any] | str] | Exception) -> None:
        self._responses = list(responses)
        self.requests: list[dict[str, str]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode("utf-8"))
        self.requests.append({key: values[0] for key, values in form.items()})
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        status_code, body = response
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def token_payload(
    access_token: str = "access-1",
    *,
    expires_in: int = 3599,
    refresh_token: str | None = "refresh-1",
    scope: str = "https://www.googleapis.com/auth/calendar.readonly",
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "access_token": access_token,
        "expires_in": expires_in,
        "scope": scope,
        "token_type": "Bearer",
    }
    if refresh_token is not None:
        payload["refresh_token"] = refresh_token
    return payload
