"""Endpoints do vínculo com o Google Calendar (OAuth + sync)."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator, model_validator

from api.routes.dependencies import get_resources
from app.bootstrap.dependencies import ScheduleSyncResources, build_schedule_import_service
from app.domain.schedule import ImportResult

router = APIRouter()

ResourcesDep = Annotated[ScheduleSyncResources, Depends(get_resources)]
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class AuthorizationResponse(BaseModel):
    authorization_url: str


class OAuthCallbackRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: NonBlankStr
    code: Annotated[str, StringConstraints(min_length=1)]
    redirect_uri: str | None = None


class OAuthCallbackResponse(BaseModel):
    """Nunca devolve tokens ao cliente; apenas o resumo do vínculo."""

    scope: str
    expiry_epoch_ms: int


class SyncRequest(BaseModel):
    """Janela opcional; datetimes sem fuso são tratados como UTC."""

    model_config = ConfigDict(extra="ignore")

    user_id: NonBlankStr
    time_min: datetime | None = None
    time_max: datetime | None = None
    calendar_id: NonBlankStr | None = None

    @field_validator("time_min", "time_max")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _check_window(self) -> SyncRequest:
        if self.time_min and self.time_max and self.time_min >= self.time_max:
            raise ValueError("time_min deve ser anterior a time_max")
        return self


class DisconnectRequest(BaseModel):
    user_id: NonBlankStr
    delete_imported: bool = False


class DisconnectResponse(BaseModel):
    disconnected: bool = True
    schedules_disconnected: int = 0
    deleted: bool = False


@router.get("/authorize", response_model=AuthorizationResponse)
async def authorize(
    resources: ResourcesDep,
    user_id: Annotated[str, Query(min_length=1)],
    redirect_uri: str | None = None,
) -> AuthorizationResponse:
    user_id = user_id.strip()
    if not user_id:
        raise HTTPException(status_code=422, detail="user_id_required")
    service = build_schedule_import_service(resources, user_id)
    url = await service.start_authorization(redirect_uri)
    return AuthorizationResponse(authorization_url=url)


@router.post("/oauth/callback", response_model=OAuthCallbackResponse)
async def oauth_callback(
    body: OAuthCallbackRequest,
    resources: ResourcesDep,
) -> OAuthCallbackResponse:
    service = build_schedule_import_service(resources, body.user_id)
    tokens = await service.complete_authorization(body.code, body.redirect_uri)
    return OAuthCallbackResponse(scope=tokens.scope, expiry_epoch_ms=tokens.expiry_epoch_ms)


@router.post("/sync", response_model=ImportResult)
async def sync(body: SyncRequest, resources: ResourcesDep) -> ImportResult:
    service = build_schedule_import_service(resources, body.user_id)
    return await service.sync_calendar(
        body.user_id,
        body.time_min,
        body.time_max,
        calendar_id=body.calendar_id,
    )


@router.post("/disconnect", response_model=DisconnectResponse)
async def disconnect(body: DisconnectRequest, resources: ResourcesDep) -> DisconnectResponse:
    service = build_schedule_import_service(resources, body.user_id)
    retired = await service.disconnect(delete_imported=body.delete_imported)
    return DisconnectResponse(schedules_disconnected=retired, deleted=body.delete_imported)
