"""Endpoint de importação de itens extraídos de imagem."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from api.routes.dependencies import get_resources
from app.bootstrap.dependencies import ScheduleSyncResources, build_schedule_import_service
from app.domain.schedule import ImportResult

router = APIRouter()


class ImportExtractedRequest(BaseModel):
    """Itens ficam como dicts: a validação por item acontece no normalizador."""

    model_config = ConfigDict(extra="ignore")

    user_id: str | None = None
    items: list[dict[str, Any]] = Field(default_factory=list)


@router.post("/import-extracted", response_model=ImportResult)
async def import_extracted(
    body: ImportExtractedRequest,
    resources: Annotated[ScheduleSyncResources, Depends(get_resources)],
) -> ImportResult:
    user_id = (body.user_id or "").strip() or resources.store_settings.guest_user_id
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id_required")
    service = build_schedule_import_service(resources, user_id)
    return await service.import_extracted(user_id, body.items)
