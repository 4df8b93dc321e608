from typing import Literal

from fastapi import APIRouter

from posyandu_portal.core.config import settings
from posyandu_portal.core.dependencies import FetcherDependency
from posyandu_portal.core.responses import send_success
from posyandu_portal.schemas.records import ConsultationMessageCreate
from posyandu_portal.services.cache_keys import (
    CONSULTATIONS_PREFIX,
    consultation_key,
    consultations_key,
)

router = APIRouter(prefix="/kader/consultations", tags=["consultations"])


@router.get("")
async def list_consultations(
    fetcher: FetcherDependency,
    status: Literal["open", "closed"] | None = None,
    refresh: bool = False,
):
    data = await fetcher.fetch(
        consultations_key(status),
        "/kader/consultations",
        params={"status": status},
        ttl=settings.CONSULTATION_TTL,
        force=refresh,
    )
    return send_success(data=data).model_dump()


@router.get("/{consultation_id}")
async def show_consultation(
    consultation_id: int, fetcher: FetcherDependency, refresh: bool = False
):
    data = await fetcher.fetch(
        consultation_key(consultation_id),
        f"/kader/consultations/{consultation_id}",
        ttl=settings.CONSULTATION_TTL,
        force=refresh,
    )
    return send_success(data=data).model_dump()


@router.post("/{consultation_id}/messages")
async def send_message(
    consultation_id: int,
    message: ConsultationMessageCreate,
    fetcher: FetcherDependency,
):
    data = await fetcher.mutate(
        "POST",
        f"/kader/consultations/{consultation_id}/messages",
        json=message.model_dump(),
        invalidates=(consultation_key(consultation_id),),
        invalidate_prefixes=(CONSULTATIONS_PREFIX,),
    )
    return send_success(message="Message sent.", data=data).model_dump()


@router.put("/{consultation_id}/close")
async def close_consultation(consultation_id: int, fetcher: FetcherDependency):
    data = await fetcher.mutate(
        "PUT",
        f"/kader/consultations/{consultation_id}/close",
        invalidates=(consultation_key(consultation_id),),
        invalidate_prefixes=(CONSULTATIONS_PREFIX,),
    )
    return send_success(message="Consultation closed.", data=data).model_dump()
