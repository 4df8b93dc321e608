from datetime import date
from typing import Literal

from fastapi import APIRouter, Query

from posyandu_portal.core.config import settings
from posyandu_portal.core.dependencies import FetcherDependency
from posyandu_portal.core.responses import send_success
from posyandu_portal.services.cache_keys import (
    ADMIN_DASHBOARD,
    ADMIN_POSYANDUS_PREFIX,
    build_cache_key,
    params_cache_key,
)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/activity-logs")
async def activity_logs(
    fetcher: FetcherDependency,
    action: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    page: int = Query(1, ge=1),
    refresh: bool = False,
):
    params = {
        "action": action,
        "date_from": date_from.isoformat() if date_from else None,
        "date_to": date_to.isoformat() if date_to else None,
        "page": page,
    }
    key = params_cache_key("admin", "logs", params)
    data = await fetcher.fetch(
        key,
        "/admin/activity-logs",
        params=params,
        ttl=settings.ACTIVITY_LOG_TTL,
        force=refresh,
    )
    return send_success(data=data).model_dump()


@router.get("/posyandus")
async def list_posyandus(
    fetcher: FetcherDependency,
    status: Literal["all", "active", "inactive"] = "all",
    refresh: bool = False,
):
    params = {"status": status} if status != "all" else None
    data = await fetcher.fetch(
        build_cache_key("admin", "posyandus", status),
        "/admin/posyandus",
        params=params,
        ttl=settings.REFERENCE_TTL,
        force=refresh,
    )
    return send_success(data=data).model_dump()


@router.patch("/posyandus/{posyandu_id}/toggle-active")
async def toggle_posyandu(posyandu_id: int, fetcher: FetcherDependency):
    data = await fetcher.mutate(
        "PATCH",
        f"/admin/posyandus/{posyandu_id}/toggle-active",
        invalidates=(ADMIN_DASHBOARD,),
        invalidate_prefixes=(ADMIN_POSYANDUS_PREFIX,),
    )
    return send_success(message="Posyandu status updated.", data=data).model_dump()
