from datetime import date

from fastapi import APIRouter

from posyandu_portal.core.dependencies import FetcherDependency
from posyandu_portal.core.responses import send_success
from posyandu_portal.schemas.records import MealLogCreate, PmtLogCreate
from posyandu_portal.services.cache_keys import (
    meal_logs_key,
    params_discriminator,
    pmt_logs_prefix,
    pmt_stats_key,
)

router = APIRouter(tags=["journals"])

MEAL_LOGS_PREFIX = "meal_logs_"


@router.get("/children/{child_id}/meal-logs")
async def list_meal_logs(
    child_id: int, fetcher: FetcherDependency, refresh: bool = False
):
    data = await fetcher.fetch(
        meal_logs_key(child_id), f"/meal-logs/child/{child_id}", force=refresh
    )
    return send_success(data=data).model_dump()


@router.post("/meal-logs")
async def create_meal_log(meal: MealLogCreate, fetcher: FetcherDependency):
    data = await fetcher.mutate(
        "POST",
        "/meal-logs",
        json=meal.model_dump(mode="json", exclude_none=True),
        invalidates=(meal_logs_key(meal.child_id),),
    )
    return send_success(message="Meal log created.", data=data).model_dump()


@router.delete("/meal-logs/{meal_id}")
async def delete_meal_log(meal_id: int, fetcher: FetcherDependency):
    # The owning child is unknown here, so every meal journal is dropped
    data = await fetcher.mutate(
        "DELETE",
        f"/meal-logs/{meal_id}",
        invalidate_prefixes=(MEAL_LOGS_PREFIX,),
    )
    return send_success(message="Meal log deleted.", data=data).model_dump()


@router.get("/children/{child_id}/pmt-logs")
async def list_pmt_logs(
    child_id: int,
    fetcher: FetcherDependency,
    start_date: date | None = None,
    end_date: date | None = None,
    refresh: bool = False,
):
    params = {
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
    }
    key = pmt_logs_prefix(child_id) + params_discriminator(params)
    data = await fetcher.fetch(
        key, f"/pmt-logs/child/{child_id}", params=params, force=refresh
    )
    return send_success(data=data).model_dump()


@router.get("/children/{child_id}/pmt-logs/stats")
async def pmt_stats(child_id: int, fetcher: FetcherDependency, refresh: bool = False):
    data = await fetcher.fetch(
        pmt_stats_key(child_id), f"/pmt-logs/child/{child_id}/stats", force=refresh
    )
    return send_success(data=data).model_dump()


@router.post("/pmt-logs")
async def record_pmt(pmt: PmtLogCreate, fetcher: FetcherDependency):
    data = await fetcher.mutate(
        "POST",
        "/pmt-logs",
        json=pmt.model_dump(mode="json", exclude_none=True),
        invalidates=(pmt_stats_key(pmt.child_id),),
        invalidate_prefixes=(pmt_logs_prefix(pmt.child_id),),
    )
    return send_success(message="PMT log saved.", data=data).model_dump()
