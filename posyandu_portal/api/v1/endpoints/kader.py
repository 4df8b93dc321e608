from fastapi import APIRouter, Query

from posyandu_portal.core.dependencies import FetcherDependency
from posyandu_portal.core.responses import send_success
from posyandu_portal.schemas.records import ChildCreate, ChildUpdate
from posyandu_portal.services.cache_keys import (
    KADER_CHILDREN_PREFIX,
    KADER_DASHBOARD,
    KADER_PRIORITY_CHILDREN,
    kader_child_key,
    params_cache_key,
)

router = APIRouter(prefix="/kader", tags=["kader"])

# Everything derived from the child list goes stale on any child mutation
CHILD_LIST_KEYS = (KADER_DASHBOARD, KADER_PRIORITY_CHILDREN)


@router.get("/dashboard")
async def dashboard(fetcher: FetcherDependency, refresh: bool = False):
    data = await fetcher.fetch(KADER_DASHBOARD, "/kader/dashboard", force=refresh)
    return send_success(data=data).model_dump()


@router.get("/children")
async def list_children(
    fetcher: FetcherDependency,
    search: str | None = None,
    is_active: bool | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(15, ge=1, le=100),
    refresh: bool = False,
):
    params = {
        "search": search,
        "is_active": None if is_active is None else int(is_active),
        "page": page,
        "per_page": per_page,
    }
    key = params_cache_key("kader", "children", params)
    data = await fetcher.fetch(key, "/kader/children", params=params, force=refresh)
    return send_success(data=data).model_dump()


# Declared before /children/{child_id} so "priorities" is not parsed as an id
@router.get("/children/priorities")
async def priority_children(fetcher: FetcherDependency, refresh: bool = False):
    data = await fetcher.fetch(
        KADER_PRIORITY_CHILDREN, "/kader/children/priorities", force=refresh
    )
    return send_success(data=data).model_dump()


@router.get("/children/{child_id}")
async def show_child(child_id: int, fetcher: FetcherDependency, refresh: bool = False):
    data = await fetcher.fetch(
        kader_child_key(child_id), f"/kader/children/{child_id}", force=refresh
    )
    return send_success(data=data).model_dump()


@router.post("/children")
async def create_child(child: ChildCreate, fetcher: FetcherDependency):
    data = await fetcher.mutate(
        "POST",
        "/kader/children",
        json=child.model_dump(mode="json", exclude_none=True),
        invalidates=CHILD_LIST_KEYS,
        invalidate_prefixes=(KADER_CHILDREN_PREFIX,),
    )
    return send_success(message="Child record created.", data=data).model_dump()


@router.put("/children/{child_id}")
async def update_child(child_id: int, child: ChildUpdate, fetcher: FetcherDependency):
    data = await fetcher.mutate(
        "PUT",
        f"/kader/children/{child_id}",
        json=child.model_dump(mode="json", exclude_unset=True),
        invalidates=(kader_child_key(child_id), *CHILD_LIST_KEYS),
        invalidate_prefixes=(KADER_CHILDREN_PREFIX,),
    )
    return send_success(message="Child record updated.", data=data).model_dump()


@router.delete("/children/{child_id}")
async def delete_child(child_id: int, fetcher: FetcherDependency):
    data = await fetcher.mutate(
        "DELETE",
        f"/kader/children/{child_id}",
        invalidates=(kader_child_key(child_id), *CHILD_LIST_KEYS),
        invalidate_prefixes=(KADER_CHILDREN_PREFIX,),
    )
    return send_success(message="Child record deactivated.", data=data).model_dump()
