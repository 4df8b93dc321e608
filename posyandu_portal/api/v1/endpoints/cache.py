from fastapi import APIRouter

from posyandu_portal.core.dependencies import CacheDependency, FetcherDependency
from posyandu_portal.core.responses import send_success

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/stats")
async def cache_stats(cache: CacheDependency):
    return send_success(data=cache.stats()).model_dump()


@router.post("/sweep")
async def sweep_cache(cache: CacheDependency):
    removed = cache.sweep()
    return send_success(
        message=f"Removed {removed} expired entries.", data={"removed": removed}
    ).model_dump()


@router.delete("/{key}")
async def invalidate_key(key: str, fetcher: FetcherDependency):
    fetcher.invalidate(key)
    return send_success(message=f"Invalidated '{key}'.").model_dump()


@router.delete("")
async def invalidate_all(fetcher: FetcherDependency, prefix: str | None = None):
    if prefix:
        removed = fetcher.invalidate_prefix(prefix)
        return send_success(
            message=f"Invalidated keys starting with '{prefix}'.",
            data={"removed": removed},
        ).model_dump()
    removed = fetcher.clear()
    return send_success(message="Cache cleared.", data={"removed": removed}).model_dump()
