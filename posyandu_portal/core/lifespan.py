import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from posyandu_portal.core.config import settings
from posyandu_portal.services.backend import BackendClient
from posyandu_portal.services.cached_fetch import CachedFetcher
from posyandu_portal.utils.caching import DataCache
from posyandu_portal.utils.logging import get_logger


async def sweep_periodically(cache: DataCache, interval: float):
    logger = get_logger()
    while True:
        await asyncio.sleep(interval)
        removed = cache.sweep()
        if removed:
            logger.info(f"Cache sweep: removed {removed} expired entries")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger = get_logger()
    cache = DataCache()
    backend = BackendClient()
    app.state.data_cache = cache
    app.state.backend = backend
    app.state.fetcher = CachedFetcher(cache, backend)

    sweeper = None
    if settings.CACHE_SWEEP_INTERVAL > 0:
        sweeper = asyncio.create_task(
            sweep_periodically(cache, settings.CACHE_SWEEP_INTERVAL)
        )
    logger.info(f"Startup: {app.title} v{app.version} starting...")
    yield
    # Shutdown
    if sweeper:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    await app.state.backend.aclose()
    logger.info("Shutdown: App shutting down...")
