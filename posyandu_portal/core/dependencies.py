from typing import Annotated

from fastapi import Depends, Request

from posyandu_portal.services.cached_fetch import CachedFetcher
from posyandu_portal.utils.caching import DataCache


def get_data_cache(request: Request) -> DataCache:
    return request.app.state.data_cache


def get_fetcher(request: Request) -> CachedFetcher:
    return request.app.state.fetcher


CacheDependency = Annotated[DataCache, Depends(get_data_cache)]
FetcherDependency = Annotated[CachedFetcher, Depends(get_fetcher)]
