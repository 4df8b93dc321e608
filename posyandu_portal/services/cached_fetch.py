from itertools import count
from typing import Any, Dict, Iterable

from posyandu_portal.services.backend import BackendClient
from posyandu_portal.utils.caching import DataCache
from posyandu_portal.utils.logging import get_logger

logger = get_logger()

_MISSING = object()


class CachedFetcher:
    """Read-through access to the backend on top of a ``DataCache``.

    Every fetch takes a request token for its key. A response is written to
    the cache only if its token is still the newest one for that key, so a
    slow response never overwrites a newer fetch or a later invalidation.
    Failed fetches raise and leave the cache untouched.
    """

    def __init__(self, cache: DataCache, backend: BackendClient):
        self.cache = cache
        self.backend = backend
        self._tokens = count(1)
        self._latest: Dict[str, int] = {}

    def _issue_token(self, key: str) -> int:
        token = next(self._tokens)
        self._latest[key] = token
        return token

    async def fetch(
        self,
        key: str,
        path: str,
        params: dict | None = None,
        ttl: float | None = None,
        force: bool = False,
    ) -> Any:
        if not force:
            cached = self.cache.get(key, _MISSING)
            if cached is not _MISSING:
                return cached

        token = self._issue_token(key)
        try:
            data = await self.backend.get(path, params=params)
        finally:
            current = self._release(key, token)

        if not current:
            logger.debug(f"Discarding superseded response for {key}")
            return data
        self.cache.set(key, data, ttl)
        return data

    def _release(self, key: str, token: int) -> bool:
        """Drop ``token`` if it is still the newest for ``key``."""
        if self._latest.get(key) != token:
            return False
        del self._latest[key]
        return True

    def invalidate(self, *keys: str) -> None:
        for key in keys:
            self.cache.invalidate(key)
            # An in-flight fetch whose token is gone counts as superseded
            self._latest.pop(key, None)

    def invalidate_prefix(self, *prefixes: str) -> int:
        removed = 0
        for prefix in prefixes:
            removed += self.cache.invalidate_prefix(prefix)
            for key in [k for k in self._latest if k.startswith(prefix)]:
                del self._latest[key]
        return removed

    def clear(self) -> int:
        removed = len(self.cache)
        self.cache.invalidate()
        self._latest.clear()
        return removed

    async def mutate(
        self,
        method: str,
        path: str,
        json: Any = None,
        invalidates: Iterable[str] = (),
        invalidate_prefixes: Iterable[str] = (),
    ) -> Any:
        result = await self.backend.request(method, path, json=json)
        self.invalidate(*invalidates)
        self.invalidate_prefix(*invalidate_prefixes)
        return result
