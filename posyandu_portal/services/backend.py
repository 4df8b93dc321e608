from typing import Any

import httpx
from fastapi import status

from posyandu_portal.core.config import settings
from posyandu_portal.utils.logging import get_backend_logger

logger = get_backend_logger()


class BackendError(Exception):
    """A request to the posyandu backend failed."""

    def __init__(self, status_code: int, message: str, data: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.data = data


def _unwrap(payload: Any) -> Any:
    # Backend wraps payloads as {"success": ..., "message": ..., "data": ...}
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Backend responded with {response.status_code}"


class BackendClient:
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        token = token if token is not None else settings.BACKEND_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.BACKEND_URL).rstrip("/"),
            headers=headers,
            timeout=timeout or settings.BACKEND_TIMEOUT,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: Any = None,
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}
        try:
            response = await self._client.request(
                method, path, params=params or None, json=json
            )
        except httpx.TimeoutException as exc:
            logger.error(f"Backend timeout: {method} {path}: {exc}")
            raise BackendError(
                status.HTTP_504_GATEWAY_TIMEOUT, "Backend did not respond in time."
            ) from exc
        except httpx.RequestError as exc:
            logger.error(f"Backend unreachable: {method} {path}: {exc}")
            raise BackendError(
                status.HTTP_502_BAD_GATEWAY, "Backend is unreachable."
            ) from exc

        if response.is_error:
            message = _error_message(response)
            if response.status_code >= 500:
                logger.error(
                    f"Backend {response.status_code} for {method} {path}: {message}"
                )
            else:
                logger.warning(
                    f"Backend {response.status_code} for {method} {path}: {message}"
                )
            raise BackendError(response.status_code, message)

        if response.status_code == status.HTTP_204_NO_CONTENT or not response.content:
            return None
        try:
            payload = response.json()
        except ValueError as exc:
            logger.error(f"Backend sent a non-JSON body for {method} {path}")
            raise BackendError(
                status.HTTP_502_BAD_GATEWAY, "Backend returned an invalid response."
            ) from exc
        return _unwrap(payload)

    async def get(self, path: str, params: dict | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def aclose(self):
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed
