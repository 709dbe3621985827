# plantshop/core/resource_client.py
import logging
from typing import Any, Iterator

import httpx

from plantshop.core.config import get_settings

logger = logging.getLogger(__name__)


class ResourceStoreError(Exception):
    """
    Raised when the resource store cannot be reached or answers non-2xx.

    status_code is None for transport failures (connection refused, DNS, ...).
    """

    def __init__(self, method: str, path: str, status_code: int | None = None):
        self.method = method
        self.path = path
        self.status_code = status_code
        reason = f"HTTP {status_code}" if status_code else "transport failure"
        super().__init__(f"{method} {path} failed: {reason}")


class ResourceNotFoundError(ResourceStoreError):
    """The store answered 404 for the requested record."""


class ResourceClient:
    """
    Thin JSON wrapper around the REST resource store.

    - One shared httpx.Client (safe to use from worker threads).
    - No retry; no timeout unless one is configured.
    - Returns decoded JSON (None for empty bodies).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._http.close()

    # ---- verbs ----

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def post(self, path: str, body: dict[str, Any]) -> Any:
        return self._request("POST", path, body)

    def patch(self, path: str, body: dict[str, Any]) -> Any:
        return self._request("PATCH", path, body)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = self._http.request(method, path, json=body)
        except httpx.TransportError as exc:
            logger.error("%s %s: %s", method, path, exc)
            raise ResourceStoreError(method, path) from exc

        if response.status_code == 404:
            raise ResourceNotFoundError(method, path, 404)
        if response.is_error:
            logger.error("%s %s: HTTP %s", method, path, response.status_code)
            raise ResourceStoreError(method, path, response.status_code)

        if not response.content:
            return None
        return response.json()


def get_resource_client() -> Iterator[ResourceClient]:
    """
    FastAPI dependency that yields a ResourceClient bound to the configured store.

    Usage:

        @router.get("/example")
        def example_endpoint(client: ResourceClient = Depends(get_resource_client)):
            ...
    """
    settings = get_settings()
    client = ResourceClient(
        settings.RESOURCE_STORE_URL,
        timeout=settings.RESOURCE_STORE_TIMEOUT,
    )
    try:
        yield client
    finally:
        client.close()
