# liveref/core/resolution/backend.py
"""
Thin async client for the catalog products API.
"""
from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from liveref.contracts.catalog import CatalogBackend

logger = logging.getLogger(__name__)


class CatalogApiClient(CatalogBackend):
    """HTTP client for the catalog products API.

    Contract::

        GET  /products/{id}
        POST /products/query
        body: { asins: [str], include_browse_nodes: null }

    Both return the raw payload; no normalization happens here.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 10.0,
        api_key: str | None = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._timeout = timeout
        self._api_key = api_key

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["X-API-Key"] = self._api_key
        return headers

    async def fetch_by_id(self, entity_id: str) -> Any:
        return await self._request("GET", f"/products/{quote(entity_id, safe='')}")

    async def query_by_code(self, code: str) -> Any:
        return await self._request(
            "POST",
            "/products/query",
            json={"asins": [code], "include_browse_nodes": None},
        )

    async def _request(self, method: str, path: str, *, json: Any | None = None) -> Any:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                resp = await client.request(
                    method,
                    f"{self._base}{path}",
                    json=json,
                    headers=self._headers(),
                )
                resp.raise_for_status()
            except httpx.HTTPStatusError as ex:
                logger.warning(
                    "Catalog request failed method=%s path=%s status=%s",
                    method,
                    path,
                    ex.response.status_code,
                )
                raise
            except httpx.HTTPError as ex:
                logger.warning("Catalog request error method=%s path=%s: %s", method, path, ex)
                raise

            return resp.json()
