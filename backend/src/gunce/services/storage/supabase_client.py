"""Supabase (PostgREST) REST client for the remote diary store."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from ...core.exceptions import StorageError
from ...core.logging import get_logger

logger = get_logger(__name__)

QueryParams = Sequence[Tuple[str, str]]


class SupabaseClient:
    """Thin async wrapper over the Supabase REST endpoint (``/rest/v1``)."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Supabase client.

        Args:
            base_url: Supabase project URL, e.g. https://xyz.supabase.co
            api_key: anon or service-role key
            timeout: per-request timeout in seconds
            transport: optional httpx transport (tests pass a MockTransport)
        """
        if not base_url or not api_key:
            raise StorageError("Supabase URL and key must be configured")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[QueryParams] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        url = f"{self.base_url}/rest/v1/{table}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(
                    method, url, params=list(params or []), json=json, headers=self._headers(prefer)
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase {method} {table} failed: {e}")
            raise StorageError(f"Remote store unreachable: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Supabase {method} {table} returned {response.status_code}: {response.text}")
            raise StorageError(f"Remote store error {response.status_code}: {response.text}")

        return response

    @staticmethod
    def _rows(response: httpx.Response) -> List[Dict[str, Any]]:
        if response.status_code == 204 or not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            raise StorageError("Remote store returned invalid JSON") from e
        if isinstance(data, dict):
            return [data]
        return data

    async def select(
        self, table: str, params: Optional[QueryParams] = None, columns: str = "*"
    ) -> List[Dict[str, Any]]:
        response = await self._request("GET", table, params=[("select", columns), *(params or [])])
        return self._rows(response)

    async def count(self, table: str, params: Optional[QueryParams] = None) -> int:
        """Exact row count from the Content-Range header (``0-9/42`` or ``*/0``)."""
        response = await self._request("HEAD", table, params=params, prefer="count=exact")
        content_range = response.headers.get("content-range", "")
        try:
            return int(content_range.rsplit("/", 1)[1])
        except (IndexError, ValueError) as e:
            raise StorageError(f"Remote store returned no count: {content_range!r}") from e

    async def insert(self, table: str, rows: List[Dict[str, Any]], upsert: bool = False) -> List[Dict[str, Any]]:
        prefer = "return=representation"
        if upsert:
            prefer += ",resolution=merge-duplicates"
        response = await self._request("POST", table, json=rows, prefer=prefer)
        return self._rows(response)

    async def update(self, table: str, params: QueryParams, values: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = await self._request("PATCH", table, params=params, json=values, prefer="return=representation")
        return self._rows(response)

    async def delete(self, table: str, params: QueryParams) -> List[Dict[str, Any]]:
        response = await self._request("DELETE", table, params=params, prefer="return=representation")
        return self._rows(response)

    async def health_check(self, table: str) -> bool:
        try:
            await self._request("GET", table, params=[("select", "id"), ("limit", "1")])
            return True
        except StorageError:
            return False
